"""Load and save helpers for the edited file.

Loading is all-or-nothing; saving writes a sibling temp file first and only
replaces the target after every byte has been written.
"""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from pathlib import Path

from .rows import DEFAULT_TAB_STOP, Buffer

logger = logging.getLogger(__name__)


class SaveError(Exception):
    """Raised when the buffer could not be persisted; the target is untouched."""


def load_buffer(path: Path, tab_stop: int = DEFAULT_TAB_STOP) -> Buffer:
    """Read ``path`` into a clean buffer. ``OSError`` propagates to the caller."""
    data = Path(path).read_bytes()
    buffer = Buffer.from_bytes(data, tab_stop=tab_stop)
    logger.info("loaded %s: %d bytes, %d rows", path, len(data), len(buffer))
    return buffer


def _existing_mode(path: Path) -> int | None:
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return None
    except OSError as exc:
        raise SaveError(exc.strerror or str(exc)) from exc


def write_file_atomic(path: Path, payload: bytes) -> int:
    """Write ``payload`` to ``path`` without ever leaving it half-written.

    Returns the number of bytes written. Short writes and OS errors raise
    ``SaveError`` after removing the temporary file.
    """
    # Symlinks stay in place; the file they point at receives the data.
    target = Path(os.path.realpath(path))
    directory = target.parent
    mode = _existing_mode(target)
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=directory)
    except OSError as exc:
        raise SaveError(exc.strerror or str(exc)) from exc

    try:
        try:
            written = os.write(fd, payload)
            if written != len(payload):
                raise SaveError(f"short write ({written} of {len(payload)} bytes)")
            os.fchmod(fd, mode if mode is not None else 0o644)
            os.fsync(fd)
        finally:
            os.close(fd)
        os.replace(tmp_name, target)
    except OSError as exc:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise SaveError(exc.strerror or str(exc)) from exc
    except SaveError:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(tmp_name)
        raise
    return written


def save_buffer(buffer: Buffer, path: Path) -> int:
    """Serialize ``buffer`` to ``path`` and mark it clean on success."""
    payload = buffer.serialize()
    written = write_file_atomic(path, payload)
    buffer.mark_clean()
    logger.info("saved %s: %d bytes", path, written)
    return written
