"""Terminal control helpers for the editor session.

Owns raw-mode lifecycle, alternate-screen switching, and the window-size
query with a cursor-position probe fallback.
"""

from __future__ import annotations

import contextlib
import os
import re
import select
import termios
import tty

_CURSOR_REPORT_RE = re.compile(rb"\x1b\[(\d+);(\d+)R")
_PROBE_TIMEOUT_SECONDS = 1.0


class TerminalSizeError(Exception):
    """Raised when the terminal does not report a usable size."""


class TerminalController:
    """Switch the tty between its original mode and raw editing mode."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_raw_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen and clear it.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[2J\x1b[H")

    def restore(self) -> None:
        """Clear the screen and put back the tty attributes captured at start."""
        os.write(self.stdout_fd, b"\x1b[2J\x1b[H\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        """Bracket the editing session; the tty is restored on every exit path."""
        try:
            self.enable_raw_mode()
            yield self
        finally:
            self.restore()

    def window_size(self) -> tuple[int, int]:
        """Return ``(rows, cols)``, probing the cursor when ioctl reports nothing."""
        try:
            size = os.get_terminal_size(self.stdout_fd)
        except OSError:
            size = None
        if size is not None and size.columns > 0 and size.lines > 0:
            return size.lines, size.columns
        return self._probe_window_size()

    def _probe_window_size(self) -> tuple[int, int]:
        # Push the cursor to the bottom-right corner, then ask where it is.
        os.write(self.stdout_fd, b"\x1b[999C\x1b[999B\x1b[6n")
        reply = b""
        while len(reply) < 32 and not reply.endswith(b"R"):
            ready, _, _ = select.select([self.stdin_fd], [], [], _PROBE_TIMEOUT_SECONDS)
            if not ready:
                break
            ch = os.read(self.stdin_fd, 1)
            if not ch:
                break
            reply += ch
        match = _CURSOR_REPORT_RE.search(reply)
        if match is None:
            raise TerminalSizeError("could not determine terminal size")
        rows, cols = int(match.group(1)), int(match.group(2))
        if rows <= 0 or cols <= 0:
            raise TerminalSizeError("could not determine terminal size")
        return rows, cols
