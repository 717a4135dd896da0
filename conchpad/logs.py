"""File logging setup.

The terminal is in raw mode while the editor runs, so log records go to a
file in the per-user log directory instead of stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path

from platformdirs import user_log_dir

from .config import APP_NAME

LOG_FILENAME = "conchpad.log"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEFAULT_LOG_PATH = Path(user_log_dir(APP_NAME, appauthor=False)) / LOG_FILENAME


def configure_logging(level: str = "WARNING", path: Path | None = None) -> Path | None:
    """Attach a file handler to the package logger.

    Returns the log path in use, or ``None`` when the file could not be
    opened; logging is then silently disabled.
    """
    package_logger = logging.getLogger("conchpad")
    package_logger.setLevel(level.upper())
    package_logger.propagate = False
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    log_path = path if path is not None else DEFAULT_LOG_PATH
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        package_logger.addHandler(logging.NullHandler())
        return None
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    return log_path
