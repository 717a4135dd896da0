"""Command-line front door for conchpad.

Parses arguments, loads settings and the target file, then runs the editor.
Fatal startup errors exit with a message on stderr once the tty is restored.
"""

from __future__ import annotations

import argparse
import logging
import sys
import termios
from pathlib import Path

from .config import load_settings
from .fileio import load_buffer
from .logs import configure_logging
from .rows import Buffer
from .runtime import run_editor
from .terminal import TerminalSizeError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="conchpad", description="Minimal terminal text editor.")
    parser.add_argument("filename", nargs="?", default=None, help="File to edit. Omit to start an unnamed buffer.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log verbosity for the log file (default: WARNING).",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse ``argv`` (defaults to ``sys.argv[1:]``) and launch the editor."""
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    settings = load_settings()

    if args.filename is not None:
        try:
            buffer = load_buffer(Path(args.filename), tab_stop=settings.tab_stop)
        except OSError as exc:
            logger.error("cannot open %s: %s", args.filename, exc)
            raise SystemExit(f"conchpad: {args.filename}: {exc.strerror or exc}") from exc
    else:
        buffer = Buffer(tab_stop=settings.tab_stop)

    try:
        run_editor(args.filename, buffer, settings, sys.stdin.fileno(), sys.stdout.fileno())
    except termios.error as exc:
        logger.error("terminal setup failed: %s", exc)
        raise SystemExit("conchpad: standard input is not a terminal") from exc
    except TerminalSizeError as exc:
        logger.error("%s", exc)
        raise SystemExit(f"conchpad: {exc}") from exc
    except EOFError as exc:
        logger.error("input closed")
        raise SystemExit("conchpad: input closed") from exc


if __name__ == "__main__":
    main()
