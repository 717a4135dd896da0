"""Main interactive loop and session composition.

Wires the terminal, key reader, renderer and controller together.
Each iteration is render -> read one key -> dispatch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial

from .config import EditorSettings
from .editor import Editor, EditorIO
from .input import KeyReader
from .render import draw_screen
from .rows import Buffer
from .terminal import TerminalController

logger = logging.getLogger(__name__)

# Wake up periodically so an expired status message gets cleared.
IDLE_REDRAW_TIMEOUT_MS = 1000


def run_main_loop(editor: Editor, read_key: Callable[[], str]) -> None:
    """Run until the controller asks to quit.

    An empty key means the read timed out; the loop just redraws.
    """
    while True:
        editor.refresh_screen()
        key = read_key()
        if key == "":
            continue
        if editor.process_key(key):
            break


def run_editor(
    filename: str | None,
    buffer: Buffer,
    settings: EditorSettings,
    stdin_fd: int,
    stdout_fd: int,
) -> None:
    """Enter raw mode, size the viewport, and edit ``buffer`` until quit.

    ``TerminalSizeError`` and ``EOFError`` propagate after the tty is restored.
    """
    terminal = TerminalController(stdin_fd, stdout_fd)
    reader = KeyReader(stdin_fd)

    def read_key() -> str:
        return reader.read_key(timeout_ms=IDLE_REDRAW_TIMEOUT_MS)

    with terminal.raw_mode():
        rows, cols = terminal.window_size()
        logger.info("terminal size %dx%d", cols, rows)
        io = EditorIO(draw=partial(draw_screen, stdout_fd), read_key=read_key)
        editor = Editor.open(filename, buffer, rows, cols, io, settings)
        run_main_loop(editor, read_key)
