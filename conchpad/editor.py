"""Editor controller: routes key tokens to cursor moves and buffer edits.

Owns the ``EditorState`` for the session. Drawing and key reading are
injected so the interactive prompt can reuse the main render/read cycle.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .config import EditorSettings
from .fileio import SaveError, save_buffer
from .input import ctrl_key
from .key_registry import KeyBinding, KeyRegistry
from .rows import Buffer
from .state import EditorState

logger = logging.getLogger(__name__)

SAVE_PROMPT = "Save as: {} (ESC to cancel)"
QUIT_WARNING = "WARNING!!! File has unsaved changes. Press Ctrl-Q {} more times to quit."
HELP_MESSAGE = "HELP: Ctrl-S = save | Ctrl-Q = quit"


@dataclass(frozen=True)
class EditorIO:
    """Screen and keyboard operations the controller drives."""

    draw: Callable[[EditorState], None]
    read_key: Callable[[], str]


def is_insertable(key: str) -> bool:
    """Return whether ``key`` is a literal byte that belongs in the buffer."""
    if len(key) != 1:
        return False
    code = ord(key)
    return key == "\t" or (code >= 0x20 and code != 0x7F)


class Editor:
    def __init__(
        self,
        state: EditorState,
        io: EditorIO,
        settings: EditorSettings | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.state = state
        self.io = io
        self.settings = settings if settings is not None else EditorSettings()
        self.clock = clock
        self.state.quit_times = self.settings.quit_times
        self.state.status_message_seconds = self.settings.status_message_seconds
        self.keys = KeyRegistry(fallback=self._insert_key).bind(
            KeyBinding(("UP", "DOWN", "LEFT", "RIGHT"), self.move_cursor),
            KeyBinding(("PAGE_UP", "PAGE_DOWN"), self._page_key),
            KeyBinding(("HOME",), lambda _key: self.move_home()),
            KeyBinding(("END",), lambda _key: self.move_end()),
            KeyBinding(("ENTER",), lambda _key: self.insert_newline()),
            KeyBinding(("BACKSPACE", ctrl_key("h")), lambda _key: self.delete_char()),
            KeyBinding(("DEL",), lambda _key: self.delete_forward()),
            KeyBinding((ctrl_key("s"),), lambda _key: self.save()),
            KeyBinding((ctrl_key("q"),), self._quit_key),
            KeyBinding((ctrl_key("l"), "ESC"), lambda _key: None),
        )

    @classmethod
    def open(
        cls,
        filename: str | None,
        buffer: Buffer,
        screen_rows: int,
        screen_cols: int,
        io: EditorIO,
        settings: EditorSettings | None = None,
    ) -> Editor:
        """Create a controller for a loaded (or empty) buffer and terminal size.

        Two screen rows are reserved for the status and message bars.
        """
        state = EditorState(
            screen_rows=max(1, screen_rows - 2),
            screen_cols=max(1, screen_cols),
            buffer=buffer,
            filename=filename,
        )
        editor = cls(state, io, settings)
        editor.set_status_message(HELP_MESSAGE)
        return editor

    @property
    def buffer(self) -> Buffer:
        return self.state.buffer

    def set_status_message(self, message: str) -> None:
        self.state.status_message = message
        self.state.status_time = self.clock()

    def refresh_screen(self) -> None:
        self.io.draw(self.state)

    # Cursor movement

    def move_cursor(self, key: str) -> None:
        state = self.state
        row = self.buffer.row(state.cy)

        if key == "LEFT":
            if state.cx != 0:
                state.cx -= 1
            elif state.cy > 0:
                state.cy -= 1
                state.cx = len(self.buffer.rows[state.cy])
        elif key == "RIGHT":
            if row is not None and state.cx < len(row):
                state.cx += 1
            elif row is not None and state.cy + 1 < state.num_rows:
                state.cy += 1
                state.cx = 0
        elif key == "UP":
            if state.cy != 0:
                state.cy -= 1
        elif key == "DOWN":
            if state.cy < state.num_rows:
                state.cy += 1

        row = self.buffer.row(state.cy)
        row_len = len(row) if row is not None else 0
        if state.cx > row_len:
            state.cx = row_len

    def _page_key(self, key: str) -> None:
        state = self.state
        if key == "PAGE_UP":
            state.cy = state.row_offset
        else:
            state.cy = min(state.row_offset + state.screen_rows - 1, state.num_rows)
        step = "UP" if key == "PAGE_UP" else "DOWN"
        for _ in range(state.screen_rows):
            self.move_cursor(step)

    def move_home(self) -> None:
        self.state.cx = 0

    def move_end(self) -> None:
        row = self.buffer.row(self.state.cy)
        self.state.cx = len(row) if row is not None else 0

    # Editing

    def insert_char(self, byte: int) -> None:
        state = self.state
        if state.cy == state.num_rows:
            self.buffer.insert_row(state.num_rows, b"")
        self.buffer.row_insert_char(self.buffer.rows[state.cy], state.cx, byte)
        state.cx += 1

    def insert_newline(self) -> None:
        state = self.state
        if state.cx == 0:
            self.buffer.insert_row(state.cy, b"")
        else:
            row = self.buffer.rows[state.cy]
            self.buffer.insert_row(state.cy + 1, bytes(row.raw[state.cx :]))
            self.buffer.row_truncate(row, state.cx)
        state.cy += 1
        state.cx = 0

    def delete_char(self) -> None:
        state = self.state
        if state.cy == state.num_rows:
            return
        if state.cx == 0 and state.cy == 0:
            return

        row = self.buffer.rows[state.cy]
        if state.cx > 0:
            self.buffer.row_delete_char(row, state.cx - 1)
            state.cx -= 1
        else:
            previous = self.buffer.rows[state.cy - 1]
            state.cx = len(previous)
            self.buffer.row_append_bytes(previous, bytes(row.raw))
            self.buffer.delete_row(state.cy)
            state.cy -= 1

    def delete_forward(self) -> None:
        before = (self.state.cx, self.state.cy)
        self.move_cursor("RIGHT")
        if (self.state.cx, self.state.cy) == before:
            return
        self.delete_char()

    def _insert_key(self, key: str) -> None:
        if is_insertable(key):
            self.insert_char(ord(key))

    # Prompt, save, quit

    def prompt(self, template: str) -> str | None:
        """Read a line of input on the message bar.

        ``template`` receives the text typed so far via ``str.format``.
        Returns ``None`` when cancelled with ESC.
        """
        text = ""
        while True:
            self.set_status_message(template.format(text))
            self.refresh_screen()
            key = self.io.read_key()
            if key in {"BACKSPACE", "DEL", ctrl_key("h")}:
                text = text[:-1]
            elif key == "ESC":
                self.set_status_message("")
                return None
            elif key == "ENTER":
                if text:
                    self.set_status_message("")
                    return text
            elif len(key) == 1 and 0x20 <= ord(key) < 0x7F:
                text += key

    def save(self) -> None:
        state = self.state
        if state.filename is None:
            filename = self.prompt(SAVE_PROMPT)
            if filename is None:
                self.set_status_message("Save aborted")
                return
            state.filename = filename

        try:
            written = save_buffer(self.buffer, Path(state.filename))
        except SaveError as exc:
            logger.warning("save to %s failed: %s", state.filename, exc)
            self.set_status_message(f"Can't save! I/O error: {exc}")
            return
        self.set_status_message(f"{written} bytes written to disk")

    def _quit_key(self, _key: str) -> bool:
        if self.state.dirty and self.state.quit_times > 0:
            self.set_status_message(QUIT_WARNING.format(self.state.quit_times))
            self.state.quit_times -= 1
            return False
        return True

    def process_key(self, key: str) -> bool:
        """Apply one key token. Returns ``True`` when the editor should exit."""
        should_quit = self.keys.dispatch(key)
        if key != ctrl_key("q"):
            self.state.quit_times = self.settings.quit_times
        return should_quit
