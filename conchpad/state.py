"""Mutable editor session state: cursor, viewport, status message and buffer."""

from __future__ import annotations

from dataclasses import dataclass, field

from .rows import Buffer

QUIT_TIMES = 3
STATUS_MESSAGE_SECONDS = 5.0


@dataclass
class EditorState:
    screen_rows: int
    screen_cols: int
    buffer: Buffer = field(default_factory=Buffer)
    filename: str | None = None
    cx: int = 0
    cy: int = 0
    rx: int = 0
    row_offset: int = 0
    col_offset: int = 0
    status_message: str = ""
    status_time: float = 0.0
    status_message_seconds: float = STATUS_MESSAGE_SECONDS
    quit_times: int = QUIT_TIMES

    @property
    def num_rows(self) -> int:
        return len(self.buffer)

    @property
    def dirty(self) -> int:
        return self.buffer.dirty

    def status_visible(self, now: float) -> bool:
        return bool(self.status_message) and now - self.status_time < self.status_message_seconds
