"""In-memory row store for the edited file.

Each row keeps its raw bytes plus a tab-expanded render form.
The buffer owns the rows and counts every mutation in ``dirty``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

TAB = 0x09
DEFAULT_TAB_STOP = 8


def expand_tabs(raw: bytes, tab_stop: int = DEFAULT_TAB_STOP) -> bytes:
    """Expand tab bytes to spaces aligned on ``tab_stop`` columns."""
    if TAB not in raw:
        return bytes(raw)
    out = bytearray()
    for byte in raw:
        if byte == TAB:
            out.append(0x20)
            while len(out) % tab_stop != 0:
                out.append(0x20)
        else:
            out.append(byte)
    return bytes(out)


@dataclass
class Row:
    raw: bytearray = field(default_factory=bytearray)
    render: bytes = b""
    tab_stop: int = DEFAULT_TAB_STOP

    def __post_init__(self) -> None:
        self.raw = bytearray(self.raw)
        self.update()

    def update(self) -> None:
        """Recompute ``render`` from ``raw``; called after every raw mutation."""
        self.render = expand_tabs(self.raw, self.tab_stop)

    def __len__(self) -> int:
        return len(self.raw)

    def cx_to_rx(self, cx: int) -> int:
        """Map a raw column to the render column the cursor is drawn at."""
        rx = 0
        for byte in self.raw[: max(0, cx)]:
            if byte == TAB:
                rx += (self.tab_stop - 1) - (rx % self.tab_stop)
            rx += 1
        return rx


class Buffer:
    """Ordered rows addressed by line index, with a mutation counter."""

    def __init__(self, tab_stop: int = DEFAULT_TAB_STOP) -> None:
        self.tab_stop = tab_stop
        self.rows: list[Row] = []
        self.dirty = 0

    @classmethod
    def from_bytes(cls, data: bytes, tab_stop: int = DEFAULT_TAB_STOP) -> Buffer:
        """Build a clean buffer with one row per physical line of ``data``.

        Trailing ``\\r``/``\\n`` bytes are stripped from each line and a final
        newline does not produce an extra empty row.
        """
        buffer = cls(tab_stop=tab_stop)
        if data:
            lines = data.split(b"\n")
            if lines[-1] == b"":
                lines.pop()
            for line in lines:
                buffer.insert_row(len(buffer.rows), line.rstrip(b"\r\n"))
        buffer.dirty = 0
        return buffer

    def __len__(self) -> int:
        return len(self.rows)

    def row(self, at: int) -> Row | None:
        if 0 <= at < len(self.rows):
            return self.rows[at]
        return None

    def insert_row(self, at: int, data: bytes = b"") -> None:
        if at < 0 or at > len(self.rows):
            return
        self.rows.insert(at, Row(bytearray(data), tab_stop=self.tab_stop))
        self.dirty += 1

    def delete_row(self, at: int) -> None:
        if at < 0 or at >= len(self.rows):
            return
        del self.rows[at]
        self.dirty += 1

    def row_insert_char(self, row: Row, at: int, byte: int) -> None:
        if at < 0 or at > len(row.raw):
            at = len(row.raw)
        row.raw.insert(at, byte)
        row.update()
        self.dirty += 1

    def row_delete_char(self, row: Row, at: int) -> None:
        if at < 0 or at >= len(row.raw):
            return
        del row.raw[at]
        row.update()
        self.dirty += 1

    def row_truncate(self, row: Row, at: int) -> None:
        if at < 0 or at >= len(row.raw):
            return
        del row.raw[at:]
        row.update()
        self.dirty += 1

    def row_append_bytes(self, row: Row, data: bytes) -> None:
        row.raw.extend(data)
        row.update()
        self.dirty += 1

    def serialize(self) -> bytes:
        """Return the save payload: each row followed by a single newline."""
        return b"".join(bytes(row.raw) + b"\n" for row in self.rows)

    def mark_clean(self) -> None:
        self.dirty = 0
