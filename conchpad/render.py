"""Frame rendering for the editor viewport.

Builds one complete frame (rows, status bar, message bar, cursor placement)
as a single byte string. ``draw_screen`` emits it with exactly one write.
"""

from __future__ import annotations

import os
import time

from .state import EditorState

CONCHPAD_VERSION = "0.0.1"
WELCOME_MESSAGE = f"ConchPad editor -- version {CONCHPAD_VERSION}"
NO_NAME = "[No Name]"

HIDE_CURSOR = b"\x1b[?25l"
SHOW_CURSOR = b"\x1b[?25h"
CURSOR_HOME = b"\x1b[H"
CLEAR_LINE = b"\x1b[K"
REVERSE_VIDEO = b"\x1b[7m"
RESET_STYLE = b"\x1b[m"


def scroll(state: EditorState) -> None:
    """Recompute ``rx`` and the viewport offsets so the cursor is visible."""
    row = state.buffer.row(state.cy)
    state.rx = row.cx_to_rx(state.cx) if row is not None else 0

    if state.cy < state.row_offset:
        state.row_offset = state.cy
    if state.cy >= state.row_offset + state.screen_rows:
        state.row_offset = state.cy - state.screen_rows + 1
    if state.rx < state.col_offset:
        state.col_offset = state.rx
    if state.rx >= state.col_offset + state.screen_cols:
        state.col_offset = state.rx - state.screen_cols + 1


def welcome_line(width: int) -> bytes:
    """Return the centered welcome banner shown on an empty buffer."""
    welcome = WELCOME_MESSAGE[:width]
    padding = (width - len(welcome)) // 2
    out = ""
    if padding:
        out = "~"
        padding -= 1
    out += " " * padding + welcome
    return out.encode("ascii")


def build_status_line(left_text: str, right_text: str, width: int) -> str:
    """Left-align ``left_text`` and right-align ``right_text`` in ``width`` cells."""
    left = left_text[:width]
    if len(left) + len(right_text) > width:
        return left + " " * (width - len(left))
    gap = " " * (width - len(left) - len(right_text))
    return f"{left}{gap}{right_text}"


def status_bar_text(state: EditorState) -> str:
    name = state.filename[:20] if state.filename else NO_NAME
    modified = " (modified)" if state.dirty else ""
    left = f"{name} - {state.num_rows} lines{modified}"
    right = f"{state.cy + 1}/{state.num_rows}"
    return build_status_line(left, right, state.screen_cols)


def _draw_rows(state: EditorState, out: list[bytes]) -> None:
    for y in range(state.screen_rows):
        file_row = y + state.row_offset
        row = state.buffer.row(file_row)
        if row is None:
            if state.num_rows == 0 and y == state.screen_rows // 3:
                out.append(welcome_line(state.screen_cols))
            else:
                out.append(b"~")
        else:
            out.append(row.render[state.col_offset : state.col_offset + state.screen_cols])
        out.append(CLEAR_LINE)
        out.append(b"\r\n")


def render_frame(state: EditorState, now: float) -> bytes:
    """Compose a full frame for ``state``; ``now`` gates status-message expiry."""
    out: list[bytes] = [HIDE_CURSOR, CURSOR_HOME]
    _draw_rows(state, out)

    out.append(REVERSE_VIDEO)
    out.append(status_bar_text(state).encode("utf-8", errors="replace"))
    out.append(RESET_STYLE)
    out.append(b"\r\n")

    out.append(CLEAR_LINE)
    if state.status_visible(now):
        out.append(state.status_message[: state.screen_cols].encode("utf-8", errors="replace"))

    cursor_row = state.cy - state.row_offset + 1
    cursor_col = state.rx - state.col_offset + 1
    out.append(f"\x1b[{cursor_row};{cursor_col}H".encode("ascii"))
    out.append(SHOW_CURSOR)
    return b"".join(out)


def draw_screen(fd: int, state: EditorState, now: float | None = None) -> None:
    """Scroll, render and emit one frame in a single write."""
    scroll(state)
    frame = render_frame(state, time.time() if now is None else now)
    # Display writes are best-effort; the next frame redraws everything.
    os.write(fd, frame)
