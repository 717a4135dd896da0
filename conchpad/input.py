"""Low-level terminal input decoding.

Reads raw bytes from the input fd and translates them into key tokens.
Escape sequences are read with a short per-byte timeout so a lone ESC never
blocks waiting for bytes that are not coming.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

_TILDE_KEYS = {
    b"1": "HOME",
    b"3": "DEL",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
    b"7": "HOME",
    b"8": "END",
}

_CSI_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_SS3_KEYS = {
    b"H": "HOME",
    b"F": "END",
}


def ctrl_key(letter: str) -> str:
    """Return the token produced for ``Ctrl+<letter>``."""
    return f"CTRL_{letter.upper()}"


class KeyReader:
    """Decode keypresses from one input fd.

    Bytes read past an abandoned escape sequence are kept in ``pending`` and
    returned by the following ``read_key`` call.
    """

    def __init__(self, fd: int, esc_timeout_ms: int = ESC_SEQUENCE_TIMEOUT_MS) -> None:
        self.fd = fd
        self.esc_timeout_ms = esc_timeout_ms
        self.pending: list[bytes] = []

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or ``""`` if ``timeout_ms`` elapses first.

        Raises ``EOFError`` when the input channel is closed.
        """
        if self.pending:
            ch = self.pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = os.read(self.fd, 1)
            if not ch:
                raise EOFError("input closed")

        if ch == b"\x1b":
            return self._read_escape_sequence()
        if ch == b"\r":
            return "ENTER"
        if ch in {b"\x08", b"\x7f"}:
            return "BACKSPACE"
        if ch == b"\t":
            return "\t"
        code = ch[0]
        if 0x01 <= code <= 0x1A:
            return ctrl_key(chr(code + 0x40))
        return ch.decode("latin-1")

    def _read_escape_sequence(self) -> str:
        seq = self._read_ready_byte(self.esc_timeout_ms)
        if seq is None:
            return "ESC"
        if seq not in {b"[", b"O"}:
            self.pending.append(seq)
            return "ESC"

        if seq == b"O":
            final = self._read_ready_byte(self.esc_timeout_ms)
            if final is None:
                return "ESC"
            return _SS3_KEYS.get(final, "ESC")

        # CSI: parameter and intermediate bytes (0x20-0x3F) up to one final
        # byte (0x40-0x7E); the whole sequence is consumed even when unknown.
        params: list[bytes] = []
        while True:
            part = self._read_ready_byte(self.esc_timeout_ms)
            if part is None:
                return "ESC"
            if 0x40 <= part[0] <= 0x7E:
                final = part
                break
            if not 0x20 <= part[0] <= 0x3F:
                self.pending.append(part)
                return "ESC"
            params.append(part)
            if len(params) > 64:
                return "ESC"

        if not params:
            return _CSI_KEYS.get(final, "ESC")
        if final == b"~" and len(params) == 1:
            return _TILDE_KEYS.get(params[0], "ESC")
        return "ESC"
