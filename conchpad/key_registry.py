"""Key-token dispatch table used by the editor controller."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

KeyHandler = Callable[[str], bool | None]


@dataclass(frozen=True)
class KeyBinding:
    """One handler bound to every token in ``keys``."""

    keys: tuple[str, ...]
    handler: KeyHandler


class KeyRegistry:
    """Map key tokens to handlers, with an optional fallback for unbound keys.

    Handlers receive the key token. A truthy return value tells the caller to
    stop the editor.
    """

    def __init__(self, fallback: KeyHandler | None = None) -> None:
        self._fallback = fallback
        self._handlers: dict[str, KeyHandler] = {}

    def bind(self, *bindings: KeyBinding) -> KeyRegistry:
        for binding in bindings:
            for key in binding.keys:
                self._handlers[key] = binding.handler
        return self

    def dispatch(self, key: str) -> bool:
        handler = self._handlers.get(key, self._fallback)
        if handler is None:
            return False
        return bool(handler(key))
