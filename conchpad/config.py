"""Persistent JSON settings for the editor.

Reads tab stop, quit confirmation count and status-message lifetime.
All access is defensive: malformed or missing config falls back to defaults.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from .rows import DEFAULT_TAB_STOP
from .state import QUIT_TIMES, STATUS_MESSAGE_SECONDS

APP_NAME = "conchpad"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class EditorSettings:
    tab_stop: int = DEFAULT_TAB_STOP
    quit_times: int = QUIT_TIMES
    status_message_seconds: float = STATUS_MESSAGE_SECONDS


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def _int_setting(data: dict[str, object], key: str, default: int, minimum: int) -> int:
    # bool is an int subclass; reject it explicitly.
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value if value >= minimum else default


def _seconds_setting(data: dict[str, object], key: str, default: float) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value) if value > 0 else default


def load_settings() -> EditorSettings:
    """Build ``EditorSettings`` from the config file, field by field."""
    data = load_config()
    return EditorSettings(
        tab_stop=_int_setting(data, "tab_stop", DEFAULT_TAB_STOP, 1),
        quit_times=_int_setting(data, "quit_times", QUIT_TIMES, 0),
        status_message_seconds=_seconds_setting(data, "status_message_seconds", STATUS_MESSAGE_SECONDS),
    )
