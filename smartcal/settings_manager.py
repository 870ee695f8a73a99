"""
Settings management for calendar display preferences.

Tracks the timezone used for day bucketing and the per-view display caps.
Settings are persisted to ~/.smartcal/settings.json (or $SMARTCAL_HOME) so the
choice survives across runs.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, TypedDict

from smartcal.clock import resolve_timezone
from smartcal.event_models import VIEW_DAY, VIEW_MONTH, VIEW_WEEK, check_view
from smartcal.event_normalizer import DEFAULT_DISPLAY_CAPS
from smartcal.logging_helper import Log


class SettingsSchema(TypedDict, total=False):
    timezone: str
    month_display_cap: Optional[int]
    week_display_cap: Optional[int]
    day_display_cap: Optional[int]


DEFAULT_SETTINGS: SettingsSchema = {
    "timezone": "local",
    "month_display_cap": DEFAULT_DISPLAY_CAPS[VIEW_MONTH],
    "week_display_cap": DEFAULT_DISPLAY_CAPS[VIEW_WEEK],
    "day_display_cap": DEFAULT_DISPLAY_CAPS[VIEW_DAY],
}


def settings_dir() -> Path:
    override = os.getenv("SMARTCAL_HOME", "").strip()
    if override:
        return Path(override)
    return Path.home() / ".smartcal"


def settings_file() -> Path:
    return settings_dir() / "settings.json"


def _ensure_settings_dir() -> None:
    try:
        settings_dir().mkdir(parents=True, exist_ok=True)
    except Exception as err:
        Log.warn(f"Unable to create settings directory {settings_dir()}: {err}")


def load_settings() -> SettingsSchema:
    """
    Load settings from disk, falling back to defaults if anything fails.
    """
    path = settings_file()
    if not path.exists():
        Log.info(f"Settings file not found, using defaults: {path}")
        return DEFAULT_SETTINGS.copy()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Settings data is not a JSON object")
    except Exception as err:
        Log.warn(f"Failed to read settings file ({path}): {err}")
        return DEFAULT_SETTINGS.copy()

    merged: SettingsSchema = DEFAULT_SETTINGS.copy()
    # Merge only known keys
    for key in DEFAULT_SETTINGS:
        if key in data:
            merged[key] = data[key]  # type: ignore[literal-required]
    return merged


def save_settings(settings: SettingsSchema) -> None:
    """
    Persist settings to disk.
    """
    _ensure_settings_dir()
    path = settings_file()
    try:
        path.write_text(
            json.dumps(settings, indent=2, sort_keys=True),
            encoding="utf-8",
        )
    except Exception as err:
        Log.warn(f"Failed to write settings file ({path}): {err}")


def _valid_cap(value) -> bool:
    if value is None:
        return True
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def get_timezone_name() -> str:
    settings = load_settings()
    name = settings.get("timezone", DEFAULT_SETTINGS["timezone"])
    if not isinstance(name, str) or not name.strip():
        Log.warn(f"Invalid timezone value '{name}', defaulting to local")
        name = "local"
    return name


def get_display_cap(view: str) -> Optional[int]:
    key = f"{check_view(view)}_display_cap"
    settings = load_settings()
    value = settings.get(key, DEFAULT_SETTINGS[key])
    if not _valid_cap(value):
        Log.warn(f"Invalid {key} value '{value}', defaulting to {DEFAULT_SETTINGS[key]}")
        value = DEFAULT_SETTINGS[key]
    return value


def set_display_cap(view: str, value: Optional[int]) -> None:
    key = f"{check_view(view)}_display_cap"
    if not _valid_cap(value):
        raise ValueError(f"Invalid display cap: {value}")
    settings = load_settings()
    settings[key] = value  # type: ignore[literal-required]
    save_settings(settings)
    Log.info(f"Saved {key} setting: {value}")


def set_timezone_name(value: str) -> None:
    resolve_timezone(value)
    settings = load_settings()
    settings["timezone"] = value
    save_settings(settings)
    Log.info(f"Saved timezone setting: {value}")
