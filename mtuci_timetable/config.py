"""Settings persisted between syncs."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .errors import ConfigError
from .models import Building

CONFIG_PATH = Path(os.path.expanduser("~/.config/mtuci_timetable/settings.json"))
API_KEY_ENV = "MTUCI_TIMETABLE_API_KEY"
DEFAULT_NOTES_PATH = "календарь/мтуси"


@dataclass
class CommuteTime:
    forwards: str = ""
    backwards: str = ""


@dataclass
class CommuteConfig:
    OP: CommuteTime = field(default_factory=CommuteTime)
    A: CommuteTime = field(default_factory=CommuteTime)

    def for_building(self, building: Building) -> CommuteTime:
        return getattr(self, building.name)


@dataclass
class Settings:
    api_key: str = ""
    generate_commute: bool = True
    path: str = DEFAULT_NOTES_PATH
    commute: CommuteConfig = field(default_factory=CommuteConfig)

    def to_json(self) -> Dict[str, Any]:
        return {
            "apiKey": self.api_key,
            "generateCommute": self.generate_commute,
            "path": self.path,
            "commute": {
                name: {
                    "forwards": getattr(self.commute, name).forwards,
                    "backwards": getattr(self.commute, name).backwards,
                }
                for name in ("OP", "A")
            },
        }


def _settings_from_json(data: Dict[str, Any]) -> Settings:
    settings = Settings()
    for key in ("apiKey", "generateCommute", "path"):
        if key in data:
            set_option(settings, key, data[key])
    commute = data.get("commute") or {}
    if not isinstance(commute, dict):
        raise ConfigError("'commute' must be an object")
    for name, times in commute.items():
        if not isinstance(times, dict):
            raise ConfigError(f"'commute.{name}' must be an object")
        for leg, value in times.items():
            set_option(settings, f"commute.{name}.{leg}", value)
    return settings


def load_settings(path: Path = CONFIG_PATH) -> Settings:
    """Load stored settings over the defaults.

    ``MTUCI_TIMETABLE_API_KEY`` takes precedence over the stored API key.
    """

    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise ConfigError(f"Cannot read settings from {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} does not contain an object")
        settings = _settings_from_json(data)
    else:
        logging.debug("No settings at %s, using defaults", path)
        settings = Settings()

    api_key = os.getenv(API_KEY_ENV)
    if api_key:
        settings.api_key = api_key
    return settings


def save_settings(settings: Settings, path: Path = CONFIG_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(settings.to_json(), ensure_ascii=False, indent=2), encoding="utf-8"
    )


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "yes", "on", "1"):
        return True
    if isinstance(value, str) and value.lower() in ("false", "no", "off", "0"):
        return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


def set_option(settings: Settings, key: str, value: Any) -> None:
    """Set one option by its dotted name, e.g. ``commute.OP.forwards``."""

    if key == "apiKey":
        settings.api_key = str(value)
    elif key == "generateCommute":
        settings.generate_commute = _parse_bool(value)
    elif key == "path":
        settings.path = str(value).strip("/")
    elif key.startswith("commute."):
        from .commute import parse_duration  # commute imports this module

        parts = key.split(".")
        if len(parts) != 3 or parts[1] not in ("OP", "A") or parts[2] not in (
            "forwards",
            "backwards",
        ):
            raise ConfigError(f"Unknown setting {key!r}")
        if not isinstance(value, str):
            raise ConfigError(f"{key} must be a HH:MM string")
        parse_duration(value)
        setattr(getattr(settings.commute, parts[1]), parts[2], value)
    else:
        raise ConfigError(f"Unknown setting {key!r}")
