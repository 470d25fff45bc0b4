"""Configuration file handling for fissurewatch.

All user-editable settings (filters, timing, notifications, logging) live in
a single JSON file for quick edits without touching Python. Secrets such as
the bot token stay in the environment (.env via python-dotenv).
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import WatcherConfig
from core.errors import ConfigError

LOGGER = logging.getLogger(__name__)

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

load_dotenv()

# FISSUREWATCH_CONFIG lets several setups share one checkout.
CONFIG_PATH = os.getenv("FISSUREWATCH_CONFIG") or os.path.join(PROJECT_ROOT, "config.json")

DEFAULT_CONFIG: dict[str, Any] = {
    "mission_filter": [
        "Capture",
        "Extermination",
        "Rescue",
        "Sabotage",
        "Spy",
        "Disruption",
    ],
    "tier_filter": ["Lith", "Meso", "Neo", "Axi", "Requiem"],
    "faction_filter": ["Orokin", "Grineer", "Corpus", "Infested", "Narmer", "Crossfire"],
    "void_storm_filter": "Exclude",
    "refresh_rate": 60,
    "time_before_expiry_notification": 60,
    "api": {
        "base_url": "https://api.warframestat.us/pc/",
        "timeout": 30,
    },
    "notifications": {
        # "desktop" uses notify-send, "bot" uses the Telegram Bot API (BOT_API env var).
        "notification_method": "desktop",
        "bot_chat_id": None,
        "bot_format": "html",
        # Cancel pending expiry alerts when their fissure disappears early.
        "cancel_on_removal": False,
    },
    "logging": {
        "enabled": True,
        "level": "INFO",
        "console": True,
        "file": {
            "enabled": False,
            "path": "logs/fissurewatch.log",
            "max_bytes": 5 * 1024 * 1024,
            "backup_count": 5,
        },
        "redact": {
            "enabled": True,
            "patterns": ["BOT_API"],
        },
    },
}

PARSE_ERROR_MESSAGE = (
    "Error parsing config file, if you have edited it, please fix it, "
    "otherwise delete it and restart the program. Continuing with default config."
)


@dataclass(frozen=True)
class LoadedConfig:
    """Raw config data plus the validated watcher settings built from it."""

    data: dict[str, Any]
    watcher: WatcherConfig
    message: str
    path: str


def default_config() -> dict[str, Any]:
    return copy.deepcopy(DEFAULT_CONFIG)


def _merge_defaults(raw: dict[str, Any]) -> dict[str, Any]:
    """Fill missing keys from defaults, one level deep for sections."""

    merged = default_config()
    for key, value in raw.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def section(data: dict[str, Any], key: str) -> dict[str, Any]:
    """Return a config section as a dict, falling back to its default."""

    value = data.get(key)
    if isinstance(value, dict):
        return value
    return copy.deepcopy(DEFAULT_CONFIG.get(key, {}))


def load_config(path: Optional[str] = None) -> LoadedConfig:
    """Load config.json, falling back to defaults on any problem.

    A missing file is created from the defaults. An unreadable or invalid
    file is left untouched so the user can fix it.
    """

    path = path or CONFIG_PATH
    defaults = default_config()

    if not os.path.exists(path):
        try:
            save_config(defaults, path)
            message = f"No config file found, created default config file {path}."
        except OSError as exc:
            message = f"No config file found and could not create {path}: {exc}. Using default config."
        LOGGER.info("%s", message)
        return LoadedConfig(defaults, WatcherConfig.from_dict(defaults), message, path)

    try:
        with open(path, "r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict):
            raise ConfigError("config root must be an object")
        data = _merge_defaults(raw)
        watcher = WatcherConfig.from_dict(data)
    except (OSError, json.JSONDecodeError, ConfigError) as exc:
        LOGGER.warning("Invalid config file %s: %s", path, exc)
        return LoadedConfig(
            defaults,
            WatcherConfig.from_dict(defaults),
            f"{PARSE_ERROR_MESSAGE} ({exc})",
            path,
        )

    return LoadedConfig(data, watcher, f"Loaded config file {path}.", path)


def save_config(data: dict[str, Any], path: Optional[str] = None) -> None:
    """Write the config as pretty-printed JSON."""

    path = path or CONFIG_PATH
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(json.dumps(data, indent=2, ensure_ascii=True) + "\n")
