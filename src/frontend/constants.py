"""Shared constants for the Textual UI."""

from __future__ import annotations

from pathlib import Path

import settings

VOID_GOLD = "#D4AF37"
CONFIG_PATH = Path(settings.CONFIG_PATH)
TIME_FORMAT = "%H:%M:%S"
