"""Validation helpers for config editing."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SecondsInfo:
    value: int | None
    error: str | None = None


def parse_seconds(raw_value: str, minimum: int) -> SecondsInfo:
    """Parse a whole number of seconds typed into an Input."""

    raw_value = raw_value.strip()
    if not raw_value:
        return SecondsInfo(None, "a value is required")
    if not _is_int(raw_value):
        return SecondsInfo(None, "must be a whole number of seconds")
    value = int(raw_value)
    if value < minimum:
        return SecondsInfo(None, f"must be >= {minimum}")
    return SecondsInfo(value)


def _is_int(value: str) -> bool:
    try:
        int(value)
    except ValueError:
        return False
    return True
