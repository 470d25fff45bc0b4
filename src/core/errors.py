"""Error types shared by the core and its adapters."""

from __future__ import annotations


class FetchError(Exception):
    """The remote fissure source could not be read or decoded."""


class NotifyError(Exception):
    """A notification sink failed to deliver a notification."""


class ConfigError(ValueError):
    """The watcher configuration is invalid."""
