"""Editable copy of config.json held by the dashboard."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any


@dataclass
class ConfigState:
    data: dict[str, Any] = field(default_factory=dict)
    dirty: bool = False
    error: str | None = None

    def replace(self, data: dict[str, Any]) -> None:
        self.data = copy.deepcopy(data)
        self.dirty = False
        self.error = None

    def set_value(self, key: str, value: Any) -> None:
        self.data[key] = value
        self.dirty = True

    def mark_saved(self) -> None:
        self.dirty = False
        self.error = None

    def status(self) -> tuple[str, str]:
        """Return the header text and its css class."""
        if self.error:
            return f"config: {self.error}", "status-error"
        if self.dirty:
            return "config: modified *", "status-modified"
        return "config: saved", "status-loaded"
