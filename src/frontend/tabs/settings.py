"""Settings tab implementation."""

from __future__ import annotations

from enum import Enum
from typing import Any, Type

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Input, Select, SelectionList, Static

from core.models import ExclusivityFilter, Faction, MissionType, Tier

from ..validators import parse_seconds


class SettingsTab(Container):
    """Settings tab for editing filters and timing.

    Edits only touch the in-memory config; Save (ctrl+s) validates, writes
    config.json and hands the new values to the running watcher.
    """

    FILTER_LISTS: list[tuple[str, Type[Enum], str]] = [
        ("mission_filter", MissionType, "Missions"),
        ("tier_filter", Tier, "Tiers"),
        ("faction_filter", Faction, "Factions"),
    ]

    SECONDS_INPUTS = [
        ("refresh_rate", "refresh-rate-input", 1),
        ("time_before_expiry_notification", "expiry-lead-input", 0),
    ]

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._ready = False

    def compose(self):
        with Horizontal(id="settings-body"):
            for key, enum_cls, label in self.FILTER_LISTS:
                with Vertical(classes="settings-column"):
                    yield Static(label, classes="form-label")
                    yield SelectionList[str](
                        *[(member.value, member.value) for member in enum_cls],
                        id=f"{key}-list",
                    )
            with Vertical(id="settings-right"):
                yield Static("void storms", classes="form-label")
                yield Select(
                    [(member.value, member.value) for member in ExclusivityFilter],
                    id="void-storm-select",
                    allow_blank=False,
                )
                yield Static("refresh_rate (seconds)", classes="form-label")
                yield Input(placeholder="60", id="refresh-rate-input")
                yield Static("time_before_expiry_notification (seconds)", classes="form-label")
                yield Input(placeholder="60", id="expiry-lead-input")
                yield Static("", id="settings-error", classes="settings-error")

    def on_mount(self) -> None:
        self._ready = True
        self.reload_from_config()

    def reload_from_config(self) -> None:
        if not self._ready:
            return
        data = self.app.config_state.data or {}
        for key, _, _ in self.FILTER_LISTS:
            selection_list = self.query_one(f"#{key}-list", SelectionList)
            selection_list.deselect_all()
            for value in data.get(key, []) or []:
                selection_list.select(value)
        void_storms = data.get("void_storm_filter", ExclusivityFilter.EXCLUDE.value)
        if void_storms in {member.value for member in ExclusivityFilter}:
            self.query_one("#void-storm-select", Select).value = void_storms
        for key, input_id, _ in self.SECONDS_INPUTS:
            self.query_one(f"#{input_id}", Input).value = str(data.get(key, ""))
        self._set_error("")

    @on(SelectionList.SelectedChanged)
    def _on_filter_changed(self, event: SelectionList.SelectedChanged) -> None:
        list_id = event.selection_list.id or ""
        for key, enum_cls, _ in self.FILTER_LISTS:
            if list_id != f"{key}-list":
                continue
            selected = set(event.selection_list.selected)
            # Keep enum declaration order so saved files diff cleanly.
            self._set_value(key, [member.value for member in enum_cls if member.value in selected])

    @on(Select.Changed, "#void-storm-select")
    def _on_void_storm_changed(self, event: Select.Changed) -> None:
        if isinstance(event.value, str):
            self._set_value("void_storm_filter", event.value)

    @on(Input.Changed)
    def _on_seconds_changed(self, event: Input.Changed) -> None:
        for key, input_id, minimum in self.SECONDS_INPUTS:
            if event.input.id != input_id:
                continue
            info = parse_seconds(event.value, minimum)
            if info.error or info.value is None:
                self._set_error(f"{key}: {info.error}")
                return
            self._set_error("")
            self._set_value(key, info.value)

    def _set_value(self, key: str, value: Any) -> None:
        data = self.app.config_state.data
        # Programmatic reloads also post change messages; ignore no-op updates.
        if data is not None and data.get(key) == value:
            return
        self.app.update_config_value(key, value)

    def _set_error(self, message: str) -> None:
        self.query_one("#settings-error", Static).update(message)
