"""Textual dashboard hosting the fissure watcher."""

from __future__ import annotations

from typing import Any

from rich.text import Text
from textual.app import App, ComposeResult
from textual.containers import Center, Container, Horizontal, Vertical
from textual.widgets import Button, ContentSwitcher, Footer, Static, Tab, Tabs

import settings
from core.config import SharedConfig, WatcherConfig
from core.errors import ConfigError
from core.filters import apply_filters
from core.scheduler import NotificationScheduler
from core.watcher import ErrorEvent, FissuresEvent, FissureWatcher, NoNewFissuresEvent, WatcherEvent

from .constants import CONFIG_PATH, VOID_GOLD
from .modals import unsaved_on_quit, unsaved_on_reload
from .state import ConfigState
from .tabs.console import ConsoleTab
from .tabs.fissures import FissuresTab
from .tabs.settings import SettingsTab

TABS = [("console", "Console"), ("fissures", "Fissures"), ("settings", "Settings")]


class DashboardApp(App):
    """Runs the watcher as a worker and renders its events."""

    BINDINGS = [
        ("ctrl+s", "save_config", "Save"),
        ("ctrl+r", "reload_config", "Reload"),
        ("q", "request_quit", "Quit"),
        ("ctrl+c", "request_quit", "Quit"),
    ]

    CSS_PATH = "app.tcss"

    def __init__(
        self,
        loaded: settings.LoadedConfig,
        watcher: FissureWatcher,
        scheduler: NotificationScheduler,
        shared_config: SharedConfig,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.config_state = ConfigState()
        self.config_state.replace(loaded.data)
        self._startup_message = loaded.message
        self._watcher = watcher
        self._scheduler = scheduler
        self._shared_config = shared_config

    def compose(self) -> ComposeResult:
        with Container(id="header"):
            with Horizontal(id="header-row"):
                with Vertical(id="header-left"):
                    yield Static(Text.assemble(("FISSURE", VOID_GOLD), ("WATCH", "bold")), id="title")
                    yield Static(f"config: {CONFIG_PATH.name}", classes="subtle")
                with Vertical(id="header-right"):
                    yield Static("", id="watcher-status", classes="subtle")
                    yield Static("", id="header-status")
                    with Horizontal(id="header-actions"):
                        yield Button("Save", id="save-btn")
                        yield Button("Reload", id="reload-btn")

        with Container(id="tabs-bar"):
            with Center(id="tabs-center"):
                yield Tabs(*[Tab(label, id=tab_id) for tab_id, label in TABS], id="tabs")

        with ContentSwitcher(id="content", initial="console"):
            yield ConsoleTab(id="console")
            yield FissuresTab(id="fissures")
            yield SettingsTab(id="settings")
        yield Footer()

    def on_mount(self) -> None:
        self._refresh_header()
        console = self.query_one(ConsoleTab)
        console.log_line("Starting fissurewatch")
        console.log_line(self._startup_message)
        self.run_worker(self._watcher.run(), name="fissure-watcher", group="watcher")
        self.run_worker(self._consume_events(), name="watcher-events", group="watcher")

    async def _consume_events(self) -> None:
        while True:
            event = await self._watcher.events.get()
            self.handle_watcher_event(event)
            self._watcher.events.task_done()

    def handle_watcher_event(self, event: WatcherEvent) -> None:
        console = self.query_one(ConsoleTab)
        if isinstance(event, FissuresEvent):
            self.query_one(FissuresTab).update_fissures(event.fissures, event.filtered_fissures)
            console.log_line(
                f"{event.new_count} new, {event.removed_count} expired, "
                f"{len(event.filtered_fissures)} matching"
            )
        elif isinstance(event, NoNewFissuresEvent):
            console.log_line("No new fissures")
        elif isinstance(event, ErrorEvent):
            console.log_line(f"Error: {event.message}")
        self._refresh_watcher_status()

    def on_tabs_tab_activated(self, event: Tabs.TabActivated) -> None:
        if event.tab.id:
            self.query_one("#content", ContentSwitcher).current = event.tab.id

    def on_button_pressed(self, event: Button.Pressed) -> None:
        actions = {"save-btn": self.action_save_config, "reload-btn": self.action_reload_config}
        action = actions.get(event.button.id or "")
        if action is not None:
            action()

    def action_save_config(self) -> None:
        self._save_config()

    def action_reload_config(self) -> None:
        if not self.config_state.dirty:
            self._load_config()
            return

        def after(choice: str | None) -> None:
            if choice == "reload" or (choice == "save" and self._save_config()):
                self._load_config()

        self.push_screen(unsaved_on_reload(), after)

    def action_request_quit(self) -> None:
        if not self.config_state.dirty:
            self.exit()
            return

        def after(choice: str | None) -> None:
            if choice == "discard" or (choice == "save" and self._save_config()):
                self.exit()

        self.push_screen(unsaved_on_quit(), after)

    def update_config_value(self, key: str, value: Any) -> None:
        """Record one edited setting; it reaches the watcher on save."""
        self.config_state.set_value(key, value)
        self._refresh_header()

    def _load_config(self) -> None:
        loaded = settings.load_config(str(CONFIG_PATH))
        self.config_state.replace(loaded.data)
        self._apply_watcher_config(loaded.watcher)
        self.query_one(ConsoleTab).log_line(loaded.message)
        self._refresh_header()
        self.query_one(SettingsTab).reload_from_config()

    def _save_config(self) -> bool:
        try:
            watcher_config = WatcherConfig.from_dict(self.config_state.data)
            settings.save_config(self.config_state.data, str(CONFIG_PATH))
        except ConfigError as exc:
            self.config_state.error = str(exc)
        except OSError as exc:
            self.config_state.error = f"save failed: {exc.strerror or exc}"
        else:
            self.config_state.mark_saved()
            self._apply_watcher_config(watcher_config)
            self.query_one(ConsoleTab).log_line("Saved config, filters updated.")
        self._refresh_header()
        return self.config_state.error is None

    def _apply_watcher_config(self, watcher_config: WatcherConfig) -> None:
        # The watcher picks this up on its next read; refilter the held
        # snapshot now so the table follows the new filters at once.
        self._shared_config.replace(watcher_config)
        fissures = self._watcher.fissures
        self.query_one(FissuresTab).update_fissures(fissures, apply_filters(fissures, watcher_config))

    def _refresh_header(self) -> None:
        text, css_class = self.config_state.status()
        status = self.query_one("#header-status", Static)
        status.remove_class("status-loaded", "status-modified", "status-error")
        status.add_class(css_class)
        status.update(text)
        self.query_one("#save-btn", Button).disabled = not self.config_state.dirty
        self._refresh_watcher_status()

    def _refresh_watcher_status(self) -> None:
        refresh_rate = self._shared_config.current().refresh_rate
        self.query_one("#watcher-status", Static).update(
            f"{self._watcher.state.value}: tracking {len(self._watcher.fissures)} fissures, "
            f"{len(self._scheduler.pending)} alerts pending, every {refresh_rate}s"
        )
