"""Console tab: one line per watcher tick plus startup messages."""

from __future__ import annotations

from datetime import datetime

from textual.containers import Container
from textual.widgets import RichLog

from ..constants import TIME_FORMAT


class ConsoleTab(Container):
    def compose(self):
        yield RichLog(id="console-log", wrap=True, markup=False)

    def log_line(self, message: str) -> None:
        timestamp = datetime.now().strftime(TIME_FORMAT)
        self.query_one("#console-log", RichLog).write(f"[{timestamp}] {message}")
