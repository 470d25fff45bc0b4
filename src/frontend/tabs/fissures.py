"""Fissures tab for browsing the current snapshot."""

from __future__ import annotations

from typing import Any, Sequence

from textual import on
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import DataTable, Static, Switch

from core.models import TABLE_HEADERS, Fissure

from ..constants import TIME_FORMAT


class FissuresTab(Container):
    """Table of fissures; filtered by default, optionally the whole snapshot."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._fissures: tuple[Fissure, ...] = ()
        self._filtered: tuple[Fissure, ...] = ()
        self._table_ready = False

    def compose(self):
        with Vertical(id="fissures-panel"):
            with Horizontal(id="fissures-actions"):
                yield Static("show all fissures", classes="form-label")
                yield Switch(value=False, id="fissures-show-all")
            yield DataTable(id="fissures-table", cursor_type="row")
            yield Static("", id="fissures-output")

    def on_mount(self) -> None:
        table = self.query_one("#fissures-table", DataTable)
        table.add_columns(*TABLE_HEADERS, "Expires")
        table.zebra_stripes = True
        table.styles.height = "1fr"
        self._table_ready = True
        self._render_rows()

    def update_fissures(self, fissures: Sequence[Fissure], filtered: Sequence[Fissure]) -> None:
        self._fissures = tuple(fissures)
        self._filtered = tuple(filtered)
        self._render_rows()

    @on(Switch.Changed, "#fissures-show-all")
    def _on_show_all_changed(self) -> None:
        self._render_rows()

    def _render_rows(self) -> None:
        if not self._table_ready:
            return
        show_all = self.query_one("#fissures-show-all", Switch).value
        rows = self._fissures if show_all else self._filtered
        table = self.query_one("#fissures-table", DataTable)
        table.clear()
        for fissure in rows:
            expires = fissure.expiry.astimezone().strftime(TIME_FORMAT)
            table.add_row(*fissure.table_row(), expires, key=fissure.id)
        self.query_one("#fissures-output", Static).update(
            f"{len(self._filtered)} matching of {len(self._fissures)} fissures"
        )
