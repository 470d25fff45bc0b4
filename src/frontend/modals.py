"""Confirmation prompts shown before unsaved settings are lost."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Static


class ConfirmScreen(ModalScreen[str]):
    """Ask what to do with unsaved settings; dismisses with the chosen key.

    ``choices`` maps the dismiss value to a button label. Escape or the
    Cancel button dismisses with ``"cancel"``.
    """

    BINDINGS = [("escape", "dismiss('cancel')", "Cancel")]

    def __init__(self, title: str, body: str, choices: dict[str, str]) -> None:
        super().__init__()
        self._title = title
        self._body = body
        self._choices = choices

    def compose(self) -> ComposeResult:
        buttons = [
            Button(label, id=f"choice-{key}", variant="warning" if key != "save" else "success")
            for key, label in self._choices.items()
        ]
        buttons.append(Button("Cancel", id="choice-cancel"))
        yield Container(
            Static(self._title, classes="modal-title"),
            Static(self._body, classes="modal-body"),
            Horizontal(*buttons, classes="modal-actions"),
            classes="modal-dialog modal-dialog--confirm",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss((event.button.id or "choice-cancel").removeprefix("choice-"))


def unsaved_on_quit() -> ConfirmScreen:
    return ConfirmScreen(
        "Unsaved changes",
        "Save settings before quitting?",
        {"save": "Save", "discard": "Quit anyway"},
    )


def unsaved_on_reload() -> ConfirmScreen:
    return ConfirmScreen(
        "Reload config.json?",
        "Edited settings will be replaced by the file on disk.",
        {"save": "Save first", "reload": "Reload"},
    )
