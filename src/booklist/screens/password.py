"""Modal password prompt shown before any change to the list."""

from typing import Optional

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static


class PasswordScreen(ModalScreen[Optional[str]]):
    """Ask for the password. Dismisses with the entry, or ``None`` on cancel."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    def compose(self) -> ComposeResult:
        with Vertical(id="password-dialog"):
            yield Static("Please enter your password:", id="password-label")
            yield Input(password=True, id="password-input")
            with Horizontal(id="password-buttons"):
                yield Button("OK", id="password-ok", variant="primary")
                yield Button("Cancel", id="password-cancel")

    def on_mount(self) -> None:
        self.query_one("#password-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.dismiss(event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "password-ok":
            self.dismiss(self.query_one("#password-input", Input).value)
        else:
            self.action_cancel()

    def action_cancel(self) -> None:
        self.dismiss(None)
