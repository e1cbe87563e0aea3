"""About screen showing version, store URL and file locations."""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.screen import Screen
from textual.widgets import Footer, Static

from .. import __version__


class AboutScreen(Screen):
    """About panel with version and configuration details."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
    ]

    def compose(self) -> ComposeResult:
        settings = self.app.settings
        yield Static(
            f"[bold #d4a04a]Booklist[/bold #d4a04a]  v. {__version__}\n\n"
            f"Book store: {settings.api_url}\n"
            f"Log file: {settings.resolve_log_path()}\n"
            f"Activity log: {settings.resolve_activity_path()}\n\n"
            f"[#8a7e6a]Configuration file: ~/.booklist/booklist-settings.json[/#8a7e6a]",
            id="about-panel",
        )
        yield Footer()

    def action_go_back(self) -> None:
        """Return to the main screen."""
        self.app.pop_screen()
