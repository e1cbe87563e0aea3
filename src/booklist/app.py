"""Textual TUI application for the Booklist client.

Defines the ``BooklistApp`` class (the Textual ``App`` subclass) and the
``main`` entry point used by the ``booklist tui`` command.
"""

from typing import Optional

from textual.app import App

from .activity_log import ActivityLog
from .auth import PasswordAuthorizer
from .logging_config import configure_logging
from .remote import BookStoreClient
from .settings import Settings, load_settings
from .sync import ListSynchronizer


class BooklistApp(App):
    """Booklist TUI.

    Owns the book store client and the list synchronizer, and pushes the
    initial ``MainScreen`` on mount.

    Parameters
    ----------
    settings : Settings, optional
        Loaded settings. Read from disk when omitted.
    store : BookStoreClient, optional
        Client to use instead of one built from *settings*.

    Attributes
    ----------
    settings : Settings or None
        Settings in effect; loaded from disk on mount when not given.
    sync : ListSynchronizer
        Local view state for the remote list, available after mount.
    activity : ActivityLog
        Change history for the configured store, available after mount.
    """

    TITLE = "Booklist"
    SUB_TITLE = "Book List"
    CSS_PATH = "booklist.tcss"

    BINDINGS = [
        ("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store: Optional[BookStoreClient] = None,
    ) -> None:
        super().__init__()
        self.settings = settings
        self._store = store

    def on_mount(self) -> None:
        """Build the client and synchronizer, then push the main screen."""
        if self.settings is None:
            self.settings = load_settings()
        if self._store is None:
            self._store = BookStoreClient(
                self.settings.api_url, timeout=self.settings.timeout
            )
        self.activity = ActivityLog(
            self.settings.resolve_activity_path(), self.settings.api_url
        )
        authorize = PasswordAuthorizer(
            self._store, self._prompt_password, report=self._report_error
        )
        self.sync = ListSynchronizer(
            self._store,
            authorize,
            send_image_on_update=self.settings.send_image_on_update,
        )
        from .screens.main import MainScreen
        self.push_screen(MainScreen())

    async def _prompt_password(self) -> Optional[str]:
        """Show the password modal and wait for it (must run in a worker)."""
        from .screens.password import PasswordScreen
        return await self.push_screen_wait(PasswordScreen())

    def _report_error(self, message: str) -> None:
        self.notify(message, severity="error")

    async def on_unmount(self) -> None:
        """Close the HTTP client when the app exits."""
        if self._store is not None:
            await self._store.aclose()


def main(settings: Optional[Settings] = None) -> None:
    """Run the TUI."""
    if settings is None:
        settings = load_settings()
        configure_logging(settings.resolve_log_path())
    app = BooklistApp(settings)
    app.run()


if __name__ == "__main__":
    main()
