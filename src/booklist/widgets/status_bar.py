"""Status bar showing store, count, progress and the last error."""

from typing import Optional

from textual.widgets import Static


class StatusBar(Static):
    """Single-line status bar at the top of the main screen."""

    def update_status(
        self,
        version: str,
        api_url: str,
        book_count: int,
        busy: bool,
        error: Optional[str],
    ) -> None:
        """Refresh the status bar content.

        Parameters
        ----------
        version : str
            Application version string.
        api_url : str
            URL of the book store.
        book_count : int
            Number of books in the local collection.
        busy : bool
            Whether a request is in flight.
        error : str or None
            Last error message, shown in red.
        """
        parts = [
            f"[bold]Booklist {version}[/bold]",
            api_url,
            f"{book_count} books",
        ]
        if busy:
            parts.append("[#d4a04a]Loading...[/#d4a04a]")
        if error:
            parts.append(f"[#c45a3a]{error}[/#c45a3a]")
        self.update("  |  ".join(parts))
