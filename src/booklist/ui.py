"""Rich UI components for the Booklist CLI."""

from typing import Iterable

from rich.console import Console
from rich.table import Table

from .activity_log import Change
from .models import Book

console = Console()


def print_success(message: str) -> None:
    """Print a success message with checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗[/red] {message}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[dim]{message}[/dim]")


def create_spinner(message: str):
    """Create a spinner context for long operations."""
    return console.status(f"[dim]{message}[/dim]", spinner="dots")


def display_book_table(books: Iterable[Book]) -> None:
    """Display books in a table, numbered in display order."""
    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Title", style="white", no_wrap=False, max_width=50)
    table.add_column("Author", style="dim", no_wrap=False, max_width=30)
    table.add_column("Image", style="dim", no_wrap=True, max_width=40)

    count = 0
    for count, book in enumerate(books, 1):
        table.add_row(
            str(count),
            book.book_id or "",
            book.display_title(50),
            book.display_author(30),
            book.image_url,
        )

    if count == 0:
        print_info("No books found.")
        return
    console.print(table)


def display_activity(changes: list[Change], show_store: bool = False) -> None:
    """Display confirmed changes, newest first."""
    if not changes:
        print_info("No activity recorded.")
        return

    table = Table(show_header=True, header_style="dim", box=None, padding=(0, 2))
    table.add_column("Time", style="dim", no_wrap=True)
    table.add_column("Action", style="cyan")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Book", style="white", max_width=40)
    table.add_column("Change", style="dim", max_width=50)
    if show_store:
        table.add_column("Store", style="dim", no_wrap=True)

    for change in changes:
        row = [
            change.timestamp.split(".")[0].replace("T", " "),
            change.action.capitalize(),
            change.book_id,
            change.title or "-",
            change.summary(),
        ]
        if show_store:
            row.append(change.store)
        table.add_row(*row)
    console.print(table)
