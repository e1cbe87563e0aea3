"""Book table widget that tracks the store identifier of each row."""

from typing import Optional

from textual.message import Message
from textual.widgets import DataTable, Static

from ..models import Book

EDIT_MARKER = "✎"


class BookTable(Static):
    """DataTable wrapper that keys rows by book ID and emits BookSelected messages.

    Rows are shown in collection order; the row being edited is marked.
    """

    class BookSelected(Message):
        """Emitted when a book row is selected."""

        def __init__(self, book_id: str) -> None:
            self.book_id = book_id
            super().__init__()

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._ids: list[Optional[str]] = []  # row index -> book_id

    def compose(self):
        yield DataTable()

    def on_mount(self) -> None:
        self.query_one(DataTable).cursor_type = "row"

    def _ensure_columns(self) -> None:
        """Add columns on first load."""
        table = self.query_one(DataTable)
        if table.columns:
            return
        table.add_column("#", width=4, key="index")
        table.add_column("Title", width=40, key="title")
        table.add_column("Author", width=25, key="author")
        table.add_column("Image", width=30, key="image")

    def load_books(self, books: list[Book], editing_id: Optional[str] = None) -> None:
        """Replace all rows, keeping the cursor on the same book when possible."""
        table = self.query_one(DataTable)
        self._ensure_columns()
        selected = self.get_selected_id()
        table.clear()
        self._ids = []
        for i, book in enumerate(books, 1):
            marker = f"{EDIT_MARKER} " if editing_id and book.book_id == editing_id else ""
            table.add_row(
                str(i),
                marker + book.display_title(38),
                book.display_author(25),
                book.image_url,
            )
            self._ids.append(book.book_id)
        if selected is not None:
            self.select_by_id(selected)

    @property
    def row_count(self) -> int:
        return len(self._ids)

    def select_by_id(self, book_id: str) -> None:
        """Move the cursor to the row with the given book ID."""
        if book_id in self._ids:
            self.query_one(DataTable).move_cursor(row=self._ids.index(book_id))

    def get_selected_id(self) -> Optional[str]:
        """Return the book ID of the highlighted row."""
        table = self.query_one(DataTable)
        row = table.cursor_row
        if row is not None and 0 <= row < len(self._ids):
            return self._ids[row]
        return None

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Forward row selection as BookSelected message."""
        event.stop()
        book_id = self.get_selected_id()
        if book_id:
            self.post_message(self.BookSelected(book_id))
