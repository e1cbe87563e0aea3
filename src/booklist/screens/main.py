"""Main screen with status bar, book table, and the add/edit form.

This is the default screen shown on launch. The form below the table
edits the new-book draft, or the edit draft while a row is being edited.
Keys: ``e``/Enter edit, ``ctrl+s`` save, Escape cancel edit, ``d`` delete,
``r`` reload, ``l`` activity, ``a`` about, ``q`` quit.
"""

from typing import Optional

import structlog
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Input, Label, Static
from textual import work

from .. import __version__
from ..models import Book
from ..sync import AuthError, ValidationError
from ..widgets.book_table import BookTable
from ..widgets.status_bar import StatusBar

log = structlog.get_logger()

# (field_name, label)
_FORM_FIELDS = [
    ("title", "Title"),
    ("author", "Author"),
    ("image_url", "Image URL"),
]


class MainScreen(Screen):
    """Default screen: status bar, book table, and the add/edit form.

    Attributes
    ----------
    _working : bool
        Whether a mutation worker has been started and not yet finished.
        Covers the password prompt, before the synchronizer marks itself
        busy.
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save", priority=True),
        Binding("e", "edit", "Edit"),
        Binding("d", "delete", "Delete"),
        Binding("escape", "cancel_edit", "Cancel edit"),
        Binding("r", "reload", "Reload"),
        Binding("l", "activity", "Activity"),
        Binding("a", "about", "About"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._working = False

    def compose(self) -> ComposeResult:
        """Build the screen layout: status, table, form, footer."""
        yield StatusBar()
        yield BookTable()
        with Vertical(id="book-form"):
            yield Static("", id="form-heading")
            yield Static("", id="form-error")
            for field_name, label in _FORM_FIELDS:
                with Horizontal(classes="form-row"):
                    yield Label(f"{label:<10}", classes="form-label")
                    yield Input(placeholder=label, id=f"form-{field_name}", classes="form-input")
            with Horizontal(id="form-buttons"):
                yield Button("Create", id="form-save", variant="primary")
                yield Button("Delete", id="form-delete", variant="error")
                yield Button("Cancel", id="form-cancel")
        yield Footer()

    def on_mount(self) -> None:
        """Render the empty state, start polling busy state, and load books."""
        self._refresh_view()
        self.set_interval(0.25, self._refresh_status)
        self._focus_table()
        self._load()

    def _focus_table(self) -> None:
        """Move keyboard focus to the inner ``DataTable``."""
        self.query_one(BookTable).query_one(DataTable).focus()

    # --- rendering ---

    def _refresh_view(self) -> None:
        """Redraw the table, status bar, and form from synchronizer state."""
        sync = self.app.sync
        editing_id = sync.draft_edit.book_id if sync.editing else None
        self.query_one(BookTable).load_books(sync.collection, editing_id=editing_id)
        self._refresh_status()
        self._populate_form()

    def _refresh_status(self) -> None:
        """Update the status bar and disable actions while busy."""
        sync = self.app.sync
        self.query_one(StatusBar).update_status(
            __version__,
            self.app.settings.api_url,
            len(sync.collection),
            sync.busy,
            sync.last_error,
        )
        blocked = sync.busy or self._working
        self.query_one("#form-save", Button).disabled = blocked
        self.query_one("#form-delete", Button).disabled = blocked

    def _populate_form(self) -> None:
        """Fill the form from whichever draft is active."""
        sync = self.app.sync
        draft = sync.draft_edit if sync.editing else sync.draft_new
        self.query_one("#form-heading", Static).update(
            "[bold]Edit Book[/bold]" if sync.editing else "[bold]Add New Book[/bold]"
        )
        self.query_one("#form-save", Button).label = "Update" if sync.editing else "Create"
        self.query_one("#form-cancel", Button).display = sync.editing
        for field_name, _label in _FORM_FIELDS:
            field_input = self.query_one(f"#form-{field_name}", Input)
            with field_input.prevent(Input.Changed):
                field_input.value = getattr(draft, field_name)

    def _show_error(self, message: str) -> None:
        self.query_one("#form-error", Static).update(f"[#c45a3a]{message}[/#c45a3a]")

    def _clear_error(self) -> None:
        self.query_one("#form-error", Static).update("")

    def _is_blocked(self) -> bool:
        """Return ``True`` (and warn) if a request is already running."""
        if self.app.sync.busy or self._working:
            self.notify("Operation in progress...", severity="warning")
            return True
        return False

    # --- input ---

    def on_input_changed(self, event: Input.Changed) -> None:
        """Route form edits into the active draft."""
        input_id = event.input.id or ""
        if input_id.startswith("form-"):
            self.app.sync.set_field(input_id[len("form-"):], event.value)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle Create/Update, Delete and Cancel buttons."""
        if event.button.id == "form-save":
            self.action_save()
        elif event.button.id == "form-delete":
            self.action_delete()
        elif event.button.id == "form-cancel":
            self.action_cancel_edit()

    def on_book_table_book_selected(self, event: BookTable.BookSelected) -> None:
        """Start editing the selected row."""
        self._begin_edit(event.book_id)

    # --- actions ---

    def action_reload(self) -> None:
        """Re-fetch the list from the store (bound to ``r``)."""
        if self._is_blocked():
            return
        self._load()

    def action_edit(self) -> None:
        """Edit the highlighted row (bound to ``e``)."""
        book_id = self.query_one(BookTable).get_selected_id()
        if book_id:
            self._begin_edit(book_id)

    def _begin_edit(self, book_id: str) -> None:
        if self._is_blocked():
            return
        sync = self.app.sync
        book = sync.find(book_id)
        if book is None:
            return
        discarded = sync.begin_edit(book)
        if discarded is not None:
            self.notify(
                f"Unsaved changes to \"{discarded.display_title(40)}\" were discarded",
                severity="warning",
            )
        self._clear_error()
        self._refresh_view()
        self.query_one("#form-title", Input).focus()

    def action_cancel_edit(self) -> None:
        """Leave edit mode without saving (bound to Escape)."""
        if not self.app.sync.editing:
            return
        self.app.sync.cancel_edit()
        self._clear_error()
        self._refresh_view()
        self._focus_table()

    def action_save(self) -> None:
        """Create the new book or commit the edit (bound to ``ctrl+s``)."""
        if self._is_blocked():
            return
        self._working = True
        self._clear_error()
        self._save()

    def action_delete(self) -> None:
        """Delete the highlighted row (bound to ``d``)."""
        if self._is_blocked():
            return
        book_id = self.query_one(BookTable).get_selected_id()
        if not book_id:
            return
        self._working = True
        self._delete(book_id)

    def action_activity(self) -> None:
        """Push the activity log screen (bound to ``l``)."""
        from .activity import ActivityScreen
        self.app.push_screen(ActivityScreen())

    def action_about(self) -> None:
        """Push the about screen (bound to ``a``)."""
        from .about import AboutScreen
        self.app.push_screen(AboutScreen())

    def action_quit(self) -> None:
        """Exit the application (bound to ``q``)."""
        self.app.exit()

    # --- workers ---

    @work(group="books")
    async def _load(self) -> None:
        """Fetch the list and redraw."""
        await self.app.sync.load()
        self._refresh_view()

    @work(group="books")
    async def _save(self) -> None:
        """Run create or commit, including the password prompt."""
        sync = self.app.sync
        try:
            if sync.editing:
                await self._commit_edit()
            else:
                created = await sync.create()
                if created is not None:
                    self._record_change("create", after=created)
        except ValidationError as e:
            self._show_error(str(e))
            return
        except AuthError:
            return
        finally:
            self._working = False
        self._refresh_view()

    async def _commit_edit(self) -> None:
        sync = self.app.sync
        book_id = sync.draft_edit.book_id
        before = sync.find(book_id)
        if await sync.commit_edit():
            after = sync.find(book_id)
            if before is not None and after is not None:
                self._record_change("edit", before=before, after=after)
            self._focus_table()

    @work(group="books")
    async def _delete(self, book_id: str) -> None:
        """Remove a book, including the password prompt."""
        sync = self.app.sync
        book = sync.find(book_id)
        try:
            removed = await sync.remove(book_id)
        except AuthError:
            return
        finally:
            self._working = False
        if removed:
            if book is not None:
                self._record_change("delete", before=book)
            if sync.editing and sync.draft_edit.book_id == book_id:
                sync.cancel_edit()
        self._refresh_view()

    @work(group="activity", thread=True)
    def _record_change(
        self,
        action: str,
        before: Optional[Book] = None,
        after: Optional[Book] = None,
    ) -> None:
        """Append to the change history without blocking the event loop."""
        try:
            self.app.activity.record(action, "tui", before=before, after=after)
        except OSError as e:
            log.warning("activity_write_failed", action=action, error=str(e))
            self.app.call_from_thread(
                self.notify, f"Could not write activity log: {e}", severity="warning"
            )
