"""Change history screen.

Lists the changes the book store confirmed, newest first. By default only
changes made against the configured store are shown; the scope selector
widens the view to every store recorded in the file.
"""

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import DataTable, Footer, Select, Static
from textual import work

from ..activity_log import Change

_ACTION_CHOICES = [
    ("All actions", ""),
    ("Created", "create"),
    ("Edited", "edit"),
    ("Deleted", "delete"),
]

_SCOPE_CHOICES = [
    ("This store", "store"),
    ("All stores", "all"),
]


class ActivityScreen(Screen):
    """Confirmed changes, filtered by action and store."""

    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("r", "refresh", "Refresh"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._changes: list[Change] = []
        self._action_filter = ""
        self._all_stores = False

    def compose(self) -> ComposeResult:
        with Vertical(id="activity-container"):
            yield Static("", id="activity-title")
            with Horizontal(id="activity-filters"):
                yield Static("Action:", classes="filter-label")
                yield Select(
                    _ACTION_CHOICES,
                    value="",
                    id="activity-action-filter",
                    allow_blank=False,
                )
                yield Static("Store:", classes="filter-label")
                yield Select(
                    _SCOPE_CHOICES,
                    value="store",
                    id="activity-scope-filter",
                    allow_blank=False,
                )
            yield DataTable(id="activity-table", cursor_type="row")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#activity-table", DataTable)
        table.add_columns("Time", "Action", "Book", "Change", "Store")
        self._load_changes()

    @work(exclusive=True, group="activity-read", thread=True)
    def _load_changes(self) -> None:
        """Read the history file off the event loop."""
        changes = self.app.activity.recent(limit=200, all_stores=self._all_stores)
        self.app.call_from_thread(self._show_changes, changes)

    def _show_changes(self, changes: list[Change]) -> None:
        self._changes = changes
        scope = "all stores" if self._all_stores else self.app.activity.store_url
        self.query_one("#activity-title", Static).update(
            f"[bold]Activity[/bold]  [#8a7e6a]{scope}[/#8a7e6a]"
        )
        self._refresh_table()

    def _refresh_table(self) -> None:
        table = self.query_one("#activity-table", DataTable)
        table.clear()
        for change in self._changes:
            if self._action_filter and change.action != self._action_filter:
                continue
            label = change.title or change.book_id
            if len(label) > 35:
                label = label[:32] + "..."
            table.add_row(
                change.timestamp.split(".")[0].replace("T", " "),
                change.action.capitalize(),
                label,
                change.summary(),
                change.store,
            )

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "activity-action-filter":
            self._action_filter = event.value or ""
            self._refresh_table()
        elif event.select.id == "activity-scope-filter":
            self._all_stores = event.value == "all"
            self._load_changes()

    def action_refresh(self) -> None:
        """Re-read the history file (bound to ``r``)."""
        self._load_changes()
        self.notify("Activity refreshed")

    def action_go_back(self) -> None:
        self.app.pop_screen()
