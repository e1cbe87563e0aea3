"""Local history of changes the book store has confirmed.

Each successful create, edit or delete appends one JSON line to the
activity file. A line records the store URL it happened against and the
record as the store confirmed it: the server-assigned ``_id`` for a
create, the old and new field values for an edit, and the removed record
for a delete. Several stores can share one file; readers filter by URL.
"""

import fcntl
import json
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

from .models import REQUIRED_FIELDS, Book

log = structlog.get_logger()

ACTIONS = ("create", "edit", "delete")


@dataclass
class Change:
    """One confirmed change.

    Attributes
    ----------
    timestamp : str
        ISO 8601 local time of the confirmation.
    store : str
        Base URL of the book store that accepted the change.
    action : str
        ``create``, ``edit`` or ``delete``.
    source : str
        ``tui`` or ``cli``.
    book_id : str
        Store identifier of the record.
    before : dict or None
        Field values before the change (edit and delete).
    after : dict or None
        Field values after the change (create and edit).
    """

    timestamp: str
    store: str
    action: str
    source: str
    book_id: str
    before: Optional[dict] = None
    after: Optional[dict] = None

    @property
    def title(self) -> str:
        """Title after the change, or before it for a delete."""
        fields = self.after or self.before or {}
        return fields.get("title", "")

    def changed_fields(self) -> list[str]:
        """Names of the fields an edit changed, in form order."""
        if self.before is None or self.after is None:
            return []
        return [n for n in REQUIRED_FIELDS if self.before.get(n) != self.after.get(n)]

    def summary(self) -> str:
        """Short description of what changed, for a table cell."""
        if self.action == "create" and self.after:
            return f"added, by {self.after.get('author', '')}"
        if self.action == "delete":
            return "removed"
        changed = self.changed_fields()
        if not changed:
            return "no changes"
        parts = []
        for name in changed:
            if name == "image_url":
                parts.append("image")
            else:
                parts.append(f"{name}: {self.before[name]!r} -> {self.after[name]!r}")
        return "; ".join(parts)


def _fields(book: Optional[Book]) -> Optional[dict]:
    if book is None:
        return None
    return {n: getattr(book, n) for n in REQUIRED_FIELDS}


class ActivityLog:
    """Append-only change history for one book store.

    Writers take an exclusive ``flock`` so a TUI and a CLI process can
    append to the same file.

    Parameters
    ----------
    path : Path
        JSON Lines file shared by every store.
    store_url : str
        Base URL recorded on new entries and used to filter reads.
    """

    def __init__(self, path: Path, store_url: str) -> None:
        self.path = path
        self.store_url = store_url

    def record(
        self,
        action: str,
        source: str,
        before: Optional[Book] = None,
        after: Optional[Book] = None,
    ) -> Change:
        """Append a confirmed change and return it.

        Parameters
        ----------
        action : str
            One of ``ACTIONS``.
        source : str
            ``tui`` or ``cli``.
        before : Book, optional
            The record as it was; required for edit and delete.
        after : Book, optional
            The record as the store now holds it; required for create
            and edit.
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown activity action: {action}")
        record = after if after is not None else before
        if record is None or record.book_id is None:
            raise ValueError("An activity entry needs a stored book")
        change = Change(
            timestamp=datetime.now().isoformat(),
            store=self.store_url,
            action=action,
            source=source,
            book_id=record.book_id,
            before=_fields(before),
            after=_fields(after),
        )
        self.path.parent.mkdir(parents=True, exist_ok=True)
        line = json.dumps(asdict(change), ensure_ascii=False) + "\n"
        with open(self.path, "a", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            try:
                f.write(line)
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        log.info("activity_recorded", action=action, book_id=change.book_id)
        return change

    def recent(self, limit: int = 100, all_stores: bool = False) -> list[Change]:
        """Return up to *limit* changes, newest first.

        The file is append-only, so line order is confirmation order.

        Parameters
        ----------
        limit : int
            Maximum number of entries.
        all_stores : bool
            Include changes made against other store URLs.
        """
        if not self.path.exists():
            return []
        changes = []
        with open(self.path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            try:
                lines = f.readlines()
            finally:
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                change = Change(**json.loads(line))
            except (json.JSONDecodeError, TypeError):
                log.warning("activity_line_skipped", path=str(self.path))
                continue
            if all_stores or change.store == self.store_url:
                changes.append(change)
        changes.reverse()
        return changes[:limit]
