"""Client-side synchronization of the book list with the remote store.

``ListSynchronizer`` owns the local view of the collection together with
the new-record and edit drafts. Every mutation is confirm-then-apply: the
authorization check runs first, then the remote call, and local state only
changes once the remote call has succeeded.
"""

from dataclasses import replace
from typing import Awaitable, Callable, Optional

import structlog

from .models import REQUIRED_FIELDS, Book
from .remote import BookStoreError

log = structlog.get_logger()

LOAD_ERROR = "Unable to fetch books."
CREATE_ERROR = "Unable to create book."
UPDATE_ERROR = "Unable to update book."
DELETE_ERROR = "Unable to delete book."


class ValidationError(Exception):
    """Raised when a record has empty required fields.

    Attributes
    ----------
    missing : list of str
        Names of the empty fields.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__("Please fill in all fields: " + ", ".join(self.missing))


class AuthError(Exception):
    """Raised when the operator is not authorized to mutate the list."""

    pass


class ListSynchronizer:
    """Local view state for a remote book list.

    Parameters
    ----------
    store : BookStoreClient
        Remote store (anything with the same async methods).
    authorize : callable
        Async callable returning ``True`` when a mutation may proceed.
    send_image_on_update : bool, optional
        Include ``image_url`` in update requests. Off by default, in which
        case the local record keeps the edited image even though the store
        never receives it.

    Attributes
    ----------
    collection : list of Book
        Last known state of the remote list, in display order.
    draft_new : Book
        In-progress input for the next create.
    draft_edit : Book or None
        Copy of the record currently being edited.
    busy : bool
        ``True`` while a remote call is in flight. Advisory only.
    last_error : str or None
        Message for the most recent failed remote call.
    """

    def __init__(
        self,
        store,
        authorize: Callable[[], Awaitable[bool]],
        send_image_on_update: bool = False,
    ) -> None:
        self._store = store
        self._authorize = authorize
        self.send_image_on_update = send_image_on_update
        self.collection: list[Book] = []
        self.draft_new = Book.empty()
        self.draft_edit: Optional[Book] = None
        self._edit_source: Optional[Book] = None
        self.busy = False
        self.last_error: Optional[str] = None

    @property
    def editing(self) -> bool:
        return self.draft_edit is not None

    def find(self, book_id: str) -> Optional[Book]:
        """Return the first record with *book_id*, or ``None``."""
        for book in self.collection:
            if book.book_id == book_id:
                return book
        return None

    async def load(self) -> bool:
        """Replace the collection with the store's current list.

        Returns
        -------
        bool
            ``True`` on success. On failure ``last_error`` is set and the
            collection is left as it was.
        """
        self.busy = True
        try:
            books = await self._store.list_books()
        except BookStoreError as e:
            log.warning("books_load_failed", error=str(e))
            self.last_error = LOAD_ERROR
            return False
        finally:
            self.busy = False
        self.collection = list(books)
        self.last_error = None
        log.info("books_loaded", count=len(self.collection))
        return True

    async def _check_authorized(self) -> None:
        try:
            granted = await self._authorize()
        except BookStoreError as e:
            raise AuthError("Password check failed") from e
        if not granted:
            raise AuthError("Not authorized")

    @staticmethod
    def _validate(book: Book) -> None:
        missing = book.missing_fields()
        if missing:
            raise ValidationError(missing)

    async def create(self, candidate: Optional[Book] = None) -> Optional[Book]:
        """Create a record from *candidate* (defaults to ``draft_new``).

        Returns
        -------
        Book or None
            The record as stored, or ``None`` when the remote call failed.

        Raises
        ------
        ValidationError
            If a required field is empty. No request is sent.
        AuthError
            If authorization is declined or fails. No request is sent.
        """
        book = candidate if candidate is not None else self.draft_new
        self._validate(book)
        await self._check_authorized()

        self.busy = True
        try:
            created = await self._store.create_book(book)
        except BookStoreError as e:
            log.warning("book_create_failed", error=str(e))
            self.last_error = CREATE_ERROR
            return None
        finally:
            self.busy = False
        self.collection.append(created)
        self.draft_new = Book.empty()
        log.info("book_created", book_id=created.book_id, title=created.title)
        return created

    def begin_edit(self, book: Book) -> Optional[Book]:
        """Start editing a copy of *book*.

        Any previous draft is dropped.

        Returns
        -------
        Book or None
            The dropped draft if it had unsaved changes, otherwise ``None``.
        """
        discarded = None
        if self.draft_edit is not None and self.draft_edit != self._edit_source:
            discarded = self.draft_edit
            log.warning("edit_draft_discarded", book_id=discarded.book_id)
        self.draft_edit = replace(book)
        self._edit_source = replace(book)
        return discarded

    def cancel_edit(self) -> None:
        """Drop the edit draft without contacting the store."""
        self.draft_edit = None
        self._edit_source = None

    async def commit_edit(self) -> bool:
        """Send the edit draft to the store and apply it locally on success.

        Returns
        -------
        bool
            ``True`` on success. On remote failure ``last_error`` is set and
            the draft is kept so the operator can retry.

        Raises
        ------
        RuntimeError
            If no edit is in progress.
        ValidationError
            If a required field is empty.
        AuthError
            If authorization is declined or fails.
        """
        if self.draft_edit is None:
            raise RuntimeError("No edit in progress")
        draft = self.draft_edit
        self._validate(draft)
        await self._check_authorized()

        self.busy = True
        try:
            await self._store.update_book(
                draft.book_id,
                draft.update_payload(include_image=self.send_image_on_update),
            )
        except BookStoreError as e:
            log.warning("book_update_failed", book_id=draft.book_id, error=str(e))
            self.last_error = UPDATE_ERROR
            return False
        finally:
            self.busy = False
        for idx, book in enumerate(self.collection):
            if book.book_id == draft.book_id:
                self.collection[idx] = replace(draft)
                break
        self.cancel_edit()
        log.info("book_updated", book_id=draft.book_id)
        return True

    async def remove(self, book_id: str) -> bool:
        """Delete *book_id* from the store, then from the local collection.

        Returns
        -------
        bool
            ``True`` on success, ``False`` if the remote call failed.

        Raises
        ------
        AuthError
            If authorization is declined or fails.
        """
        await self._check_authorized()

        self.busy = True
        try:
            await self._store.delete_book(book_id)
        except BookStoreError as e:
            log.warning("book_delete_failed", book_id=book_id, error=str(e))
            self.last_error = DELETE_ERROR
            return False
        finally:
            self.busy = False
        for idx, book in enumerate(self.collection):
            if book.book_id == book_id:
                del self.collection[idx]
                break
        log.info("book_deleted", book_id=book_id)
        return True

    def set_field(self, name: str, value: str) -> None:
        """Write *value* into the edit draft if editing, else the new draft.

        Raises
        ------
        KeyError
            If *name* is not one of the editable fields.
        """
        if name not in REQUIRED_FIELDS:
            raise KeyError(name)
        target = self.draft_edit if self.draft_edit is not None else self.draft_new
        setattr(target, name, value)
