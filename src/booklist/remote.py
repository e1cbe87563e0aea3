"""Async HTTP client for the remote book store.

Wraps the store's REST endpoints (``/books``, ``/books/{id}`` and
``/check-password``) and converts responses into ``Book`` records. Every
transport or protocol failure surfaces as a ``BookStoreError``.
"""

from typing import Optional

import httpx
import structlog

from .models import Book

log = structlog.get_logger()

DEFAULT_TIMEOUT = 10.0


class BookStoreError(Exception):
    """Raised when a book store request fails or returns unusable data."""

    pass


class BookStoreClient:
    """Client for the remote book store API.

    Parameters
    ----------
    base_url : str
        Root URL of the store, e.g. ``http://localhost:5001``.
    timeout : float, optional
        Per-request timeout in seconds.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport, mainly for tests (``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout, transport=transport
        )

    async def __aenter__(self) -> "BookStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP connection pool."""
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request and raise ``BookStoreError`` on any failure."""
        log.debug("book_store_request", method=method, path=path)
        try:
            resp = await self._client.request(method, path, **kwargs)
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            log.warning(
                "book_store_error",
                method=method,
                path=path,
                status=e.response.status_code,
            )
            raise BookStoreError(
                f"{method} {path} failed with HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            log.warning("book_store_error", method=method, path=path, error=str(e))
            raise BookStoreError(f"Failed to connect to book store: {e}") from e
        return resp

    @staticmethod
    def _json(resp: httpx.Response) -> dict:
        """Decode a JSON object body."""
        try:
            data = resp.json()
        except ValueError as e:
            raise BookStoreError(f"Invalid response from book store: {e}") from e
        if not isinstance(data, dict):
            raise BookStoreError("Invalid response from book store: expected an object")
        return data

    @staticmethod
    def _book(item) -> Book:
        """Parse one record, rejecting anything that is not an object."""
        if not isinstance(item, dict):
            raise BookStoreError(
                f"Invalid response from book store: expected a book object, got {type(item).__name__}"
            )
        return Book.from_dict(item)

    async def list_books(self) -> list[Book]:
        """Fetch the full book list.

        Returns
        -------
        list of Book
            Records in the order the store returned them.

        Raises
        ------
        BookStoreError
            If the request fails or the body has no ``books`` list.
        """
        data = self._json(await self._request("GET", "/books"))
        books = data.get("books")
        if not isinstance(books, list):
            raise BookStoreError("Invalid response from book store: missing 'books' list")
        return [self._book(item) for item in books]

    async def create_book(self, book: Book) -> Book:
        """Create a record and return it as stored.

        Parameters
        ----------
        book : Book
            The draft to create. Its ``book_id`` is ignored.

        Returns
        -------
        Book
            The created record, carrying the generated identifier.

        Raises
        ------
        BookStoreError
            If the request fails or the response has no ``_id``.
        """
        data = self._json(
            await self._request("POST", "/books", json=book.create_payload())
        )
        created = self._book(data)
        if created.book_id is None:
            raise BookStoreError("Book store did not return an identifier for the new book")
        return created

    async def update_book(self, book_id: str, payload: dict) -> None:
        """Send an update for *book_id*. The response body is ignored."""
        await self._request("PUT", f"/books/{book_id}", json=payload)

    async def delete_book(self, book_id: str) -> None:
        """Delete *book_id*. The response body is ignored."""
        await self._request("DELETE", f"/books/{book_id}")

    async def check_password(self, password: str) -> bool:
        """Ask the store whether *password* is valid."""
        data = self._json(
            await self._request("POST", "/check-password", json={"password": password})
        )
        return data.get("isValid") is True
