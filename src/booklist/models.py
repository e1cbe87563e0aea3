"""Book data model for the Booklist client.

Defines the ``Book`` dataclass used throughout the application to represent
a single record held by the remote book store, plus the mapping to and from
the store's JSON shape ``{_id, title, author, image_url}``.
"""

from dataclasses import dataclass
from typing import Optional

# Content fields every record needs before it can be created or updated
REQUIRED_FIELDS = ("title", "author", "image_url")


def _text(value) -> str:
    """Coerce a JSON field value to text; ``None`` becomes ``""``."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass
class Book:
    """A book record.

    Attributes
    ----------
    book_id : str or None
        Opaque identifier assigned by the remote store (``_id`` on the
        wire). ``None`` until creation succeeds.
    title : str
        Title of the book.
    author : str
        Author name.
    image_url : str
        URL of the cover image.
    """

    book_id: Optional[str] = None
    title: str = ""
    author: str = ""
    image_url: str = ""

    @classmethod
    def empty(cls) -> "Book":
        """Return a blank draft with no identifier."""
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> "Book":
        """Build a Book from the store's JSON representation.

        Parameters
        ----------
        data : dict
            A mapping with ``_id``, ``title``, ``author`` and ``image_url``
            keys. Missing text fields become ``""``; other non-string
            values are stringified.

        Returns
        -------
        Book
            The parsed record.
        """
        raw_id = data.get("_id")
        return cls(
            book_id=str(raw_id) if raw_id is not None else None,
            title=_text(data.get("title")),
            author=_text(data.get("author")),
            image_url=_text(data.get("image_url")),
        )

    def to_dict(self) -> dict:
        """Return the store's JSON shape. ``_id`` is omitted when unset."""
        d = {}
        if self.book_id is not None:
            d["_id"] = self.book_id
        d["title"] = self.title
        d["author"] = self.author
        d["image_url"] = self.image_url
        return d

    def create_payload(self) -> dict:
        """Return the body for ``POST /books``."""
        return {
            "title": self.title,
            "author": self.author,
            "image_url": self.image_url,
        }

    def update_payload(self, include_image: bool = False) -> dict:
        """Return the body for ``PUT /books/{id}``.

        Parameters
        ----------
        include_image : bool, optional
            Whether to send ``image_url`` as well. The store only expects
            ``title`` and ``author``, so this is off by default.

        Returns
        -------
        dict
            The update payload.
        """
        payload = {"title": self.title, "author": self.author}
        if include_image:
            payload["image_url"] = self.image_url
        return payload

    def missing_fields(self) -> list[str]:
        """Return the names of required fields that are empty."""
        return [name for name in REQUIRED_FIELDS if not getattr(self, name)]

    def display_title(self, max_length: int = 50) -> str:
        """Return title truncated with ellipsis if needed.

        Parameters
        ----------
        max_length : int, optional
            Maximum character length before truncation, by default 50.

        Returns
        -------
        str
            The title, truncated with ``...`` if it exceeds *max_length*.
        """
        if len(self.title) <= max_length:
            return self.title
        return self.title[: max_length - 3] + "..."

    def display_author(self, max_length: int = 30) -> str:
        """Return author truncated with ellipsis if needed."""
        if len(self.author) <= max_length:
            return self.author
        return self.author[: max_length - 3] + "..."

