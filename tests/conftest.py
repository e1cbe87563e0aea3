"""
Pytest configuration and shared fixtures for the booklist tests.
"""
import asyncio
from dataclasses import replace

import pytest

from booklist import settings as settings_module
from booklist.models import Book
from booklist.remote import BookStoreError


def run(coro):
    """Run a coroutine to completion."""
    return asyncio.run(coro)


class FakeStore:
    """In-memory stand-in for BookStoreClient.

    Records every call in ``calls`` and raises ``BookStoreError`` for any
    method name listed in ``fail``.
    """

    def __init__(self, books=None, password="secret"):
        self.books = [replace(b) for b in (books or [])]
        self.password = password
        self.calls = []
        self.fail = set()
        self.next_id = 100

    def _record(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise BookStoreError(f"{name} failed")

    def call_names(self):
        return [c[0] for c in self.calls]

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        pass

    async def list_books(self):
        self._record("list_books")
        return [replace(b) for b in self.books]

    async def create_book(self, book):
        self._record("create_book", book.create_payload())
        created = replace(book, book_id=str(self.next_id))
        self.next_id += 1
        self.books.append(created)
        return replace(created)

    async def update_book(self, book_id, payload):
        self._record("update_book", book_id, payload)
        for b in self.books:
            if b.book_id == book_id:
                b.title = payload["title"]
                b.author = payload["author"]
                if "image_url" in payload:
                    b.image_url = payload["image_url"]

    async def delete_book(self, book_id):
        self._record("delete_book", book_id)
        self.books = [b for b in self.books if b.book_id != book_id]

    async def check_password(self, password):
        self._record("check_password", password)
        return password == self.password


class Gate:
    """Scripted authorizer: returns ``granted`` and counts calls."""

    def __init__(self, granted=True):
        self.granted = granted
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return self.granted


@pytest.fixture
def sample_books():
    return [
        Book(book_id="1", title="Dune", author="Frank Herbert", image_url="http://img/dune.jpg"),
        Book(book_id="2", title="Emma", author="Jane Austen", image_url="http://img/emma.jpg"),
        Book(book_id="3", title="Ubik", author="Philip K. Dick", image_url="http://img/ubik.jpg"),
    ]


@pytest.fixture
def fake_store(sample_books):
    return FakeStore(sample_books)


@pytest.fixture(autouse=True)
def booklist_dir(tmp_path, monkeypatch):
    """Resolve relative settings paths inside the test's temp directory."""
    home = tmp_path / "booklist-home"
    monkeypatch.setattr(settings_module, "_BOOKLIST_DIR", home)
    return home
