"""
Tests for BookStoreClient using httpx.MockTransport.
"""
import json

import httpx
import pytest

from booklist.models import Book
from booklist.remote import BookStoreClient, BookStoreError

from conftest import run


def call(handler, method_name, *args):
    """Invoke a client method against a mock transport."""

    async def scenario():
        transport = httpx.MockTransport(handler)
        async with BookStoreClient("http://store.test", transport=transport) as client:
            return await getattr(client, method_name)(*args)

    return run(scenario())


class TestRequests:
    """Test cases for request shapes and response parsing."""

    def test_list_books(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(200, json={"books": [
                {"_id": "1", "title": "Dune", "author": "Frank Herbert", "image_url": "http://i/1"},
                {"_id": "2", "title": "Emma", "author": "Jane Austen", "image_url": "http://i/2"},
            ]})

        books = call(handler, "list_books")

        assert seen == [("GET", "/books")]
        assert [b.book_id for b in books] == ["1", "2"]
        assert books[1].author == "Jane Austen"

    def test_create_book(self):
        def handler(request):
            assert request.method == "POST"
            assert request.url.path == "/books"
            body = json.loads(request.content)
            assert body == {"title": "A", "author": "B", "image_url": "C"}
            return httpx.Response(201, json=dict(body, _id="xyz"))

        created = call(handler, "create_book", Book(title="A", author="B", image_url="C"))

        assert created == Book(book_id="xyz", title="A", author="B", image_url="C")

    def test_create_book_without_id_fails(self):
        def handler(request):
            return httpx.Response(201, json={"title": "A", "author": "B", "image_url": "C"})

        with pytest.raises(BookStoreError):
            call(handler, "create_book", Book(title="A", author="B", image_url="C"))

    def test_update_book(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path, json.loads(request.content)))
            return httpx.Response(200, json={"ok": True})

        call(handler, "update_book", "abc", {"title": "T", "author": "A"})

        assert seen == [("PUT", "/books/abc", {"title": "T", "author": "A"})]

    def test_delete_book(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(204)

        call(handler, "delete_book", "abc")

        assert seen == [("DELETE", "/books/abc")]

    @pytest.mark.parametrize("valid", [True, False])
    def test_check_password(self, valid):
        def handler(request):
            assert request.url.path == "/check-password"
            assert json.loads(request.content) == {"password": "pw"}
            return httpx.Response(200, json={"isValid": valid})

        assert call(handler, "check_password", "pw") is valid


class TestErrors:
    """Test cases for error mapping."""

    def test_http_error_status(self):
        def handler(request):
            return httpx.Response(500, text="boom")

        with pytest.raises(BookStoreError, match="HTTP 500"):
            call(handler, "list_books")

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(BookStoreError, match="Failed to connect"):
            call(handler, "delete_book", "1")

    def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>")

        with pytest.raises(BookStoreError, match="Invalid response"):
            call(handler, "list_books")

    def test_missing_books_key(self):
        def handler(request):
            return httpx.Response(200, json={"items": []})

        with pytest.raises(BookStoreError):
            call(handler, "list_books")

    def test_non_object_book_entry(self):
        def handler(request):
            return httpx.Response(200, json={"books": [
                {"_id": "1", "title": "Dune", "author": "Frank Herbert", "image_url": "http://i/1"},
                "not-a-book",
            ]})

        with pytest.raises(BookStoreError, match="expected a book object"):
            call(handler, "list_books")

    def test_non_string_fields_are_stringified(self):
        def handler(request):
            return httpx.Response(200, json={"books": [
                {"_id": 5, "title": 1984, "author": "George Orwell", "image_url": None},
            ]})

        (book,) = call(handler, "list_books")

        assert book == Book(book_id="5", title="1984", author="George Orwell", image_url="")

    @pytest.mark.parametrize("value", ["false", "true", 1, None])
    def test_password_check_needs_literal_true(self, value):
        def handler(request):
            return httpx.Response(200, json={"isValid": value})

        assert call(handler, "check_password", "secret") is False
