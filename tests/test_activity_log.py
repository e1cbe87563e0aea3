"""
Tests for the change history.
"""
import json
from dataclasses import replace

import pytest

from booklist.activity_log import ActivityLog, Change
from booklist.models import Book

STORE = "http://store.test"


@pytest.fixture
def history(tmp_path):
    return ActivityLog(tmp_path / "data" / "activity.log", STORE)


@pytest.fixture
def dune():
    return Book(book_id="1", title="Dune", author="Frank Herbert", image_url="http://img/dune.jpg")


class TestRecord:
    """Test cases for appending changes."""

    def test_create_keeps_server_id_and_store(self, history, dune):
        history.record("create", "cli", after=dune)

        data = json.loads(history.path.read_text().strip())
        assert data["store"] == STORE
        assert data["book_id"] == "1"
        assert data["before"] is None
        assert data["after"] == {
            "title": "Dune", "author": "Frank Herbert", "image_url": "http://img/dune.jpg",
        }

    def test_edit_keeps_old_and_new_values(self, history, dune):
        change = history.record("edit", "tui", before=dune,
                                after=replace(dune, title="Dune Messiah"))

        assert change.before["title"] == "Dune"
        assert change.after["title"] == "Dune Messiah"
        assert change.changed_fields() == ["title"]

    def test_delete_keeps_removed_record(self, history, dune):
        change = history.record("delete", "cli", before=dune)

        assert change.after is None
        assert change.title == "Dune"

    def test_unknown_action(self, history, dune):
        with pytest.raises(ValueError):
            history.record("rename", "cli", after=dune)

    def test_unsaved_book_is_rejected(self, history):
        with pytest.raises(ValueError):
            history.record("create", "cli", after=Book(title="Draft"))


class TestRecent:
    """Test cases for reading changes back."""

    def test_missing_file(self, history):
        assert history.recent() == []

    def test_newest_first_with_limit(self, history):
        for i in range(5):
            history.record("delete", "tui", before=Book(book_id=str(i), title=f"B{i}"))

        assert [c.book_id for c in history.recent(limit=3)] == ["4", "3", "2"]

    def test_filters_by_store(self, history, dune):
        other = ActivityLog(history.path, "http://other.test")
        other.record("create", "cli", after=replace(dune, book_id="9"))
        history.record("create", "cli", after=dune)

        assert [c.book_id for c in history.recent()] == ["1"]
        assert {c.store for c in history.recent(all_stores=True)} == {STORE, "http://other.test"}

    def test_skips_bad_lines(self, history, dune):
        history.record("delete", "tui", before=dune)
        with open(history.path, "a") as f:
            f.write("garbage\n\n[1, 2]\n")

        assert len(history.recent()) == 1


class TestSummary:
    """Test cases for change descriptions."""

    def test_create(self):
        change = Change("t", STORE, "create", "cli", "1", after={"author": "Lem"})
        assert change.summary() == "added, by Lem"

    def test_edit_lists_old_and_new(self):
        before = {"title": "Emma", "author": "Jane Austen", "image_url": "a"}
        after = {"title": "Persuasion", "author": "Jane Austen", "image_url": "b"}
        change = Change("t", STORE, "edit", "tui", "2", before=before, after=after)

        assert change.summary() == "title: 'Emma' -> 'Persuasion'; image"

    def test_edit_without_differences(self):
        fields = {"title": "Emma", "author": "Jane Austen", "image_url": "a"}
        change = Change("t", STORE, "edit", "tui", "2", before=fields, after=dict(fields))

        assert change.summary() == "no changes"

    def test_delete(self):
        change = Change("t", STORE, "delete", "cli", "3", before={"title": "Ubik"})
        assert change.summary() == "removed"
