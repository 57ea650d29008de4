#!/usr/bin/env python3
"""
Tests for LibraryRepository - validates library book persistence.
"""

from pathlib import Path

import pytest

from epilogue.core import BookMetadata
from epilogue.io import DatabaseManager, LibraryRepository, PersistenceError, book_id_for


class StepClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def database(tmp_path):
    db = DatabaseManager(tmp_path / "library.db")
    db.ensure_schema()
    yield db
    db.close()


@pytest.fixture
def library_repo(database, clock):
    """Create a LibraryRepository backed by a temporary database."""
    return LibraryRepository(database.connection, clock=clock)


def test_add_book_creates_entry(library_repo):
    entry = library_repo.add_book(Path("/books/dune.epub"), BookMetadata("Dune", "Frank Herbert"))

    assert entry.id == book_id_for(Path("/books/dune.epub"))
    assert entry.title == "Dune"
    assert entry.author == "Frank Herbert"
    assert entry.file_path == str(Path("/books/dune.epub").resolve())
    assert entry.date_added == 100.0
    assert entry.last_opened == 100.0
    assert entry.progress == 0.0
    assert entry.last_location is None


def test_add_book_with_missing_metadata_uses_unknown(library_repo):
    entry = library_repo.add_book(Path("/books/anon.epub"), BookMetadata(title=None, author=""))

    assert entry.title == "Unknown"
    assert entry.author == "Unknown"
    assert library_repo.list_recent(10)[0].author == "Unknown"


def test_add_same_path_twice_keeps_one_entry_and_refreshes_recency(library_repo, clock):
    first = library_repo.add_book(Path("/books/dune.epub"), BookMetadata("Dune", "Frank Herbert"))
    clock.now = 250.0
    second = library_repo.add_book(Path("/books/dune.epub"), BookMetadata("Dune (2nd)", "F. H."))

    books = library_repo.list_recent(10)

    assert len(books) == 1
    assert second.id == first.id
    assert second.last_opened == 250.0
    assert second.date_added == 100.0
    # Title of an existing entry is kept
    assert second.title == "Dune"


def test_add_book_keeps_cover_unless_new_one_given(library_repo):
    library_repo.add_book(Path("/books/a.epub"), BookMetadata("A", "X", cover_ref="/covers/a.jpg"))
    entry = library_repo.add_book(Path("/books/a.epub"), BookMetadata("A", "X"))
    assert entry.cover_ref == "/covers/a.jpg"

    entry = library_repo.add_book(Path("/books/a.epub"), BookMetadata("A", "X", cover_ref="/covers/a2.jpg"))
    assert entry.cover_ref == "/covers/a2.jpg"


def test_list_recent_orders_by_last_opened_and_limits(library_repo, clock):
    for i, name in enumerate(["a", "b", "c"]):
        clock.now = 100.0 + i
        library_repo.add_book(Path(f"/books/{name}.epub"), BookMetadata(name.upper(), "X"))
    clock.now = 200.0
    library_repo.add_book(Path("/books/a.epub"), BookMetadata("A", "X"))

    titles = [b.title for b in library_repo.list_recent(2)]

    assert titles == ["A", "C"]
    assert library_repo.list_recent(0) == []


def test_update_and_get_progress(library_repo, clock):
    entry = library_repo.add_book(Path("/books/dune.epub"), BookMetadata("Dune", "Frank Herbert"))
    clock.now = 300.0

    library_repo.update_progress(entry.id, 0.42, "epubcfi(/6/14!/4/2)")

    stored = library_repo.get_book(entry.id)
    assert stored.progress == pytest.approx(0.42)
    assert stored.last_location == "epubcfi(/6/14!/4/2)"
    assert stored.last_opened == 300.0
    assert library_repo.get_progress(entry.id) == "epubcfi(/6/14!/4/2)"


def test_unknown_ids_are_harmless(library_repo):
    library_repo.update_progress("missing", 0.5, "cfi")
    library_repo.remove_book("missing")

    assert library_repo.get_book("missing") is None
    assert library_repo.get_progress("missing") is None


def test_remove_book(library_repo):
    entry = library_repo.add_book(Path("/books/dune.epub"), BookMetadata("Dune", "Frank Herbert"))

    library_repo.remove_book(entry.id)
    library_repo.remove_book(entry.id)

    assert library_repo.list_recent(10) == []


def test_repository_requires_connection():
    with pytest.raises(PersistenceError):
        LibraryRepository(None)


def test_database_errors_are_wrapped(database, clock):
    repo = LibraryRepository(database.connection, clock=clock)
    database.connection.execute("DROP TABLE library_books")

    with pytest.raises(PersistenceError):
        repo.list_recent(5)
