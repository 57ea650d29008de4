"""Unit tests for LibraryStore."""

from unittest.mock import AsyncMock

import pytest

from epilogue.core import BookMetadata
from epilogue.io import PersistenceError
from epilogue.services import LibraryStore


@pytest.fixture
def store(backend):
    return LibraryStore(backend)


def test_store_requires_backend():
    with pytest.raises(ValueError, match="backend must not be None"):
        LibraryStore(None)


@pytest.mark.asyncio
async def test_add_or_touch_same_path_keeps_one_entry(store, clock):
    first = await store.add_or_touch("/books/dune.epub", BookMetadata("Dune", "Frank Herbert"))
    clock.advance(5)
    second = await store.add_or_touch("/books/dune.epub", BookMetadata("Dune", "Frank Herbert"))

    recent = await store.load_recent(10)

    assert len(recent) == 1
    assert first.id == second.id
    assert recent[0].last_opened > first.last_opened


@pytest.mark.asyncio
async def test_recent_is_most_recent_first_and_limited(store, clock):
    for title in ["A", "B", "C"]:
        await store.add_or_touch(f"/books/{title}.epub", BookMetadata(title, "X"))
        clock.advance()

    assert [b.title for b in await store.load_recent(2)] == ["C", "B"]


@pytest.mark.asyncio
async def test_record_progress_clamps_and_touches(store, clock):
    a = await store.add_or_touch("/books/a.epub", BookMetadata("A", "X"))
    clock.advance()
    await store.add_or_touch("/books/b.epub", BookMetadata("B", "X"))
    clock.advance()

    assert await store.record_progress(a.id, "cfi-end", 1.4) is True

    recent = await store.load_recent(10)
    assert recent[0].title == "A"
    assert recent[0].progress == 1.0
    assert await store.get_progress(a.id) == "cfi-end"


@pytest.mark.asyncio
async def test_progress_without_book_id_is_ignored(store):
    assert await store.record_progress(None, "cfi", 0.5) is False
    assert await store.get_progress(None) is None


@pytest.mark.asyncio
async def test_remove_book(store):
    entry = await store.add_or_touch("/books/a.epub", BookMetadata("A", "X"))

    assert await store.remove(entry.id) is True
    assert await store.load_recent(10) == []


@pytest.mark.asyncio
async def test_backend_failures_are_reported_not_raised(store, backend):
    failure = AsyncMock(side_effect=PersistenceError("database is locked"))
    backend.list_recent_books = failure
    backend.add_book = failure
    backend.update_progress = failure
    backend.get_progress = failure
    backend.remove_book = failure

    assert await store.load_recent(10) == []
    assert await store.add_or_touch("/books/a.epub", BookMetadata()) is None
    assert await store.record_progress("id", "cfi", 0.5) is False
    assert await store.get_progress("id") is None
    assert await store.remove("id") is False
