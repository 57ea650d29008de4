"""Tests for InMemoryBackend and the create_backend capability check."""

from unittest.mock import MagicMock

import pytest

from epilogue.core import BookMetadata
from epilogue.io import InMemoryBackend, LocalBackend, PersistenceError, create_backend


@pytest.mark.asyncio
async def test_presets_are_copied_in_and_out(backend):
    data = {"name": "Mine", "overlay": {"color": "#123456", "opacity": 0.2}}
    await backend.save_preset("Mine", data)
    data["overlay"]["opacity"] = 0.9

    loaded = await backend.load_preset("Mine")
    loaded["name"] = "changed"

    assert (await backend.load_preset("Mine"))["overlay"]["opacity"] == 0.2
    assert (await backend.load_preset("Mine"))["name"] == "Mine"


@pytest.mark.asyncio
async def test_preset_listing_keeps_insertion_order(backend):
    for name in ["Zen", "Autumn", "Mist"]:
        await backend.save_preset(name, {"name": name})
    await backend.delete_preset("Autumn")
    await backend.delete_preset("Unknown")

    assert await backend.list_preset_names() == ["Zen", "Mist"]


@pytest.mark.asyncio
async def test_add_book_twice_touches_existing_entry(backend, clock):
    first = await backend.add_book("/books/dune.epub", BookMetadata("Dune", "Frank Herbert"))
    clock.advance(30)
    second = await backend.add_book("/books/dune.epub", BookMetadata("Dune", "Frank Herbert"))

    books = await backend.list_recent_books(10)

    assert len(books) == 1
    assert second.id == first.id
    assert books[0].last_opened == first.last_opened + 30


@pytest.mark.asyncio
async def test_recent_books_ordering_and_progress(backend, clock):
    a = await backend.add_book("/books/a.epub", BookMetadata("A", "X"))
    clock.advance()
    await backend.add_book("/books/b.epub", BookMetadata("B", "X"))
    clock.advance()
    await backend.update_progress(a.id, 0.3, "cfi-a")

    assert [b.title for b in await backend.list_recent_books(10)] == ["A", "B"]
    assert await backend.get_progress(a.id) == "cfi-a"
    await backend.update_progress("missing", 0.1, "x")
    assert await backend.get_progress("missing") is None


@pytest.mark.asyncio
async def test_documents_and_pickers_are_unavailable(backend, tmp_path):
    assert await backend.pick_book() is None
    assert await backend.pick_media() is None
    assert await backend.pick_audio() is None
    with pytest.raises(PersistenceError):
        await backend.read_document(tmp_path / "book.epub")


def _settings(app_dir, in_memory=False):
    settings = MagicMock()
    settings.get_app_dir.return_value = app_dir
    settings.use_in_memory_backend.return_value = in_memory
    return settings


def test_create_backend_prefers_native_store(tmp_path):
    backend = create_backend(_settings(tmp_path / "app"))

    assert isinstance(backend, LocalBackend)
    assert (tmp_path / "app" / "library.db").is_file()
    backend.close()


def test_create_backend_honors_in_memory_flag(tmp_path):
    backend = create_backend(_settings(tmp_path, in_memory=True))
    assert isinstance(backend, InMemoryBackend)


def test_create_backend_falls_back_when_store_unavailable(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("file in the way")

    backend = create_backend(_settings(blocker / "app"))

    assert isinstance(backend, InMemoryBackend)
