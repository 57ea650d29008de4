"""Dictionary-backed persistence used when no native store is available."""

import copy
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from epilogue.core import BookMetadata, LibraryEntry

from .library_repository import book_id_for
from .persistence_backend import PersistenceBackend, PersistenceError


class InMemoryBackend(PersistenceBackend):
    """
    Keeps presets, preferences and the library in process memory.

    Nothing survives a restart; pickers always report no selection and
    documents cannot be read. Stored objects are deep-copied on the way in
    and out so callers never share mutable state with the store.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._presets: Dict[str, Dict[str, Any]] = {}
        self._preferences: Optional[Dict[str, Any]] = None
        self._books: Dict[str, LibraryEntry] = {}

    async def list_preset_names(self) -> List[str]:
        return list(self._presets)

    async def load_preset(self, name: str) -> Optional[Dict[str, Any]]:
        data = self._presets.get(name)
        return copy.deepcopy(data) if data is not None else None

    async def save_preset(self, name: str, data: Dict[str, Any]) -> None:
        if not name:
            raise PersistenceError("Preset name must not be empty")
        self._presets[name] = copy.deepcopy(data)

    async def delete_preset(self, name: str) -> None:
        self._presets.pop(name, None)

    async def get_preferences(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._preferences)

    async def set_preferences(self, data: Dict[str, Any]) -> None:
        self._preferences = copy.deepcopy(data)

    async def list_recent_books(self, limit: int) -> List[LibraryEntry]:
        order = {book_id: i for i, book_id in enumerate(self._books)}
        books = sorted(
            self._books.values(),
            key=lambda b: (b.last_opened, order[b.id]),
            reverse=True,
        )
        return books[:max(limit, 0)]

    async def add_book(self, file_path: str, metadata: BookMetadata) -> LibraryEntry:
        canonical = Path(file_path).resolve()
        book_id = book_id_for(canonical)
        now = self._clock()
        existing = self._books.get(book_id)
        if existing is not None:
            entry = replace(
                existing,
                last_opened=now,
                cover_ref=metadata.cover_ref or existing.cover_ref,
            )
        else:
            entry = LibraryEntry(
                id=book_id,
                title=metadata.title,
                author=metadata.author,
                file_path=str(canonical),
                cover_ref=metadata.cover_ref,
                date_added=now,
                last_opened=now,
            )
        self._books[book_id] = entry
        return entry

    async def update_progress(self, book_id: str, fraction: float, token: str) -> None:
        existing = self._books.get(book_id)
        if existing is None:
            return
        self._books[book_id] = replace(
            existing, progress=fraction, last_location=token, last_opened=self._clock()
        )

    async def get_progress(self, book_id: str) -> Optional[str]:
        entry = self._books.get(book_id)
        return entry.last_location if entry else None

    async def remove_book(self, book_id: str) -> None:
        self._books.pop(book_id, None)

    async def read_document(self, path: Path) -> bytes:
        raise PersistenceError("Reading documents requires a native backend")

    async def pick_book(self) -> Optional[Path]:
        return None

    async def pick_media(self) -> Optional[Path]:
        return None

    async def pick_audio(self) -> Optional[Path]:
        return None
