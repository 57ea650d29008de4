"""Library Store - known books, recency ordering and reading progress."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from epilogue.core import BookMetadata, LibraryEntry
from epilogue.core.colors import clamp
from epilogue.io import PersistenceBackend, PersistenceError

logger = logging.getLogger(__name__)


class LibraryStore:
    """
    Thin policy layer over the persistence boundary for library entries.

    No call raises: failures are logged and reported through the return
    value (empty list, None or False), so an open reading session is never
    interrupted by a library write.
    """

    def __init__(self, backend: PersistenceBackend):
        if backend is None:
            raise ValueError("backend must not be None")
        self.backend = backend

    async def load_recent(self, limit: int) -> List[LibraryEntry]:
        try:
            return await self.backend.list_recent_books(limit)
        except PersistenceError as e:
            logger.error(f"Failed to load recent books: {e}")
            return []

    async def add_or_touch(
        self, file_path: Union[str, Path], metadata: BookMetadata
    ) -> Optional[LibraryEntry]:
        """Create the entry for file_path, or refresh its recency if known."""
        try:
            entry = await self.backend.add_book(str(file_path), metadata)
        except PersistenceError as e:
            logger.error(f"Failed to add book to library: {e}")
            return None
        logger.debug(f"Library entry {entry.id} touched: {entry.title}")
        return entry

    async def record_progress(self, book_id: Optional[str], token: str, fraction: float) -> bool:
        """Store the resume token and progress fraction for a tracked book.

        A missing book_id is not an error: the open document may simply not
        be a library member.
        """
        if not book_id:
            return False
        fraction = float(clamp(fraction, 0.0, 1.0))
        try:
            await self.backend.update_progress(book_id, fraction, token)
        except PersistenceError as e:
            logger.error(f"Failed to save progress for {book_id}: {e}")
            return False
        return True

    async def get_progress(self, book_id: Optional[str]) -> Optional[str]:
        if not book_id:
            return None
        try:
            return await self.backend.get_progress(book_id)
        except PersistenceError as e:
            logger.error(f"Failed to load progress for {book_id}: {e}")
            return None

    async def remove(self, book_id: str) -> bool:
        try:
            await self.backend.remove_book(book_id)
        except PersistenceError as e:
            logger.error(f"Failed to remove book {book_id}: {e}")
            return False
        return True
