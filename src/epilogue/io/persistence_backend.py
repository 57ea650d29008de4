"""Abstract interface for the asynchronous persistence boundary."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from epilogue.core import BookMetadata, LibraryEntry


class PersistenceError(RuntimeError):
    """Raised when a persistence call fails; callers decide how loudly."""


class PersistenceBackend(ABC):
    """
    Boundary used by the preset engine, the library store and the session
    orchestrator. Every call may suspend and every call may fail with
    PersistenceError; no other exception type crosses this interface.

    Implementations:
    - LocalBackend: files and SQLite under the application directory.
    - InMemoryBackend: dictionaries only, for contexts without a native store.
    """

    # Presets

    @abstractmethod
    async def list_preset_names(self) -> List[str]:
        """Names of all stored presets, in storage order."""

    @abstractmethod
    async def load_preset(self, name: str) -> Optional[Dict[str, Any]]:
        """Stored JSON object for a preset, or None if no such preset exists."""

    @abstractmethod
    async def save_preset(self, name: str, data: Dict[str, Any]) -> None:
        """Create or overwrite a preset."""

    @abstractmethod
    async def delete_preset(self, name: str) -> None:
        """Remove a preset; removing an unknown name is not an error."""

    # Preferences

    @abstractmethod
    async def get_preferences(self) -> Optional[Dict[str, Any]]:
        """Stored preferences object, or None if none were ever written."""

    @abstractmethod
    async def set_preferences(self, data: Dict[str, Any]) -> None:
        """Overwrite the stored preferences object."""

    # Library

    @abstractmethod
    async def list_recent_books(self, limit: int) -> List[LibraryEntry]:
        """Up to limit entries, most recently opened first."""

    @abstractmethod
    async def add_book(self, file_path: str, metadata: BookMetadata) -> LibraryEntry:
        """Insert a book or refresh the recency of the existing entry."""

    @abstractmethod
    async def update_progress(self, book_id: str, fraction: float, token: str) -> None:
        """Store progress and resume token for an existing entry."""

    @abstractmethod
    async def get_progress(self, book_id: str) -> Optional[str]:
        """Stored resume token, or None."""

    @abstractmethod
    async def remove_book(self, book_id: str) -> None:
        """Remove an entry; removing an unknown id is not an error."""

    # Documents and pickers

    @abstractmethod
    async def read_document(self, path: Path) -> bytes:
        """Raw bytes of a document file."""

    @abstractmethod
    async def pick_book(self) -> Optional[Path]:
        """Ask the user for a book file; None means no selection."""

    @abstractmethod
    async def pick_media(self) -> Optional[Path]:
        """Ask the user for background media; None means no selection."""

    @abstractmethod
    async def pick_audio(self) -> Optional[Path]:
        """Ask the user for an ambient audio track; None means no selection."""
