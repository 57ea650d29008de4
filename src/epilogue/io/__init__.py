"""IO layer - Persistence boundary and its implementations."""

from .backend_factory import create_backend
from .database_manager import DatabaseManager
from .in_memory_backend import InMemoryBackend
from .library_repository import LibraryRepository, book_id_for
from .local_backend import LocalBackend
from .persistence_backend import PersistenceBackend, PersistenceError

__all__ = [
    "book_id_for",
    "create_backend",
    "DatabaseManager",
    "InMemoryBackend",
    "LibraryRepository",
    "LocalBackend",
    "PersistenceBackend",
    "PersistenceError",
]
