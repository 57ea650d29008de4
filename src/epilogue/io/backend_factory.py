"""Capability check selecting the persistence backend once at startup."""

import logging
import sqlite3
from pathlib import Path

from .database_manager import DatabaseManager
from .in_memory_backend import InMemoryBackend
from .local_backend import LocalBackend
from .persistence_backend import PersistenceBackend

logger = logging.getLogger(__name__)

DATABASE_FILE = "library.db"


def create_backend(settings, picker=None) -> PersistenceBackend:
    """
    Return the native backend, or the in-memory stub when the native store
    is disabled or cannot be prepared.

    Args:
        settings: SettingsManager providing the app dir and backend flag.
        picker: Optional file picker used by the native backend's dialogs.
    """
    if settings.use_in_memory_backend():
        logger.info("In-memory persistence requested; nothing will be saved")
        return InMemoryBackend()

    app_dir = Path(settings.get_app_dir())
    try:
        app_dir.mkdir(parents=True, exist_ok=True)
        database = DatabaseManager(app_dir / DATABASE_FILE)
        database.ensure_schema()
    except (OSError, sqlite3.Error) as e:
        logger.warning(f"Native persistence unavailable at {app_dir} ({e}); using in-memory store")
        return InMemoryBackend()

    logger.info(f"Using native persistence at {app_dir}")
    return LocalBackend(app_dir, database, picker=picker)
