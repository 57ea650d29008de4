"""Native persistence under the application directory.

Layout::

    <app dir>/
        preferences.json
        presets/<name>.json
        library.db
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import aiofiles

from epilogue.core import BookMetadata, LibraryEntry

from .database_manager import DatabaseManager
from .library_repository import LibraryRepository
from .persistence_backend import PersistenceBackend, PersistenceError

logger = logging.getLogger(__name__)

PREFERENCES_FILE = "preferences.json"
PRESETS_DIR = "presets"


class LocalBackend(PersistenceBackend):
    """JSON files for presets and preferences, SQLite for the library."""

    def __init__(
        self,
        app_dir: Path,
        database: DatabaseManager,
        repository: Optional[LibraryRepository] = None,
        picker=None,
    ) -> None:
        if database is None:
            raise ValueError("database must not be None")
        self.app_dir = Path(app_dir)
        self.presets_dir = self.app_dir / PRESETS_DIR
        self.preferences_path = self.app_dir / PREFERENCES_FILE
        self.database = database
        self.repository = repository or LibraryRepository(database.connection)
        self.picker = picker
        # One SQLite connection is shared by worker threads
        self._db_lock = asyncio.Lock()

    # Presets

    def _preset_path(self, name: str) -> Path:
        if not name or "/" in name or "\\" in name or name.startswith("."):
            raise PersistenceError(f"Invalid preset name: {name!r}")
        return self.presets_dir / f"{name}.json"

    async def list_preset_names(self) -> List[str]:
        def scan() -> List[str]:
            if not self.presets_dir.is_dir():
                return []
            return sorted(p.stem for p in self.presets_dir.glob("*.json") if p.is_file())

        try:
            return await asyncio.to_thread(scan)
        except OSError as e:
            raise PersistenceError(f"Failed to list presets: {e}") from e

    async def load_preset(self, name: str) -> Optional[Dict[str, Any]]:
        return await self._read_json(self._preset_path(name))

    async def save_preset(self, name: str, data: Dict[str, Any]) -> None:
        path = self._preset_path(name)
        await self._write_json(path, data)
        logger.debug(f"Saved preset {name!r} to {path}")

    async def delete_preset(self, name: str) -> None:
        path = self._preset_path(name)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            raise PersistenceError(f"Failed to delete preset {name!r}: {e}") from e

    # Preferences

    async def get_preferences(self) -> Optional[Dict[str, Any]]:
        return await self._read_json(self.preferences_path)

    async def set_preferences(self, data: Dict[str, Any]) -> None:
        await self._write_json(self.preferences_path, data)

    # Library

    async def _run_db(self, func, *args):
        async with self._db_lock:
            return await asyncio.to_thread(func, *args)

    async def list_recent_books(self, limit: int) -> List[LibraryEntry]:
        return await self._run_db(self.repository.list_recent, limit)

    async def add_book(self, file_path: str, metadata: BookMetadata) -> LibraryEntry:
        return await self._run_db(self.repository.add_book, Path(file_path), metadata)

    async def update_progress(self, book_id: str, fraction: float, token: str) -> None:
        await self._run_db(self.repository.update_progress, book_id, fraction, token)

    async def get_progress(self, book_id: str) -> Optional[str]:
        return await self._run_db(self.repository.get_progress, book_id)

    async def remove_book(self, book_id: str) -> None:
        await self._run_db(self.repository.remove_book, book_id)

    # Documents and pickers

    async def read_document(self, path: Path) -> bytes:
        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise PersistenceError(f"Failed to read document {path}: {e}") from e

    async def pick_book(self) -> Optional[Path]:
        return self.picker.pick_book() if self.picker else None

    async def pick_media(self) -> Optional[Path]:
        return self.picker.pick_media() if self.picker else None

    async def pick_audio(self) -> Optional[Path]:
        return self.picker.pick_audio() if self.picker else None

    def close(self) -> None:
        self.database.close()

    # Helpers

    async def _read_json(self, path: Path) -> Optional[Dict[str, Any]]:
        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Malformed JSON in {path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Expected a JSON object in {path}")
        return data

    async def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        tmp_path = path.with_name(path.name + ".tmp")
        try:
            content = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Cannot serialize {path.name}: {e}") from e
        try:
            await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
            async with aiofiles.open(tmp_path, "w", encoding="utf-8") as f:
                await f.write(content)
            await asyncio.to_thread(os.replace, tmp_path, path)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e
