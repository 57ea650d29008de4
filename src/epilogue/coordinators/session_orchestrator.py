"""Session Orchestrator - startup restore and best-effort shutdown."""

import logging
from numbers import Real
from typing import List, Optional

from epilogue.core import (
    ApplicationPreferences,
    LibraryEntry,
    Preset,
    default_preferences,
    resolve,
)
from epilogue.io import PersistenceBackend, PersistenceError
from epilogue.services import Atmosphere, LibraryStore, PresetEngine, ProgressDebouncer
from epilogue.services.preset_engine import SAVED_AT_KEY

from .reader_controller import ReaderController

logger = logging.getLogger(__name__)


class SessionOrchestrator:
    """
    Decides at startup whether to restore the last live session or the
    stored preferences, and writes the session snapshot at shutdown.
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        atmosphere: Atmosphere,
        preset_engine: PresetEngine,
        library_store: LibraryStore,
        reader_controller: ReaderController,
        debouncer: ProgressDebouncer,
        recent_limit: int = 10,
    ):
        if backend is None:
            raise ValueError("PersistenceBackend must not be None")
        if atmosphere is None:
            raise ValueError("Atmosphere must not be None")
        if preset_engine is None:
            raise ValueError("PresetEngine must not be None")
        if library_store is None:
            raise ValueError("LibraryStore must not be None")
        if reader_controller is None:
            raise ValueError("ReaderController must not be None")
        if debouncer is None:
            raise ValueError("ProgressDebouncer must not be None")

        self.backend = backend
        self.atmosphere = atmosphere
        self.preset_engine = preset_engine
        self.library_store = library_store
        self.reader_controller = reader_controller
        self.debouncer = debouncer
        self.recent_limit = recent_limit

        self.prefs: Optional[ApplicationPreferences] = None
        self.presets: List[Preset] = []
        self.recent_books: List[LibraryEntry] = []
        self.restored_session = False

    @property
    def current_book_id(self) -> Optional[str]:
        return self.reader_controller.current_book_id

    async def start(self) -> ApplicationPreferences:
        """Run the bootstrap sequence and return the live preferences record."""
        prefs = await self._load_preferences()
        self.prefs = prefs

        self.presets = await self.preset_engine.list_presets()

        session = await self.preset_engine.load_session_snapshot()
        self.restored_session = False
        if session is not None and self._session_is_current(session, prefs):
            if self.preset_engine.apply(session):
                prefs.update_from_preset(session)
                self.atmosphere.apply_audio_preferences(prefs)
                self.restored_session = True
                logger.info("Restored last session atmosphere")
        if not self.restored_session:
            self.atmosphere.apply_preferences(prefs)
            logger.info("Applied stored preferences")

        self.recent_books = await self.library_store.load_recent(self.recent_limit)
        self.reader_controller.show_library()
        return prefs

    async def _load_preferences(self) -> ApplicationPreferences:
        try:
            stored = await self.backend.get_preferences()
        except PersistenceError as e:
            logger.error(f"Failed to load preferences, using defaults: {e}")
            stored = None
        return resolve(stored, None, default_preferences())

    @staticmethod
    def _session_is_current(session: Preset, prefs: ApplicationPreferences) -> bool:
        """The snapshot wins unless preferences were edited after it was saved."""
        saved_at = session.extras.get(SAVED_AT_KEY)
        if prefs.updated_at is None or not isinstance(saved_at, Real) or isinstance(saved_at, bool):
            return True
        if saved_at < prefs.updated_at:
            logger.info("Stored preferences are newer than the session snapshot")
            return False
        return True

    async def refresh_library(self) -> List[LibraryEntry]:
        self.recent_books = await self.library_store.load_recent(self.recent_limit)
        return self.recent_books

    async def shutdown(self) -> None:
        """Flush progress, save the session snapshot and preferences.

        Best-effort: nothing here raises, and any step may be cut short.
        """
        await self.debouncer.flush()
        if self.prefs is None:
            return
        await self.preset_engine.save_session_snapshot(self.prefs)
        try:
            await self.backend.set_preferences(self.prefs.to_dict())
        except PersistenceError as e:
            logger.debug(f"Preferences not saved at shutdown: {e}")
        logger.info("Session saved")
