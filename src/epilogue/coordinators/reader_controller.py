"""Reader Controller - Central coordinator for the reading session."""

import asyncio
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple

from PySide6.QtCore import QObject, Signal, Slot

from epilogue.core import LibraryEntry, TocEntry, create_layout_flow
from epilogue.io import PersistenceBackend, PersistenceError
from epilogue.services import LibraryStore, ProgressDebouncer, ReaderAppearanceState
from epilogue.ui import DocumentRenderer, Notifier

logger = logging.getLogger(__name__)


class AppView(Enum):
    LIBRARY = "library"
    READING = "reading"


def flatten_toc(entries: List[TocEntry], level: int = 0) -> List[Tuple[str, str]]:
    """Flatten a nested table of contents into (label, target) rows.

    Nested labels are indented by two spaces per level.
    """
    rows: List[Tuple[str, str]] = []
    for entry in entries:
        rows.append(("  " * level + (entry.label or "Untitled"), entry.target))
        if entry.children:
            rows.extend(flatten_toc(list(entry.children), level + 1))
    return rows


class ReaderController(QObject):
    """
    Manages the live reading session: opening and closing books, navigation,
    progress tracking and rebuilding the rendering surface on layout changes.

    Signals:
        view_changed(str): The app switched between library and reading.
        chapters_changed(list): Flattened (label, target) chapter rows.
    """

    view_changed = Signal(str)
    chapters_changed = Signal(list)

    def __init__(
        self,
        renderer: DocumentRenderer,
        backend: PersistenceBackend,
        library_store: LibraryStore,
        debouncer: ProgressDebouncer,
        appearance: ReaderAppearanceState,
        notifier: Notifier,
    ):
        super().__init__()

        if renderer is None:
            raise ValueError("DocumentRenderer must not be None")
        if backend is None:
            raise ValueError("PersistenceBackend must not be None")
        if library_store is None:
            raise ValueError("LibraryStore must not be None")
        if debouncer is None:
            raise ValueError("ProgressDebouncer must not be None")
        if appearance is None:
            raise ValueError("ReaderAppearanceState must not be None")
        if notifier is None:
            raise ValueError("Notifier must not be None")

        self.renderer = renderer
        self.backend = backend
        self.library_store = library_store
        self.debouncer = debouncer
        self.appearance = appearance
        self.notifier = notifier

        # Session state
        self.view = AppView.LIBRARY
        self.document_open = False
        self.current_entry: Optional[LibraryEntry] = None
        self.chapters: List[Tuple[str, str]] = []
        self._pending_transition: Optional[asyncio.Future] = None

        self.appearance.changed.connect(self._on_appearance_changed)
        self.appearance.layout_flow_changed.connect(self._on_layout_flow_changed)

    @property
    def current_book_id(self) -> Optional[str]:
        return self.current_entry.id if self.current_entry else None

    def show_library(self) -> None:
        self.view = AppView.LIBRARY
        self.view_changed.emit(self.view.value)

    async def open_book(self, path: Optional[Path] = None) -> bool:
        """
        Open a book for reading, asking the picker when no path is given.

        Returns:
            True if the document is displayed.
        """
        if path is None:
            path = await self.backend.pick_book()
            if path is None:
                return False
        path = Path(path)

        try:
            data = await self.backend.read_document(path)
        except PersistenceError as e:
            logger.error(f"Failed to read book {path}: {e}")
            self.notifier.error("Failed to open book")
            return False

        if self.document_open:
            await self._unload()

        try:
            metadata = await self.renderer.open(data)
            self.renderer.render_to(self.appearance.layout_flow)
            self.renderer.set_typography(self.appearance.typography())
            await self.renderer.render_at(None)
        except Exception as e:
            logger.error(f"Error opening book {path}: {e}", exc_info=True)
            self.renderer.close()
            self.notifier.error("Failed to open book")
            return False
        self.document_open = True

        self.current_entry = await self.library_store.add_or_touch(path, metadata)
        if self.current_entry is not None:
            await self._restore_position(self.current_entry.id)

        try:
            toc = await self.renderer.table_of_contents()
        except Exception as e:
            logger.warning(f"Table of contents unavailable: {e}")
            toc = []
        self.chapters = flatten_toc(toc)
        self.chapters_changed.emit(self.chapters)

        self._set_view(AppView.READING)
        self.notifier.success(f"Opened: {metadata.title}")
        logger.info(f"Opened book {metadata.title!r} from {path}")
        return True

    async def _restore_position(self, book_id: str) -> None:
        token = await self.library_store.get_progress(book_id)
        if not token:
            return
        try:
            await self.renderer.render_at(token)
        except Exception as e:
            # The book stays at its start position
            logger.warning(f"Failed to restore position {token!r}: {e}")
            return
        self.notifier.info("Restored reading position")

    @Slot(str, float)
    def handle_relocated(self, token: str, fraction: float) -> None:
        """Feed a position change from the renderer into the progress writer."""
        if not self.document_open or not token:
            return
        self.debouncer.schedule(self.current_book_id, token, fraction)

    def next_page(self) -> None:
        if self.document_open:
            self.renderer.next_page()

    def previous_page(self) -> None:
        if self.document_open:
            self.renderer.prev_page()

    async def go_to(self, target: str) -> bool:
        """Display a table-of-contents target."""
        if not self.document_open or not target:
            return False
        try:
            await self.renderer.render_at(target)
        except Exception as e:
            logger.warning(f"Failed to navigate to {target!r}: {e}")
            return False
        return True

    async def close_book(self) -> None:
        """Persist pending progress, unload the document and show the library."""
        if self.document_open:
            await self._unload()
        self._set_view(AppView.LIBRARY)

    async def _unload(self) -> None:
        await self.wait_for_transition()
        await self.debouncer.flush()
        self.renderer.close()
        self.document_open = False
        self.current_entry = None
        self.chapters = []
        self.chapters_changed.emit(self.chapters)

    # Layout flow transition

    @Slot(str)
    def _on_layout_flow_changed(self, name: str) -> None:
        if not self.document_open:
            # Preference changes; there is no surface to rebuild
            return
        previous = self._pending_transition
        self._pending_transition = asyncio.ensure_future(
            self._rebuild_surface(name, previous)
        )

    async def wait_for_transition(self) -> None:
        """Wait until a pending layout transition has finished."""
        pending, self._pending_transition = self._pending_transition, None
        if pending is not None:
            await pending

    async def _rebuild_surface(self, name: str, previous: Optional[asyncio.Future]) -> None:
        if previous is not None:
            await previous
        flow = create_layout_flow(name)
        token = self.renderer.current_resume_token()
        if token is None:
            logger.debug("No resume position; layout change applies to the next book")
            return
        try:
            self.renderer.destroy()
            self.renderer.render_to(flow)
            self.renderer.set_typography(self.appearance.typography())
            await self.renderer.render_at(token)
        except Exception as e:
            logger.error(f"Layout change to {name} failed: {e}", exc_info=True)
            self.notifier.error("Failed to change reading mode")
            return
        logger.debug(f"Rendering surface rebuilt as {name} at {token}")

    @Slot()
    def _on_appearance_changed(self) -> None:
        if self.document_open:
            self.renderer.set_typography(self.appearance.typography())

    def _set_view(self, view: AppView) -> None:
        if self.view is view:
            return
        self.view = view
        self.view_changed.emit(view.value)
