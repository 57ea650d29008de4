"""Main entry point for the Epilogue reader."""

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Optional

from PySide6 import QtAsyncio
from PySide6.QtWidgets import QApplication, QMainWindow

from epilogue.coordinators import CommandDispatcher, ReaderController, SessionOrchestrator
from epilogue.io import PersistenceBackend, create_backend
from epilogue.log import setup_logging
from epilogue.services import (
    Atmosphere,
    BackgroundState,
    LibraryStore,
    OverlayState,
    PresetEngine,
    ProgressDebouncer,
    QtPlaybackHandle,
    ReaderAppearanceState,
    SettingsManager,
)
from epilogue.ui import DocumentRenderer, NoDocumentEngine, Notifier, QtFilePicker

logger = logging.getLogger(__name__)


@dataclass
class Application:
    """Every long-lived component, wired together."""

    settings: SettingsManager
    backend: PersistenceBackend
    notifier: Notifier
    atmosphere: Atmosphere
    preset_engine: PresetEngine
    library_store: LibraryStore
    debouncer: ProgressDebouncer
    reader_controller: ReaderController
    orchestrator: SessionOrchestrator
    dispatcher: Optional[CommandDispatcher] = None

    async def start(self) -> None:
        """Restore the session, then accept commands."""
        prefs = await self.orchestrator.start()
        self.dispatcher = CommandDispatcher(
            atmosphere=self.atmosphere,
            preset_engine=self.preset_engine,
            reader_controller=self.reader_controller,
            library_store=self.library_store,
            backend=self.backend,
            prefs=prefs,
            notifier=self.notifier,
        )


def build_application(
    settings: SettingsManager,
    renderer: DocumentRenderer,
    backend: Optional[PersistenceBackend] = None,
    background: Optional[BackgroundState] = None,
    picker=None,
) -> Application:
    """
    Composition root: the only place that knows how to instantiate and wire
    all components.
    """
    backend = backend or create_backend(settings, picker=picker)
    notifier = Notifier()

    atmosphere = Atmosphere(
        background=background or BackgroundState(),
        overlay=OverlayState(),
        reader=ReaderAppearanceState(),
    )
    preset_engine = PresetEngine(
        backend, atmosphere, notifier, media_dir=settings.get_media_dir()
    )
    library_store = LibraryStore(backend)
    debouncer = ProgressDebouncer(library_store, settings.get_progress_debounce_seconds())
    reader_controller = ReaderController(
        renderer=renderer,
        backend=backend,
        library_store=library_store,
        debouncer=debouncer,
        appearance=atmosphere.reader,
        notifier=notifier,
    )
    orchestrator = SessionOrchestrator(
        backend=backend,
        atmosphere=atmosphere,
        preset_engine=preset_engine,
        library_store=library_store,
        reader_controller=reader_controller,
        debouncer=debouncer,
        recent_limit=settings.get_recent_limit(),
    )
    return Application(
        settings=settings,
        backend=backend,
        notifier=notifier,
        atmosphere=atmosphere,
        preset_engine=preset_engine,
        library_store=library_store,
        debouncer=debouncer,
        reader_controller=reader_controller,
        orchestrator=orchestrator,
    )


def main(renderer: Optional[DocumentRenderer] = None):
    """Run the reader until its window is closed."""
    settings = SettingsManager()
    setup_logging(settings.get_log_level())

    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("Epilogue")
    qt_app.setOrganizationName("Epilogue")

    window = QMainWindow()
    window.setWindowTitle("Epilogue")

    app = build_application(
        settings,
        renderer or NoDocumentEngine(),
        background=BackgroundState(QtPlaybackHandle(), QtPlaybackHandle()),
        picker=QtFilePicker(window),
    )
    app.notifier.notice_posted.connect(
        lambda level, message: window.statusBar().showMessage(message, 3000)
    )

    window.show()
    QtAsyncio.run(app.start(), keep_running=True, quit_qapp=False)

    # Best-effort: the Qt loop is gone, finish on a plain asyncio loop
    asyncio.run(app.orchestrator.shutdown())
    close = getattr(app.backend, "close", None)
    if close is not None:
        close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
