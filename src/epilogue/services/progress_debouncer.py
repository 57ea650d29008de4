"""Progress Debouncer - collapses bursts of position updates into one write."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from .library_store import LibraryStore

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_SECONDS = 2.0


@dataclass(frozen=True)
class ProgressUpdate:
    book_id: str
    token: str
    fraction: float


class ProgressDebouncer:
    """
    Persists only the latest progress update once the window has passed
    without a newer one.

    A superseded update is dropped by resetting the timer; an in-flight
    write is never cancelled.
    """

    def __init__(self, store: LibraryStore, window: float = DEFAULT_WINDOW_SECONDS):
        if store is None:
            raise ValueError("store must not be None")
        self.store = store
        self.window = window
        self._pending: Optional[ProgressUpdate] = None
        self._handle: Optional[asyncio.TimerHandle] = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> Optional[ProgressUpdate]:
        return self._pending

    def schedule(self, book_id: Optional[str], token: str, fraction: float) -> None:
        """Replace any pending update and restart the window."""
        if not book_id:
            return
        self._pending = ProgressUpdate(book_id, token, fraction)
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.window, self._on_timeout)

    def cancel(self) -> None:
        """Drop the pending update without writing it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = None

    async def flush(self) -> bool:
        """Write the pending update now, if any."""
        update = self._take()
        if update is None:
            return False
        return await self._write(update)

    async def drain(self) -> None:
        """Wait for writes started by expired timers."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    def _take(self) -> Optional[ProgressUpdate]:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        update, self._pending = self._pending, None
        return update

    def _on_timeout(self) -> None:
        self._handle = None
        update, self._pending = self._pending, None
        if update is None:
            return
        task = asyncio.ensure_future(self._write(update))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _write(self, update: ProgressUpdate) -> bool:
        saved = await self.store.record_progress(update.book_id, update.token, update.fraction)
        if saved:
            logger.debug(f"Progress saved for {update.book_id}: {update.fraction:.1%}")
        return saved
