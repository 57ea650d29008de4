"""Command Dispatcher - routes typed user commands to their handlers."""

import logging
from typing import Awaitable, Callable, Dict, Optional, Type

from epilogue.core import ApplicationPreferences
from epilogue.core import commands as cmd
from epilogue.io import PersistenceBackend, PersistenceError
from epilogue.services import Atmosphere, LibraryStore, PresetEngine
from epilogue.ui import Notifier

from .reader_controller import ReaderController

logger = logging.getLogger(__name__)

Handler = Callable[[cmd.Command], Awaitable[bool]]


class CommandDispatcher:
    """
    Single entry point for user actions.

    Each handler returns True when it changed something. After a successful
    atmosphere command the live state is mirrored into the shared
    preferences record, which is then flushed to persistence.
    """

    def __init__(
        self,
        atmosphere: Atmosphere,
        preset_engine: PresetEngine,
        reader_controller: ReaderController,
        library_store: LibraryStore,
        backend: PersistenceBackend,
        prefs: ApplicationPreferences,
        notifier: Notifier,
    ):
        if atmosphere is None:
            raise ValueError("Atmosphere must not be None")
        if preset_engine is None:
            raise ValueError("PresetEngine must not be None")
        if reader_controller is None:
            raise ValueError("ReaderController must not be None")
        if library_store is None:
            raise ValueError("LibraryStore must not be None")
        if backend is None:
            raise ValueError("PersistenceBackend must not be None")
        if prefs is None:
            raise ValueError("ApplicationPreferences must not be None")
        if notifier is None:
            raise ValueError("Notifier must not be None")

        self.atmosphere = atmosphere
        self.preset_engine = preset_engine
        self.reader_controller = reader_controller
        self.library_store = library_store
        self.backend = backend
        self.prefs = prefs
        self.notifier = notifier

        self._handlers: Dict[Type[cmd.Command], Handler] = {
            cmd.ApplyPreset: self._apply_preset,
            cmd.SavePreset: self._save_preset,
            cmd.DeletePreset: self._delete_preset,
            cmd.SetTint: self._set_tint,
            cmd.ClearTint: self._clear_tint,
            cmd.SetBackgroundMedia: self._set_background_media,
            cmd.ClearBackgroundMedia: self._clear_background_media,
            cmd.SetBackgroundMuted: self._set_background_muted,
            cmd.SetAudioTrack: self._set_audio_track,
            cmd.ClearAudioTrack: self._clear_audio_track,
            cmd.SetAudioVolume: self._set_audio_volume,
            cmd.SetAudioMuted: self._set_audio_muted,
            cmd.SetFontFamily: self._set_font_family,
            cmd.SetFontSize: self._set_font_size,
            cmd.StepFontSize: self._step_font_size,
            cmd.SetTextColor: self._set_text_color,
            cmd.SetContainerColor: self._set_container_color,
            cmd.SetContainerOpacity: self._set_container_opacity,
            cmd.SetGlass: self._set_glass,
            cmd.SetGlassBlur: self._set_glass_blur,
            cmd.SetScrollbarColors: self._set_scrollbar_colors,
            cmd.SetLayoutFlow: self._set_layout_flow,
            cmd.OpenBook: self._open_book,
            cmd.CloseBook: self._close_book,
            cmd.NextPage: self._next_page,
            cmd.PreviousPage: self._previous_page,
            cmd.GoTo: self._go_to,
            cmd.RemoveBook: self._remove_book,
        }

    async def dispatch(self, command: cmd.Command) -> bool:
        """Route command to its handler.

        Raises:
            TypeError: If no handler exists for the command type.
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise TypeError(f"Unsupported command: {type(command).__name__}")

        logger.debug(f"Dispatching {command!r}")
        changed = await handler(command)
        if changed and command.changes_atmosphere:
            await self.flush_preferences()
        return changed

    async def flush_preferences(self) -> bool:
        """Mirror the live state into prefs and persist them."""
        self.atmosphere.capture_into(self.prefs)
        self.prefs.touch()
        try:
            await self.backend.set_preferences(self.prefs.to_dict())
        except PersistenceError as e:
            logger.error(f"Failed to save preferences: {e}")
            self.notifier.error("Failed to save preferences")
            return False
        return True

    # Presets

    async def _apply_preset(self, command: cmd.ApplyPreset) -> bool:
        applied = await self.preset_engine.apply_preset(command.name)
        if applied and self.preset_engine.current_preset is not None:
            self.prefs.update_from_preset(self.preset_engine.current_preset)
        return applied

    async def _save_preset(self, command: cmd.SavePreset) -> bool:
        return await self.preset_engine.save_as_named_preset(command.name, self.prefs) is not None

    async def _delete_preset(self, command: cmd.DeletePreset) -> bool:
        return await self.preset_engine.delete_preset(command.name)

    # Overlay

    async def _set_tint(self, command: cmd.SetTint) -> bool:
        self.atmosphere.overlay.set_tint(command.color, command.opacity)
        return True

    async def _clear_tint(self, command: cmd.ClearTint) -> bool:
        self.atmosphere.overlay.clear_tint()
        return True

    # Background media and ambient audio

    async def _set_background_media(self, command: cmd.SetBackgroundMedia) -> bool:
        path = command.path or await self._pick(self.backend.pick_media)
        if not path:
            return False
        if not self.atmosphere.background.set_media(path):
            self.notifier.warning("Unsupported media type")
            return False
        return True

    async def _clear_background_media(self, command: cmd.ClearBackgroundMedia) -> bool:
        self.atmosphere.background.clear_media()
        return True

    async def _set_background_muted(self, command: cmd.SetBackgroundMuted) -> bool:
        self.atmosphere.background.set_muted(command.muted)
        return True

    async def _set_audio_track(self, command: cmd.SetAudioTrack) -> bool:
        path = command.path or await self._pick(self.backend.pick_audio)
        if not path:
            return False
        if not self.atmosphere.background.set_audio_track(path):
            self.notifier.warning("Unsupported audio type")
            return False
        return True

    async def _clear_audio_track(self, command: cmd.ClearAudioTrack) -> bool:
        self.atmosphere.background.clear_audio_track()
        return True

    async def _set_audio_volume(self, command: cmd.SetAudioVolume) -> bool:
        self.atmosphere.background.set_audio_volume(command.percent)
        return True

    async def _set_audio_muted(self, command: cmd.SetAudioMuted) -> bool:
        self.atmosphere.background.set_audio_muted(command.muted)
        return True

    async def _pick(self, picker) -> Optional[str]:
        try:
            path = await picker()
        except PersistenceError as e:
            logger.error(f"File picker failed: {e}")
            return None
        return str(path) if path else None

    # Reader appearance

    async def _set_font_family(self, command: cmd.SetFontFamily) -> bool:
        if not self.atmosphere.reader.set_font_family(command.family):
            self.notifier.warning(f"Unknown font family: {command.family}")
            return False
        return True

    async def _set_font_size(self, command: cmd.SetFontSize) -> bool:
        self.atmosphere.reader.set_font_size(command.px)
        return True

    async def _step_font_size(self, command: cmd.StepFontSize) -> bool:
        self.atmosphere.reader.step_font_size(command.delta)
        return True

    async def _set_text_color(self, command: cmd.SetTextColor) -> bool:
        self.atmosphere.reader.set_text_color(command.color)
        return True

    async def _set_container_color(self, command: cmd.SetContainerColor) -> bool:
        self.atmosphere.reader.set_background_color(command.color)
        return True

    async def _set_container_opacity(self, command: cmd.SetContainerOpacity) -> bool:
        self.atmosphere.reader.set_opacity(command.opacity)
        return True

    async def _set_glass(self, command: cmd.SetGlass) -> bool:
        self.atmosphere.reader.set_glass_enabled(command.enabled)
        return True

    async def _set_glass_blur(self, command: cmd.SetGlassBlur) -> bool:
        self.atmosphere.reader.set_glass_blur(command.px)
        return True

    async def _set_scrollbar_colors(self, command: cmd.SetScrollbarColors) -> bool:
        self.atmosphere.reader.set_scrollbar_colors(command.track, command.thumb)
        return True

    async def _set_layout_flow(self, command: cmd.SetLayoutFlow) -> bool:
        if not self.atmosphere.reader.set_layout_flow(command.flow):
            self.notifier.warning(f"Unknown layout flow: {command.flow}")
            return False
        await self.reader_controller.wait_for_transition()
        return True

    # Reading session

    async def _open_book(self, command: cmd.OpenBook) -> bool:
        return await self.reader_controller.open_book(command.path)

    async def _close_book(self, command: cmd.CloseBook) -> bool:
        await self.reader_controller.close_book()
        return True

    async def _next_page(self, command: cmd.NextPage) -> bool:
        self.reader_controller.next_page()
        return True

    async def _previous_page(self, command: cmd.PreviousPage) -> bool:
        self.reader_controller.previous_page()
        return True

    async def _go_to(self, command: cmd.GoTo) -> bool:
        return await self.reader_controller.go_to(command.target)

    async def _remove_book(self, command: cmd.RemoveBook) -> bool:
        removed = await self.library_store.remove(command.book_id)
        if not removed:
            self.notifier.error("Failed to remove book")
        return removed
