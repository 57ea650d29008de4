"""Preset Engine - capture, apply and persist named atmosphere snapshots."""

import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional

from epilogue.core import (
    BUILTIN_PRESET_NAMES,
    BUILTIN_PRESETS,
    SESSION_PRESET_NAME,
    ApplicationPreferences,
    BackgroundConfig,
    MediaKind,
    OverlayConfig,
    Preset,
    ReaderConfig,
)
from epilogue.io import PersistenceBackend, PersistenceError

from .atmosphere import Atmosphere

logger = logging.getLogger(__name__)

SAVED_AT_KEY = "savedAt"


class PresetEngine:
    """
    Serializes the atmosphere into named presets and applies them back.

    Stored presets are fetched lazily and cached; the built-in presets are
    static data and available even when the backend is not. Applying a
    preset either succeeds completely or leaves the atmosphere as it was.
    """

    def __init__(
        self,
        backend: PersistenceBackend,
        atmosphere: Atmosphere,
        notifier,
        media_dir: Optional[Path] = None,
        clock: Callable[[], float] = time.time,
    ):
        if backend is None:
            raise ValueError("backend must not be None")
        if atmosphere is None:
            raise ValueError("atmosphere must not be None")
        if notifier is None:
            raise ValueError("notifier must not be None")
        self.backend = backend
        self.atmosphere = atmosphere
        self.notifier = notifier
        self.media_dir = Path(media_dir) if media_dir else None
        self._clock = clock
        self._builtins: Dict[str, Preset] = {p.name: p for p in BUILTIN_PRESETS}
        self._stored: Optional[Dict[str, Preset]] = None
        self.current_preset: Optional[Preset] = None

    # Listing and lookup

    async def refresh(self) -> None:
        """Reload stored presets from the backend into the cache."""
        stored: Dict[str, Preset] = {}
        try:
            names = await self.backend.list_preset_names()
        except PersistenceError as e:
            logger.error(f"Failed to list presets: {e}")
            self._stored = None
            return

        for name in names:
            preset = await self._fetch(name)
            if preset is not None:
                stored[name] = preset
        self._stored = stored
        logger.debug(f"Loaded {len(stored)} stored presets")

    async def list_presets(self) -> List[Preset]:
        """User presets in storage order, then the built-ins."""
        if self._stored is None:
            await self.refresh()
        user = [
            p for name, p in (self._stored or {}).items()
            if name not in self._builtins and name != SESSION_PRESET_NAME
        ]
        return user + list(BUILTIN_PRESETS)

    async def find(self, name: str) -> Optional[Preset]:
        """Look up a preset: built-ins, then the cache, then the backend."""
        if name in self._builtins:
            return self._builtins[name]
        if self._stored is not None and name in self._stored:
            return self._stored[name]
        return await self._fetch(name)

    async def load_session_snapshot(self) -> Optional[Preset]:
        return await self.find(SESSION_PRESET_NAME)

    async def _fetch(self, name: str) -> Optional[Preset]:
        try:
            data = await self.backend.load_preset(name)
        except PersistenceError as e:
            logger.error(f"Failed to load preset {name!r}: {e}")
            return None
        if data is None:
            return None
        try:
            return Preset.from_dict(data, name=name)
        except ValueError as e:
            logger.error(f"Ignoring malformed preset {name!r}: {e}")
            return None

    # Apply

    async def apply_preset(self, name: str) -> bool:
        """Apply a preset by name.

        Returns:
            False if the name is unknown or applying failed; the atmosphere
            is unchanged in both cases.
        """
        preset = await self.find(name)
        if preset is None:
            logger.warning(f"Preset not found: {name}")
            self.notifier.warning(f"Preset not found: {name}")
            return False
        return self.apply(preset)

    def apply(self, preset: Preset) -> bool:
        """Apply background, overlay then reader; unset fields are skipped."""
        snapshot = self.atmosphere.snapshot()
        try:
            self._apply_background(preset.background)
            self._apply_overlay(preset.overlay)
            self._apply_reader(preset.reader)
        except Exception as e:
            logger.error(f"Error applying preset {preset.name!r}: {e}", exc_info=True)
            self.atmosphere.restore(snapshot)
            self.notifier.error("Failed to apply preset")
            return False

        self.current_preset = preset
        logger.info(f"Applied preset: {preset.name}")
        return True

    def _apply_background(self, config: Optional[BackgroundConfig]) -> None:
        if config is None:
            return
        background = self.atmosphere.background
        if config.kind is MediaKind.NONE or not config.media_ref:
            background.clear_media()
        else:
            background.set_media(self.resolve_media_path(config.media_ref))

    def _apply_overlay(self, config: Optional[OverlayConfig]) -> None:
        if config is None or config.is_empty:
            return
        overlay = self.atmosphere.overlay
        current_color, current_opacity = overlay.get_current_tint()
        color = current_color if config.color is None else config.color
        opacity = current_opacity if config.opacity is None else config.opacity
        overlay.set_tint(color, opacity)

    def _apply_reader(self, config: Optional[ReaderConfig]) -> None:
        if config is None:
            return
        reader = self.atmosphere.reader
        if config.opacity is not None:
            reader.set_opacity(config.opacity)
        if config.background_color is not None:
            reader.set_background_color(config.background_color)
        if config.text_color is not None:
            reader.set_text_color(config.text_color)
        if config.font_family is not None:
            reader.set_font_family(config.font_family)
        if config.font_size is not None:
            reader.set_font_size(config.font_size)
        if config.glass_enabled is not None:
            reader.set_glass_enabled(config.glass_enabled)
        if config.glass_blur is not None:
            reader.set_glass_blur(config.glass_blur)
        if config.scrollbar_track is not None or config.scrollbar_thumb is not None:
            reader.set_scrollbar_colors(config.scrollbar_track, config.scrollbar_thumb)
        # Last: the flow change rebuilds the rendering surface with the above
        if config.layout_flow is not None:
            reader.set_layout_flow(config.layout_flow)

    def resolve_media_path(self, media_ref: str) -> str:
        """Relative preset media paths live under the media directory."""
        path = Path(media_ref)
        if path.is_absolute() or self.media_dir is None:
            return media_ref
        return str(self.media_dir / path)

    # Capture and save

    def capture_current(self, name: str) -> Preset:
        """Snapshot the live atmosphere as a new, unsaved preset."""
        background = self.atmosphere.background.get_current_media()
        color, opacity = self.atmosphere.overlay.get_current_tint()
        reader = self.atmosphere.reader
        return Preset(
            name=name,
            author="User",
            description=f"Custom preset: {name}",
            background=BackgroundConfig(background.kind, background.path),
            overlay=OverlayConfig(color, opacity),
            reader=ReaderConfig(
                opacity=reader.opacity,
                background_color=reader.background_color,
                text_color=reader.text_color,
                font_family=reader.font_family,
                font_size=reader.font_size,
                layout_flow=reader.layout_flow.name,
                glass_enabled=reader.glass_enabled,
                glass_blur=reader.glass_blur,
                scrollbar_track=reader.scrollbar_track,
                scrollbar_thumb=reader.scrollbar_thumb,
            ),
        )

    async def save_as_named_preset(
        self, name: str, prefs: ApplicationPreferences
    ) -> Optional[Preset]:
        """Capture and persist under name; None (with a notice) on failure."""
        name = (name or "").strip()
        if not name:
            self.notifier.warning("Preset name cannot be empty")
            return None
        if name in self._builtins or name.startswith("_"):
            self.notifier.warning(f"Preset name is reserved: {name}")
            return None

        self.atmosphere.capture_into(prefs)
        preset = self.capture_current(name)
        try:
            await self.backend.save_preset(name, preset.to_dict())
        except PersistenceError as e:
            logger.error(f"Failed to save preset {name!r}: {e}")
            self.notifier.error("Failed to save preset")
            return None

        await self.refresh()
        self.notifier.success(f"Saved preset: {name}")
        return preset

    async def save_session_snapshot(self, prefs: ApplicationPreferences) -> bool:
        """Autosave the live atmosphere as the session snapshot, silently."""
        self.atmosphere.capture_into(prefs)
        preset = self.capture_current(SESSION_PRESET_NAME)
        preset.extras[SAVED_AT_KEY] = self._clock()
        try:
            await self.backend.save_preset(SESSION_PRESET_NAME, preset.to_dict())
        except PersistenceError as e:
            logger.debug(f"Session snapshot not saved: {e}")
            return False

        if self._stored is not None:
            self._stored[SESSION_PRESET_NAME] = preset
        logger.debug("Session snapshot saved")
        return True

    async def delete_preset(self, name: str) -> bool:
        """Delete a user preset. Built-ins are refused with a notice."""
        if name in self._builtins:
            self.notifier.warning(f"Built-in preset cannot be deleted: {name}")
            return False
        try:
            await self.backend.delete_preset(name)
        except PersistenceError as e:
            logger.error(f"Failed to delete preset {name!r}: {e}")
            self.notifier.error("Failed to delete preset")
            return False

        if self.current_preset is not None and self.current_preset.name == name:
            self.current_preset = None
        await self.refresh()
        self.notifier.success(f"Deleted preset: {name}")
        return True
