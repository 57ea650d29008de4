"""Domain layer - Pure entities describing presets, preferences and books."""

from .layout_flow import PAGINATED, SCROLLED, LayoutFlow, create_layout_flow
from .library_entry import BookMetadata, LibraryEntry, TocEntry
from .media import MediaKind, classify_media, is_audio_track
from .preferences import ApplicationPreferences, default_preferences, resolve
from .preset import (
    BUILTIN_PRESET_NAMES,
    BUILTIN_PRESETS,
    SESSION_PRESET_NAME,
    BackgroundConfig,
    OverlayConfig,
    Preset,
    ReaderConfig,
)

__all__ = [
    "ApplicationPreferences",
    "BackgroundConfig",
    "BookMetadata",
    "BUILTIN_PRESET_NAMES",
    "BUILTIN_PRESETS",
    "create_layout_flow",
    "classify_media",
    "default_preferences",
    "is_audio_track",
    "LayoutFlow",
    "LibraryEntry",
    "MediaKind",
    "OverlayConfig",
    "PAGINATED",
    "Preset",
    "ReaderConfig",
    "resolve",
    "SCROLLED",
    "SESSION_PRESET_NAME",
    "TocEntry",
]
