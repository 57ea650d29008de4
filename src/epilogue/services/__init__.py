"""Services layer - State holders and business logic."""

from .atmosphere import Atmosphere
from .background_state import BackgroundState, CurrentAudio, CurrentMedia
from .cover_service import CoverService, PlaceholderCover, placeholder_for
from .library_store import LibraryStore
from .overlay_state import OverlayState
from .playback import NullPlaybackHandle, PlaybackError, PlaybackHandle, QtPlaybackHandle
from .preset_engine import PresetEngine
from .progress_debouncer import ProgressDebouncer, ProgressUpdate
from .reader_appearance import ReaderAppearanceState
from .settings_manager import SettingsManager

__all__ = [
    "Atmosphere",
    "BackgroundState",
    "CoverService",
    "CurrentAudio",
    "CurrentMedia",
    "LibraryStore",
    "NullPlaybackHandle",
    "OverlayState",
    "placeholder_for",
    "PlaceholderCover",
    "PlaybackError",
    "PlaybackHandle",
    "PresetEngine",
    "ProgressDebouncer",
    "ProgressUpdate",
    "QtPlaybackHandle",
    "ReaderAppearanceState",
    "SettingsManager",
]
