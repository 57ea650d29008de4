"""Media classification by file extension."""

from enum import Enum
from pathlib import Path
from typing import Optional

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp", "bmp", "svg"})
MOTION_EXTENSIONS = frozenset({"mp4", "webm", "mov", "avi", "mkv"})
AUDIO_EXTENSIONS = frozenset({"mp3", "wav", "ogg", "flac", "aac", "m4a", "wma"})


class MediaKind(Enum):
    """Kind of background media currently shown."""

    NONE = "none"
    IMAGE = "image"
    MOTION = "motion"


def _extension(path: str) -> str:
    return Path(path).suffix.lower().lstrip(".")


def classify_media(path: Optional[str]) -> Optional[MediaKind]:
    """Classify a background media path.

    Returns:
        MediaKind.IMAGE or MediaKind.MOTION, or None for an unsupported
        extension or an empty path.
    """
    if not path:
        return None
    ext = _extension(path)
    if ext in IMAGE_EXTENSIONS:
        return MediaKind.IMAGE
    if ext in MOTION_EXTENSIONS:
        return MediaKind.MOTION
    return None


def is_audio_track(path: Optional[str]) -> bool:
    """Return True if path has a supported ambient audio extension."""
    return bool(path) and _extension(path) in AUDIO_EXTENSIONS
