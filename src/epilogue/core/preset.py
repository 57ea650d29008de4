"""Preset entity - a named, versioned snapshot of the reading atmosphere.

Wire format (one JSON object per preset)::

    {
        "version": "2.0",
        "name": "Night Reading",
        "author": "...",
        "description": "...",
        "background": {"type": "none|image|motion", "path": null},
        "overlay": {"color": "#1a1a2e", "opacity": 0.4},
        "reader": {
            "opacity": 0.85,
            "backgroundColor": "#2d2d2d",
            "textColor": "#e0e0e0",
            "fontFamily": "serif",
            "fontSize": 20,
            "readingMode": "paginated",
            "glassmorphism": false,
            "glassBlur": 8,
            "scrollbarTrack": "#1a1a1a",
            "scrollbarThumb": "#555555"
        }
    }

Keys this module does not know are kept in ``extras`` so that a preset written
by a newer schema survives a load/save cycle unchanged.
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from .colors import clamp
from .media import MediaKind, classify_media

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "2.0"
SUPPORTED_VERSIONS = ("1.0", "2.0")

SESSION_PRESET_NAME = "_last_session"
BUILTIN_PRESET_NAMES = ("Cozy Reading", "Focus Mode", "Night Reading")

FONT_SIZE_MIN = 12
FONT_SIZE_MAX = 32
GLASS_BLUR_MIN = 0
GLASS_BLUR_MAX = 40

FONT_FAMILIES = {
    "serif": "Georgia, 'Times New Roman', serif",
    "sans-serif": "-apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif",
    "monospace": "'Courier New', Consolas, monospace",
}
LAYOUT_FLOWS = ("paginated", "scrolled")

_READER_KEYS = {
    "opacity": "opacity",
    "background_color": "backgroundColor",
    "text_color": "textColor",
    "font_family": "fontFamily",
    "font_size": "fontSize",
    "layout_flow": "readingMode",
    "glass_enabled": "glassmorphism",
    "glass_blur": "glassBlur",
    "scrollbar_track": "scrollbarTrack",
    "scrollbar_thumb": "scrollbarThumb",
}


def clamp_font_size(size: float) -> int:
    return int(clamp(round(size), FONT_SIZE_MIN, FONT_SIZE_MAX))


def clamp_glass_blur(px: float) -> int:
    return int(clamp(round(px), GLASS_BLUR_MIN, GLASS_BLUR_MAX))


def clamp_unit(value: float) -> float:
    return float(clamp(value, 0.0, 1.0))


def _number(value: Any, key: str) -> Optional[float]:
    """Read a numeric wire value; anything non-numeric loads as unset."""
    if value is None:
        return None
    try:
        if isinstance(value, bool):
            raise TypeError("boolean is not a number")
        number = float(value)
        if not math.isfinite(number):
            raise ValueError("not finite")
    except (TypeError, ValueError):
        logger.warning(f"Ignoring non-numeric preset field {key!r}: {value!r}")
        return None
    return number


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) and value else None


def _split(data: Any, known: tuple[str, ...]) -> tuple[Dict[str, Any], Dict[str, Any]]:
    if not isinstance(data, dict):
        return {}, {}
    known_part = {k: v for k, v in data.items() if k in known}
    extras = {k: v for k, v in data.items() if k not in known}
    return known_part, extras


@dataclass
class BackgroundConfig:
    kind: MediaKind = MediaKind.NONE
    media_ref: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.kind is MediaKind.NONE:
            self.media_ref = None

    @classmethod
    def from_dict(cls, data: Any) -> "BackgroundConfig":
        known, extras = _split(data, ("type", "path"))
        path = _text(known.get("path"))
        declared = known.get("type")

        if declared == "none" or not path:
            return cls(MediaKind.NONE, None, extras)
        if declared == "image":
            kind = MediaKind.IMAGE
        elif declared in ("motion", "video"):
            kind = MediaKind.MOTION
        else:
            # "media" (older presets) and unknown types are classified by extension
            kind = classify_media(path)
        if kind is None:
            logger.warning(f"Preset background has unsupported media: {path}")
            return cls(MediaKind.NONE, None, extras)
        return cls(kind, path, extras)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data["type"] = self.kind.value
        data["path"] = self.media_ref
        return data


@dataclass
class OverlayConfig:
    """Overlay tint section. A field left as None keeps the live value."""

    color: Optional[str] = None
    opacity: Optional[float] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.opacity is not None:
            self.opacity = clamp_unit(self.opacity)

    @property
    def is_empty(self) -> bool:
        return self.color is None and self.opacity is None

    @classmethod
    def from_dict(cls, data: Any) -> "OverlayConfig":
        known, extras = _split(data, ("color", "opacity"))
        return cls(
            color=_text(known.get("color")),
            opacity=_number(known.get("opacity"), "overlay.opacity"),
            extras=extras,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        if self.color is not None:
            data["color"] = self.color
        if self.opacity is not None:
            data["opacity"] = self.opacity
        return data


@dataclass
class ReaderConfig:
    """Reader appearance section. Every field is optional; None means unset."""

    opacity: Optional[float] = None
    background_color: Optional[str] = None
    text_color: Optional[str] = None
    font_family: Optional[str] = None
    font_size: Optional[int] = None
    layout_flow: Optional[str] = None
    glass_enabled: Optional[bool] = None
    glass_blur: Optional[int] = None
    scrollbar_track: Optional[str] = None
    scrollbar_thumb: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.opacity is not None:
            self.opacity = clamp_unit(self.opacity)
        if self.font_size is not None:
            self.font_size = clamp_font_size(self.font_size)
        if self.glass_blur is not None:
            self.glass_blur = clamp_glass_blur(self.glass_blur)
        if self.font_family is not None and self.font_family not in FONT_FAMILIES:
            logger.warning(f"Ignoring unknown font family: {self.font_family}")
            self.font_family = None
        if self.layout_flow is not None and self.layout_flow not in LAYOUT_FLOWS:
            logger.warning(f"Ignoring unknown reading mode: {self.layout_flow}")
            self.layout_flow = None

    @classmethod
    def from_dict(cls, data: Any) -> "ReaderConfig":
        known, extras = _split(data, tuple(_READER_KEYS.values()))
        glass = known.get("glassmorphism")
        return cls(
            opacity=_number(known.get("opacity"), "reader.opacity"),
            background_color=_text(known.get("backgroundColor")),
            text_color=_text(known.get("textColor")),
            font_family=_text(known.get("fontFamily")),
            font_size=_number(known.get("fontSize"), "reader.fontSize"),
            layout_flow=_text(known.get("readingMode")),
            glass_enabled=glass if isinstance(glass, bool) else None,
            glass_blur=_number(known.get("glassBlur"), "reader.glassBlur"),
            scrollbar_track=_text(known.get("scrollbarTrack")),
            scrollbar_thumb=_text(known.get("scrollbarThumb")),
            extras=extras,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        for attr, key in _READER_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                data[key] = value
        return data


@dataclass
class Preset:
    """A named, versioned atmosphere snapshot.

    Sections left as None are not part of the snapshot; applying the preset
    leaves the matching state holder untouched.
    """

    name: str
    version: str = SCHEMA_VERSION
    author: Optional[str] = None
    description: Optional[str] = None
    background: Optional[BackgroundConfig] = None
    overlay: Optional[OverlayConfig] = None
    reader: Optional[ReaderConfig] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_builtin(self) -> bool:
        return self.name in BUILTIN_PRESET_NAMES

    @property
    def is_session(self) -> bool:
        return self.name == SESSION_PRESET_NAME

    def renamed(self, name: str) -> "Preset":
        return replace(self, name=name)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: Optional[str] = None) -> "Preset":
        """Build a preset from its wire form, clamping malformed values.

        Args:
            data: Parsed JSON object.
            name: Name to use when the object carries none (the storage key).

        Raises:
            ValueError: If data is not an object or no name is available.
        """
        if not isinstance(data, dict):
            raise ValueError("Preset data must be a JSON object")
        known_keys = ("version", "name", "author", "description",
                      "background", "overlay", "reader")
        known, extras = _split(data, known_keys)

        preset_name = _text(known.get("name")) or name
        if not preset_name:
            raise ValueError("Preset has no name")

        version = str(known.get("version") or SCHEMA_VERSION)
        if version not in SUPPORTED_VERSIONS:
            logger.warning(f"Preset {preset_name!r} uses schema version {version}; loading known fields")

        return cls(
            name=preset_name,
            version=version,
            author=_text(known.get("author")),
            description=_text(known.get("description")),
            background=BackgroundConfig.from_dict(known["background"]) if "background" in known else None,
            overlay=OverlayConfig.from_dict(known["overlay"]) if "overlay" in known else None,
            reader=ReaderConfig.from_dict(known["reader"]) if "reader" in known else None,
            extras=extras,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extras)
        data["version"] = self.version
        data["name"] = self.name
        if self.author is not None:
            data["author"] = self.author
        if self.description is not None:
            data["description"] = self.description
        if self.background is not None:
            data["background"] = self.background.to_dict()
        if self.overlay is not None:
            data["overlay"] = self.overlay.to_dict()
        if self.reader is not None:
            data["reader"] = self.reader.to_dict()
        return data


def _builtin(name: str, description: str, overlay: OverlayConfig, reader: ReaderConfig) -> Preset:
    return Preset(
        name=name,
        author="Epilogue",
        description=description,
        background=BackgroundConfig(),
        overlay=overlay,
        reader=reader,
    )


BUILTIN_PRESETS = (
    _builtin(
        "Cozy Reading",
        "Warm, comfortable reading atmosphere",
        OverlayConfig("#8B4513", 0.2),
        ReaderConfig(
            opacity=0.92, background_color="#FFF8DC", text_color="#3e2723",
            font_family="serif", font_size=18, layout_flow="paginated",
            glass_enabled=False, glass_blur=12,
            scrollbar_track="#1a1a1a", scrollbar_thumb="#8B4513",
        ),
    ),
    _builtin(
        "Focus Mode",
        "Minimal distraction, maximum concentration",
        OverlayConfig("#000000", 0.0),
        ReaderConfig(
            opacity=1.0, background_color="#FFFFFF", text_color="#1a1a1a",
            font_family="sans-serif", font_size=18, layout_flow="paginated",
            glass_enabled=False, glass_blur=0,
            scrollbar_track="#f0f0f0", scrollbar_thumb="#999999",
        ),
    ),
    _builtin(
        "Night Reading",
        "Gentle on the eyes for late-night reading",
        OverlayConfig("#1a1a2e", 0.4),
        ReaderConfig(
            opacity=0.85, background_color="#2d2d2d", text_color="#e0e0e0",
            font_family="serif", font_size=20, layout_flow="paginated",
            glass_enabled=False, glass_blur=8,
            scrollbar_track="#1a1a1a", scrollbar_thumb="#555555",
        ),
    ),
)
