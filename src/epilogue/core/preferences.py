"""ApplicationPreferences - the live working copy of the atmosphere settings."""

import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional

from .colors import clamp
from .preset import (
    FONT_FAMILIES,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    GLASS_BLUR_MAX,
    GLASS_BLUR_MIN,
    LAYOUT_FLOWS,
    Preset,
)

_INVALID = object()


@dataclass
class ApplicationPreferences:
    """Current atmosphere and audio settings, shared by reference.

    Created once at startup (see ``resolve``), passed to every component that
    reads or writes it and flushed to persistence after each user change.
    Mutate it through ``Atmosphere.capture_into`` and ``update_from_preset``
    rather than by assigning fields from UI code.
    """

    font_family: str = "serif"
    font_size: int = 18
    last_preset: Optional[str] = "Cozy Reading"
    layout_flow: str = "paginated"
    text_color: str = "#1a1a1a"
    container_color: str = "#FFFFFF"
    container_opacity: float = 0.95
    glass_enabled: bool = False
    glass_blur: int = 12
    bg_media_path: Optional[str] = None
    bg_audio_muted: bool = True
    bg_music_path: Optional[str] = None
    bg_music_volume: int = 50
    bg_music_muted: bool = True
    scrollbar_track: str = "#1a1a1a"
    scrollbar_thumb: str = "#4a9eff"
    overlay_color: Optional[str] = None
    overlay_opacity: float = 0.0
    updated_at: Optional[float] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the preferences.json wire form."""
        data = dict(self.extras)
        for attr, (key, _, encode) in _FIELDS.items():
            value = getattr(self, attr)
            data[key] = encode(value) if encode and value is not None else value
        return data

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ApplicationPreferences":
        return resolve(data, None, cls())

    def touch(self, now: Optional[float] = None) -> None:
        """Stamp the record as modified."""
        self.updated_at = time.time() if now is None else now

    def update_from_preset(self, preset: Preset) -> None:
        """Mirror the fields a preset carries into the working copy."""
        reader = preset.reader
        if reader is not None:
            for attr in ("font_family", "font_size", "layout_flow", "text_color",
                         "glass_enabled", "glass_blur", "scrollbar_track",
                         "scrollbar_thumb"):
                value = getattr(reader, attr)
                if value is not None:
                    setattr(self, attr, value)
            if reader.background_color is not None:
                self.container_color = reader.background_color
            if reader.opacity is not None:
                self.container_opacity = reader.opacity
        if preset.background is not None:
            self.bg_media_path = preset.background.media_ref
        if preset.overlay is not None:
            if preset.overlay.color is not None:
                self.overlay_color = preset.overlay.color
            if preset.overlay.opacity is not None:
                self.overlay_opacity = preset.overlay.opacity
        if not preset.is_session:
            self.last_preset = preset.name


def _choice(options) -> Callable[[Any], Any]:
    return lambda value: value if isinstance(value, str) and value in options else _INVALID


def _number(value: Any) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return _INVALID
    if not math.isfinite(value):
        return _INVALID
    return value


def _int_range(lower: int, upper: int) -> Callable[[Any], Any]:
    def coerce(value):
        number = _number(value)
        if number is _INVALID:
            return _INVALID
        return int(clamp(round(number), lower, upper))
    return coerce


def _percent(value: Any) -> Any:
    number = _number(value)
    if number is _INVALID:
        return _INVALID
    return clamp(number, 0, 100) / 100


def _unit(value: Any) -> Any:
    number = _number(value)
    if number is _INVALID:
        return _INVALID
    return float(clamp(number, 0.0, 1.0))


def _flag(value: Any) -> Any:
    return value if isinstance(value, bool) else _INVALID


def _color(value: Any) -> Any:
    return value if isinstance(value, str) and value else _INVALID


def _nullable(coerce: Callable[[Any], Any]) -> Callable[[Any], Any]:
    return lambda value: None if value is None else coerce(value)


def _timestamp(value: Any) -> Any:
    number = _number(value)
    return _INVALID if number is _INVALID else float(number)


def _to_percent(value: float) -> int:
    return round(value * 100)


# attribute -> (wire key, coercer, encoder)
_FIELDS = {
    "font_family": ("fontFamily", _choice(FONT_FAMILIES), None),
    "font_size": ("fontSize", _int_range(FONT_SIZE_MIN, FONT_SIZE_MAX), None),
    "last_preset": ("lastPreset", _nullable(_color), None),
    "layout_flow": ("readingMode", _choice(LAYOUT_FLOWS), None),
    "text_color": ("textColor", _color, None),
    "container_color": ("containerColor", _color, None),
    "container_opacity": ("containerOpacity", _percent, _to_percent),
    "glass_enabled": ("glassmorphism", _flag, None),
    "glass_blur": ("glassBlur", _int_range(GLASS_BLUR_MIN, GLASS_BLUR_MAX), None),
    "bg_media_path": ("bgMediaPath", _nullable(_color), None),
    "bg_audio_muted": ("bgAudioMuted", _flag, None),
    "bg_music_path": ("bgMusicPath", _nullable(_color), None),
    "bg_music_volume": ("bgMusicVolume", _int_range(0, 100), None),
    "bg_music_muted": ("bgMusicMuted", _flag, None),
    "scrollbar_track": ("scrollbarTrack", _color, None),
    "scrollbar_thumb": ("scrollbarThumb", _color, None),
    "overlay_color": ("overlayColor", _nullable(_color), None),
    "overlay_opacity": ("overlayOpacity", _unit, None),
    "updated_at": ("updatedAt", _nullable(_timestamp), None),
}
_WIRE_KEYS = {key for key, _, _ in _FIELDS.values()}


def resolve(
    stored: Optional[Mapping[str, Any]],
    session_defaults: Optional[Mapping[str, Any]],
    hardcoded_defaults: ApplicationPreferences,
) -> ApplicationPreferences:
    """Build a fully populated preferences record from layered sources.

    Each field takes the first acceptable value from ``stored``, then
    ``session_defaults`` (both in wire form), then ``hardcoded_defaults``.
    Numeric values are clamped here, once, so nothing downstream needs to
    fall back or re-validate. Unknown keys in ``stored`` are preserved.
    """
    layers = [layer for layer in (stored, session_defaults) if isinstance(layer, Mapping)]
    values: Dict[str, Any] = {}
    for attr, (key, coerce, _) in _FIELDS.items():
        values[attr] = getattr(hardcoded_defaults, attr)
        for layer in layers:
            if key not in layer:
                continue
            value = coerce(layer[key])
            if value is not _INVALID:
                values[attr] = value
                break

    extras = {}
    if isinstance(stored, Mapping):
        extras = {k: v for k, v in stored.items() if k not in _WIRE_KEYS}
    return ApplicationPreferences(**values, extras=extras)


def default_preferences() -> ApplicationPreferences:
    """Return a fresh record holding the hard-coded defaults."""
    return ApplicationPreferences()
