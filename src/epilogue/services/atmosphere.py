"""Atmosphere - the three live state holders seen as one unit."""

from epilogue.core import ApplicationPreferences

from .background_state import BackgroundState
from .overlay_state import OverlayState
from .reader_appearance import ReaderAppearanceState


class Atmosphere:
    """Groups background, overlay and reader appearance.

    This is the only place that copies values between the live state holders
    and ApplicationPreferences, in either direction.
    """

    def __init__(
        self,
        background: BackgroundState,
        overlay: OverlayState,
        reader: ReaderAppearanceState,
    ):
        if background is None:
            raise ValueError("background must not be None")
        if overlay is None:
            raise ValueError("overlay must not be None")
        if reader is None:
            raise ValueError("reader must not be None")
        self.background = background
        self.overlay = overlay
        self.reader = reader

    def apply_preferences(self, prefs: ApplicationPreferences) -> None:
        """Push every preference field onto the state holders."""
        self.apply_audio_preferences(prefs)
        if prefs.bg_media_path:
            self.background.set_media(prefs.bg_media_path)
        else:
            self.background.clear_media()

        self.overlay.set_tint(prefs.overlay_color, prefs.overlay_opacity)

        reader = self.reader
        reader.set_font_family(prefs.font_family)
        reader.set_font_size(prefs.font_size)
        reader.set_text_color(prefs.text_color)
        reader.set_background_color(prefs.container_color)
        reader.set_opacity(prefs.container_opacity)
        reader.set_glass_enabled(prefs.glass_enabled)
        reader.set_glass_blur(prefs.glass_blur)
        reader.set_scrollbar_colors(prefs.scrollbar_track, prefs.scrollbar_thumb)
        reader.set_layout_flow(prefs.layout_flow)

    def apply_audio_preferences(self, prefs: ApplicationPreferences) -> None:
        """Mute flags and the ambient track are not part of presets."""
        background = self.background
        background.set_muted(prefs.bg_audio_muted)
        background.set_audio_volume(prefs.bg_music_volume)
        background.set_audio_muted(prefs.bg_music_muted)
        if prefs.bg_music_path:
            background.set_audio_track(prefs.bg_music_path)
        else:
            background.clear_audio_track()

    def capture_into(self, prefs: ApplicationPreferences) -> ApplicationPreferences:
        """Mirror the live state into prefs and return it."""
        media = self.background.get_current_media()
        audio = self.background.get_current_audio()
        prefs.bg_media_path = media.path
        prefs.bg_audio_muted = self.background.is_muted()
        prefs.bg_music_path = audio.path
        prefs.bg_music_volume = audio.volume
        prefs.bg_music_muted = audio.muted

        prefs.overlay_color, prefs.overlay_opacity = self.overlay.get_current_tint()

        reader = self.reader
        prefs.font_family = reader.font_family
        prefs.font_size = reader.font_size
        prefs.layout_flow = reader.layout_flow.name
        prefs.text_color = reader.text_color
        prefs.container_color = reader.background_color
        prefs.container_opacity = reader.opacity
        prefs.glass_enabled = reader.glass_enabled
        prefs.glass_blur = reader.glass_blur
        prefs.scrollbar_track = reader.scrollbar_track
        prefs.scrollbar_thumb = reader.scrollbar_thumb
        return prefs

    def snapshot(self) -> ApplicationPreferences:
        """Detached copy of the live state, used to roll back a failed apply."""
        return self.capture_into(ApplicationPreferences())

    def restore(self, snapshot: ApplicationPreferences) -> None:
        self.apply_preferences(snapshot)
