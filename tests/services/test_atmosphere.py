"""Unit tests for Atmosphere."""

import pytest

from epilogue.core import ApplicationPreferences, MediaKind
from epilogue.services import Atmosphere, BackgroundState, OverlayState, ReaderAppearanceState


def test_constructor_rejects_missing_holders():
    with pytest.raises(ValueError, match="overlay must not be None"):
        Atmosphere(BackgroundState(), None, ReaderAppearanceState())


def test_apply_preferences_pushes_every_field(atmosphere, audio_player):
    prefs = ApplicationPreferences(
        font_family="monospace",
        font_size=24,
        layout_flow="scrolled",
        text_color="#e0e0e0",
        container_color="#2d2d2d",
        container_opacity=0.7,
        glass_enabled=True,
        glass_blur=20,
        bg_media_path="/bg/forest.png",
        bg_music_path="/music/rain.mp3",
        bg_music_volume=30,
        bg_music_muted=False,
        overlay_color="#1a1a2e",
        overlay_opacity=0.4,
    )

    atmosphere.apply_preferences(prefs)

    reader = atmosphere.reader
    assert reader.font_family == "monospace"
    assert reader.font_size == 24
    assert reader.layout_flow.name == "scrolled"
    assert reader.container_style()["backdrop-filter"] == "blur(20px)"
    assert atmosphere.overlay.get_current_tint() == ("#1a1a2e", 0.4)
    assert atmosphere.background.get_current_media().kind is MediaKind.IMAGE
    assert audio_player.playing is True
    assert audio_player.volume == 0.3


def test_capture_into_round_trips_live_state(atmosphere):
    original = ApplicationPreferences(
        font_size=22, overlay_color="#8B4513", overlay_opacity=0.2,
        bg_music_path="/music/fire.ogg", bg_music_volume=65,
    )
    atmosphere.apply_preferences(original)

    captured = atmosphere.capture_into(ApplicationPreferences())

    assert captured.font_size == 22
    assert (captured.overlay_color, captured.overlay_opacity) == ("#8B4513", 0.2)
    assert captured.bg_music_path == "/music/fire.ogg"
    assert captured.bg_music_volume == 65
    assert captured.bg_music_muted is True


def test_capture_into_returns_same_object(atmosphere):
    prefs = ApplicationPreferences()
    assert atmosphere.capture_into(prefs) is prefs


def test_restore_returns_to_snapshot(atmosphere):
    snapshot = atmosphere.snapshot()
    atmosphere.overlay.set_tint("#000000", 0.9)
    atmosphere.reader.set_layout_flow("scrolled")
    atmosphere.background.set_media("/bg/rain.mp4")

    atmosphere.restore(snapshot)

    assert atmosphere.overlay.get_current_tint() == (None, 0.0)
    assert atmosphere.reader.layout_flow.name == "paginated"
    assert atmosphere.background.get_current_media().path is None
