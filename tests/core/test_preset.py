#!/usr/bin/env python3
"""
Tests for the Preset entity - wire format, clamping and forward compatibility.
"""

import pytest

from epilogue.core import (
    BUILTIN_PRESETS,
    BackgroundConfig,
    MediaKind,
    OverlayConfig,
    Preset,
    ReaderConfig,
)


def night_reading_dict():
    return {
        "version": "2.0",
        "name": "Night Reading",
        "background": {"type": "none", "path": None},
        "overlay": {"color": "#1a1a2e", "opacity": 0.4},
        "reader": {
            "opacity": 0.85,
            "backgroundColor": "#2d2d2d",
            "textColor": "#e0e0e0",
            "fontFamily": "serif",
            "fontSize": 20,
            "readingMode": "paginated",
            "glassmorphism": False,
            "glassBlur": 8,
            "scrollbarTrack": "#1a1a1a",
            "scrollbarThumb": "#555555",
        },
    }


def test_from_dict_reads_every_section():
    preset = Preset.from_dict(night_reading_dict())

    assert preset.name == "Night Reading"
    assert preset.version == "2.0"
    assert preset.background.kind is MediaKind.NONE
    assert preset.overlay.color == "#1a1a2e"
    assert preset.overlay.opacity == 0.4
    assert preset.reader.text_color == "#e0e0e0"
    assert preset.reader.font_size == 20
    assert preset.reader.layout_flow == "paginated"


def test_numeric_fields_are_clamped_on_load():
    data = night_reading_dict()
    data["overlay"]["opacity"] = 3
    data["reader"].update({"opacity": -1, "fontSize": 90, "glassBlur": 100})

    preset = Preset.from_dict(data)

    assert preset.overlay.opacity == 1.0
    assert preset.reader.opacity == 0.0
    assert preset.reader.font_size == 32
    assert preset.reader.glass_blur == 40


def test_non_numeric_values_load_as_unset():
    data = night_reading_dict()
    data["reader"]["fontSize"] = "huge"
    data["reader"]["opacity"] = True

    preset = Preset.from_dict(data)

    assert preset.reader.font_size is None
    assert preset.reader.opacity is None
    assert "fontSize" not in preset.reader.to_dict()


def test_unknown_fields_survive_round_trip():
    data = night_reading_dict()
    data["ambience"] = {"rain": True}
    data["reader"]["lineHeight"] = 1.6
    data["overlay"]["blendMode"] = "multiply"

    round_tripped = Preset.from_dict(data).to_dict()

    assert round_tripped["ambience"] == {"rain": True}
    assert round_tripped["reader"]["lineHeight"] == 1.6
    assert round_tripped["overlay"]["blendMode"] == "multiply"


def test_partial_preset_leaves_missing_sections_unset():
    preset = Preset.from_dict({"name": "Only Tint", "overlay": {"color": "#ff0000", "opacity": 0.3}})

    assert preset.background is None
    assert preset.reader is None
    assert preset.to_dict() == {
        "version": "2.0",
        "name": "Only Tint",
        "overlay": {"color": "#ff0000", "opacity": 0.3},
    }


def test_name_falls_back_to_storage_key():
    preset = Preset.from_dict({"overlay": {"color": "#000000", "opacity": 0}}, name="stored")
    assert preset.name == "stored"


def test_from_dict_rejects_non_objects_and_nameless_data():
    with pytest.raises(ValueError):
        Preset.from_dict(["not", "an", "object"])
    with pytest.raises(ValueError):
        Preset.from_dict({"overlay": {}})


def test_unsupported_version_still_loads_known_fields():
    data = night_reading_dict()
    data["version"] = "9.0"

    preset = Preset.from_dict(data)

    assert preset.version == "9.0"
    assert preset.reader.text_color == "#e0e0e0"


@pytest.mark.parametrize(
    "raw,kind,path",
    [
        ({"type": "media", "path": "/bg/rain.mp4"}, MediaKind.MOTION, "/bg/rain.mp4"),
        ({"type": "media", "path": "/bg/forest.jpg"}, MediaKind.IMAGE, "/bg/forest.jpg"),
        ({"type": "video", "path": "/bg/fire.webm"}, MediaKind.MOTION, "/bg/fire.webm"),
        ({"type": "image", "path": None}, MediaKind.NONE, None),
        ({"type": "media", "path": "/bg/notes.txt"}, MediaKind.NONE, None),
    ],
)
def test_background_type_is_normalized(raw, kind, path):
    config = BackgroundConfig.from_dict(raw)
    assert config.kind is kind
    assert config.media_ref == path


def test_reader_config_drops_unknown_font_and_flow():
    config = ReaderConfig(font_family="comic", layout_flow="diagonal")
    assert config.font_family is None
    assert config.layout_flow is None


def test_overlay_config_clamps_opacity():
    assert OverlayConfig("#fff", 1.5).opacity == 1.0


def test_builtins_are_declared_in_fixed_order():
    assert [p.name for p in BUILTIN_PRESETS] == ["Cozy Reading", "Focus Mode", "Night Reading"]
    assert all(p.is_builtin for p in BUILTIN_PRESETS)


def test_partial_overlay_keeps_missing_fields_unset():
    overlay = Preset.from_dict({"name": "Dim", "overlay": {"opacity": 0.6}}).overlay

    assert overlay.color is None
    assert overlay.opacity == 0.6
    assert overlay.to_dict() == {"opacity": 0.6}
    assert OverlayConfig().is_empty
