"""Unit tests for PresetEngine."""

from unittest.mock import AsyncMock

import pytest

from epilogue.core import (
    BUILTIN_PRESET_NAMES,
    SESSION_PRESET_NAME,
    ApplicationPreferences,
    OverlayConfig,
    Preset,
    ReaderConfig,
)
from epilogue.io import PersistenceError
from epilogue.services import PresetEngine
from epilogue.services.preset_engine import SAVED_AT_KEY


@pytest.fixture
def engine(backend, atmosphere, notifier, clock, tmp_path):
    return PresetEngine(backend, atmosphere, notifier, media_dir=tmp_path / "media", clock=clock)


class TestPresetListing:

    @pytest.mark.asyncio
    async def test_builtins_listed_last(self, engine, backend):
        await backend.save_preset("Rainy Day", {"name": "Rainy Day"})
        await backend.save_preset(SESSION_PRESET_NAME, {"name": SESSION_PRESET_NAME})

        names = [p.name for p in await engine.list_presets()]

        assert names == ["Rainy Day", *BUILTIN_PRESET_NAMES]

    @pytest.mark.asyncio
    async def test_builtins_survive_backend_failure(self, engine, backend):
        backend.list_preset_names = AsyncMock(side_effect=PersistenceError("disk gone"))

        names = [p.name for p in await engine.list_presets()]

        assert names == list(BUILTIN_PRESET_NAMES)

    @pytest.mark.asyncio
    async def test_listing_retries_after_backend_failure(self, engine, backend):
        await backend.save_preset("Rainy Day", {"name": "Rainy Day"})
        list_names = backend.list_preset_names
        backend.list_preset_names = AsyncMock(side_effect=PersistenceError("busy"))
        assert [p.name for p in await engine.list_presets()] == list(BUILTIN_PRESET_NAMES)

        backend.list_preset_names = list_names
        names = [p.name for p in await engine.list_presets()]

        assert names == ["Rainy Day", *BUILTIN_PRESET_NAMES]

    @pytest.mark.asyncio
    async def test_malformed_stored_preset_is_skipped(self, engine, backend):
        await backend.save_preset("Listy", ["not", "an", "object"])
        await backend.save_preset("Nameless", {"version": "2.0"})

        names = [p.name for p in await engine.list_presets()]

        assert "Listy" not in names
        assert "Nameless" in names

    @pytest.mark.asyncio
    async def test_find_fetches_uncached_preset(self, engine, backend):
        await engine.refresh()
        await backend.save_preset("Late", {"name": "Late", "overlay": {"color": "#112233", "opacity": 0.1}})

        preset = await engine.find("Late")

        assert preset.overlay.color == "#112233"


class TestPresetApply:

    @pytest.mark.asyncio
    async def test_apply_builtin_night_reading(self, engine, atmosphere):
        assert await engine.apply_preset("Night Reading") is True

        reader = atmosphere.reader
        assert atmosphere.overlay.get_current_tint() == ("#1a1a2e", 0.4)
        assert reader.font_size == 20
        assert reader.text_color == "#e0e0e0"
        assert reader.background_color == "#2d2d2d"
        assert reader.opacity == 0.85
        assert engine.current_preset.name == "Night Reading"

    @pytest.mark.asyncio
    async def test_unknown_preset_warns_and_changes_nothing(self, engine, atmosphere, notifier):
        before = atmosphere.snapshot()

        assert await engine.apply_preset("Nonexistent") is False

        assert atmosphere.snapshot() == before
        assert notifier.posted == [("warning", "Preset not found: Nonexistent")]

    def test_unset_sections_are_left_untouched(self, engine, atmosphere):
        atmosphere.reader.set_font_size(26)

        engine.apply(Preset(name="Tint only", overlay=OverlayConfig("#334455", 0.3)))

        assert atmosphere.reader.font_size == 26
        assert atmosphere.overlay.get_current_tint() == ("#334455", 0.3)

    def test_opacity_only_overlay_keeps_current_color(self, engine, atmosphere):
        atmosphere.overlay.set_tint("#8B4513", 0.2)

        assert engine.apply(Preset.from_dict({"name": "Dim", "overlay": {"opacity": 0.6}})) is True

        assert atmosphere.overlay.get_current_tint() == ("#8B4513", 0.6)

    def test_color_only_overlay_keeps_current_opacity(self, engine, atmosphere):
        atmosphere.overlay.set_tint("#8B4513", 0.2)

        assert engine.apply(Preset.from_dict({"name": "Blue", "overlay": {"color": "#112233"}})) is True

        assert atmosphere.overlay.get_current_tint() == ("#112233", 0.2)

    def test_empty_overlay_section_changes_nothing(self, engine, atmosphere):
        atmosphere.overlay.set_tint("#8B4513", 0.2)

        engine.apply(Preset.from_dict({"name": "Blank", "overlay": {}}))

        assert atmosphere.overlay.get_current_tint() == ("#8B4513", 0.2)

    def test_reader_fields_apply_before_layout_flow(self, engine, atmosphere):
        order = []
        atmosphere.reader.changed.connect(lambda: order.append("style"))
        atmosphere.reader.layout_flow_changed.connect(lambda name: order.append(name))

        engine.apply(Preset(name="Scroll", reader=ReaderConfig(font_size=22, layout_flow="scrolled")))

        assert order == ["style", "scrolled"]

    def test_failed_apply_rolls_back(self, engine, atmosphere, notifier, monkeypatch):
        atmosphere.overlay.set_tint("#8B4513", 0.2)
        before = atmosphere.snapshot()
        original = atmosphere.reader.set_font_size
        calls = []

        def fail_once(px):
            calls.append(px)
            if len(calls) == 1:
                raise RuntimeError("renderer crashed")
            original(px)

        monkeypatch.setattr(atmosphere.reader, "set_font_size", fail_once)

        preset = Preset(
            name="Broken",
            overlay=OverlayConfig("#000000", 0.9),
            reader=ReaderConfig(font_size=30),
        )

        assert engine.apply(preset) is False
        assert atmosphere.snapshot() == before
        assert ("error", "Failed to apply preset") in notifier.posted
        assert engine.current_preset is None

    def test_relative_media_resolves_under_media_dir(self, engine, tmp_path):
        assert engine.resolve_media_path("forest.jpg") == str(tmp_path / "media" / "forest.jpg")
        assert engine.resolve_media_path("/abs/forest.jpg") == "/abs/forest.jpg"


class TestPresetSave:

    @pytest.mark.asyncio
    async def test_save_and_reapply_named_preset(self, engine, atmosphere, backend, notifier):
        prefs = ApplicationPreferences()
        atmosphere.overlay.set_tint("#654321", 0.25)
        atmosphere.reader.set_font_family("sans-serif")

        saved = await engine.save_as_named_preset("Evening", prefs)

        assert saved.author == "User"
        assert saved.description == "Custom preset: Evening"
        assert (await backend.load_preset("Evening"))["overlay"] == {"color": "#654321", "opacity": 0.25}
        assert prefs.overlay_color == "#654321"
        assert notifier.posted[-1] == ("success", "Saved preset: Evening")

        atmosphere.overlay.clear_tint()
        atmosphere.reader.set_font_family("serif")
        assert await engine.apply_preset("Evening") is True
        assert atmosphere.overlay.get_current_tint() == ("#654321", 0.25)
        assert atmosphere.reader.font_family == "sans-serif"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "Night Reading", "_last_session"])
    async def test_reserved_or_empty_names_are_refused(self, engine, backend, name):
        assert await engine.save_as_named_preset(name, ApplicationPreferences()) is None
        assert await backend.list_preset_names() == []

    @pytest.mark.asyncio
    async def test_save_failure_posts_error(self, engine, backend, notifier):
        backend.save_preset = AsyncMock(side_effect=PersistenceError("read-only"))

        assert await engine.save_as_named_preset("Evening", ApplicationPreferences()) is None
        assert notifier.posted[-1] == ("error", "Failed to save preset")

    @pytest.mark.asyncio
    async def test_session_snapshot_is_silent_and_hidden(self, engine, backend, notifier, clock):
        assert await engine.save_session_snapshot(ApplicationPreferences()) is True

        stored = await backend.load_preset(SESSION_PRESET_NAME)
        assert stored[SAVED_AT_KEY] == clock.now
        assert notifier.posted == []
        assert SESSION_PRESET_NAME not in [p.name for p in await engine.list_presets()]
        assert (await engine.load_session_snapshot()).name == SESSION_PRESET_NAME


class TestPresetDelete:

    @pytest.mark.asyncio
    async def test_builtin_cannot_be_deleted(self, engine, notifier):
        assert await engine.delete_preset("Cozy Reading") is False
        assert notifier.posted == [("warning", "Built-in preset cannot be deleted: Cozy Reading")]
        assert "Cozy Reading" in [p.name for p in await engine.list_presets()]

    @pytest.mark.asyncio
    async def test_delete_user_preset(self, engine, backend, notifier):
        await engine.save_as_named_preset("Evening", ApplicationPreferences())

        assert await engine.delete_preset("Evening") is True

        assert "Evening" not in [p.name for p in await engine.list_presets()]
        assert await backend.load_preset("Evening") is None
        assert notifier.posted[-1] == ("success", "Deleted preset: Evening")
