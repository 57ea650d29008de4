"""Reader Appearance State - typography, layout flow and container styling."""

import logging
from typing import Dict

from PySide6.QtCore import QObject, Signal

from epilogue.core.colors import hex_to_rgba, parse_hex
from epilogue.core.layout_flow import PAGINATED, LayoutFlow, create_layout_flow
from epilogue.core.preset import (
    FONT_FAMILIES,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    clamp_font_size,
    clamp_glass_blur,
    clamp_unit,
)

logger = logging.getLogger(__name__)


class ReaderAppearanceState(QObject):
    """
    Holds the reader's visual parameters. Each setter clamps its input to the
    documented range and is independent of the others.

    Signals:
        changed: Any styling value changed.
        layout_flow_changed(str): The layout flow changed; the rendering
            surface must be rebuilt at the same reading position.
    """

    changed = Signal()
    layout_flow_changed = Signal(str)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.font_family = "serif"
        self.font_size = 18
        self.layout_flow: LayoutFlow = PAGINATED
        self.text_color = "#1a1a1a"
        self.background_color = "#FFFFFF"
        self.opacity = 0.95
        self.glass_enabled = False
        self.glass_blur = 12
        self.scrollbar_track = "#1a1a1a"
        self.scrollbar_thumb = "#4a9eff"

    def set_font_family(self, family: str) -> bool:
        """Returns False when the family is unknown and was ignored."""
        if family not in FONT_FAMILIES:
            logger.warning(f"Ignoring unknown font family: {family}")
            return False
        self._update("font_family", family)
        return True

    def set_font_size(self, px: float) -> None:
        self._update("font_size", clamp_font_size(px))

    def step_font_size(self, delta: int) -> int:
        """Grow or shrink the font, staying inside 12-32px."""
        self.set_font_size(self.font_size + delta)
        return self.font_size

    def set_text_color(self, color: str) -> None:
        if color:
            self._update("text_color", color)

    def set_background_color(self, color: str) -> None:
        if color:
            self._update("background_color", color)

    def set_opacity(self, opacity: float) -> None:
        self._update("opacity", clamp_unit(opacity))

    def set_glass_enabled(self, enabled: bool) -> None:
        self._update("glass_enabled", bool(enabled))

    def set_glass_blur(self, px: float) -> None:
        self._update("glass_blur", clamp_glass_blur(px))

    def set_scrollbar_colors(self, track=None, thumb=None) -> None:
        """Set either or both scrollbar colors; None leaves a color as is."""
        if track:
            self._update("scrollbar_track", track)
        if thumb:
            self._update("scrollbar_thumb", thumb)

    def set_layout_flow(self, name: str) -> bool:
        """Returns False when the flow name is unknown and was ignored."""
        try:
            flow = create_layout_flow(name)
        except ValueError as e:
            logger.warning(f"Ignoring layout flow change: {e}")
            return False
        if flow is self.layout_flow:
            return True
        self.layout_flow = flow
        logger.debug(f"Layout flow changed to {flow.name}")
        self.layout_flow_changed.emit(flow.name)
        return True

    def _update(self, attr: str, value) -> None:
        if getattr(self, attr) == value:
            return
        setattr(self, attr, value)
        self.changed.emit()

    # Derived values for the rendering boundary

    @property
    def can_grow_font(self) -> bool:
        return self.font_size < FONT_SIZE_MAX

    @property
    def can_shrink_font(self) -> bool:
        return self.font_size > FONT_SIZE_MIN

    def typography(self) -> Dict[str, str]:
        """Theme overrides handed to the rendering collaborator."""
        return {
            "font-family": FONT_FAMILIES[self.font_family],
            "font-size": f"{self.font_size}px",
            "color": self.text_color,
        }

    def container_style(self) -> Dict[str, str]:
        """Paint for the reader container; blur only while glass is on."""
        backdrop = f"blur({self.glass_blur}px)" if self.glass_enabled else "none"
        return {
            "background": hex_to_rgba(self.background_color, self.opacity),
            "backdrop-filter": backdrop,
        }

    def scrollbar_style(self) -> Dict[str, str]:
        hover = self.scrollbar_thumb
        if hover.startswith("#") and len(hover) == 7 and parse_hex(hover):
            hover += "dd"
        return {
            "track": self.scrollbar_track,
            "thumb": self.scrollbar_thumb,
            "thumb-hover": hover,
        }
