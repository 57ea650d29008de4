"""Overlay State - the single color tint painted over the background."""

from typing import Optional

from PySide6.QtCore import QObject, Signal

from epilogue.core.colors import clamp, hex_to_rgba


class OverlayState(QObject):
    """Holds one color + opacity tint.

    Inputs are sanitized, never rejected. Only the hex and opacity pair is
    ever persisted; the RGBA paint is derived on demand.
    """

    changed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._color: Optional[str] = None
        self._opacity = 0.0

    def set_tint(self, color: Optional[str], opacity: float) -> None:
        """Store the tint; an empty color is the same as clear_tint()."""
        if not color:
            self.clear_tint()
            return
        opacity = float(clamp(opacity, 0.0, 1.0))
        if (color, opacity) == (self._color, self._opacity):
            return
        self._color = color
        self._opacity = opacity
        self.changed.emit()

    def clear_tint(self) -> None:
        if self._color is None and self._opacity == 0.0:
            return
        self._color = None
        self._opacity = 0.0
        self.changed.emit()

    def get_current_tint(self) -> tuple[Optional[str], float]:
        return self._color, self._opacity

    @property
    def color(self) -> Optional[str]:
        return self._color

    @property
    def opacity(self) -> float:
        return self._opacity

    def rgba(self) -> str:
        """Paint for the rendering boundary, e.g. ``rgba(26, 26, 46, 0.4)``."""
        if self._color is None:
            return "transparent"
        return hex_to_rgba(self._color, self._opacity)
