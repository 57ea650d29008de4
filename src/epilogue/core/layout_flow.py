"""Layout flow state objects for the rendering surface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict


class LayoutFlow(ABC):
    """State interface for layout flows (paginated vs scrolled)."""

    name: str

    @abstractmethod
    def render_options(self) -> Dict[str, Any]:
        """Return the options the rendering surface is created with."""

    @abstractmethod
    def toggle(self) -> LayoutFlow:
        """Return the toggled layout flow (paginated <-> scrolled)."""

    def __repr__(self) -> str:
        return f"<LayoutFlow {self.name}>"


class PaginatedFlow(LayoutFlow):
    name = "paginated"

    def render_options(self) -> Dict[str, Any]:
        return {
            "width": "100%",
            "height": "100%",
            "spread": "none",
            "flow": "paginated",
        }

    def toggle(self) -> LayoutFlow:
        """Toggle from paginated to scrolled flow."""
        return SCROLLED


class ScrolledFlow(LayoutFlow):
    name = "scrolled"

    def render_options(self) -> Dict[str, Any]:
        return {
            "width": "100%",
            "height": "100%",
            "spread": "none",
            "flow": "scrolled-doc",
            "manager": "default",
        }

    def toggle(self) -> LayoutFlow:
        """Toggle from scrolled to paginated flow."""
        return PAGINATED


PAGINATED = PaginatedFlow()
SCROLLED = ScrolledFlow()


def create_layout_flow(name: str) -> LayoutFlow:
    """Factory returning the layout flow state for a persisted name.

    Raises:
        ValueError: If an unknown flow name is provided.
    """
    if name == "paginated":
        return PAGINATED
    if name == "scrolled":
        return SCROLLED
    raise ValueError(f"Unknown layout flow: {name}")
