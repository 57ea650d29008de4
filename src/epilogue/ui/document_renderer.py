"""Interface of the document rendering collaborator.

The engine that parses and paginates EPUB documents lives outside this
package. Resume tokens and table-of-contents targets are opaque strings
that only the engine interprets.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from epilogue.core import BookMetadata, LayoutFlow, TocEntry


class DocumentRenderer(ABC):
    """Opaque document engine driven by the ReaderController."""

    @abstractmethod
    async def open(self, data: bytes) -> BookMetadata:
        """Load a document from its raw bytes and report its metadata."""

    @abstractmethod
    def render_to(self, flow: LayoutFlow) -> None:
        """Create the rendering surface configured for flow."""

    @abstractmethod
    async def render_at(self, token: Optional[str] = None) -> None:
        """Display the position token, or the start when token is None.

        Raises:
            ValueError: If the token does not resolve in this document.
        """

    @abstractmethod
    def current_resume_token(self) -> Optional[str]:
        """Token for the displayed position, None if nothing is displayed."""

    @abstractmethod
    def destroy(self) -> None:
        """Tear down the rendering surface; the document stays loaded."""

    @abstractmethod
    def set_typography(self, typography: Dict[str, str]) -> None:
        """Apply theme overrides such as font-family, font-size and color."""

    @abstractmethod
    def next_page(self) -> None:
        ...

    @abstractmethod
    def prev_page(self) -> None:
        ...

    @abstractmethod
    async def table_of_contents(self) -> List[TocEntry]:
        ...

    @abstractmethod
    def close(self) -> None:
        """Destroy the surface and unload the document."""


class NoDocumentEngine(DocumentRenderer):
    """Stand-in used when no rendering engine is installed; opening fails."""

    async def open(self, data: bytes) -> BookMetadata:
        raise RuntimeError("No document engine is installed")

    def render_to(self, flow: LayoutFlow) -> None:
        pass

    async def render_at(self, token: Optional[str] = None) -> None:
        pass

    def current_resume_token(self) -> Optional[str]:
        return None

    def destroy(self) -> None:
        pass

    def set_typography(self, typography: Dict[str, str]) -> None:
        pass

    def next_page(self) -> None:
        pass

    def prev_page(self) -> None:
        pass

    async def table_of_contents(self) -> List[TocEntry]:
        return []

    def close(self) -> None:
        pass
