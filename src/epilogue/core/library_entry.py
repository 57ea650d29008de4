"""Domain entities for tracked books."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class BookMetadata:
    """Metadata the rendering collaborator reports for an opened document."""

    title: str = "Unknown"
    author: str = "Unknown"
    cover_ref: Optional[str] = None

    def __post_init__(self):
        # Renderers may report missing metadata as None or an empty string
        if not self.title:
            object.__setattr__(self, "title", "Unknown")
        if not self.author:
            object.__setattr__(self, "author", "Unknown")


@dataclass(frozen=True)
class LibraryEntry:
    """Represents a book tracked in the library.

    Attributes:
        id: Stable identifier derived from the canonical file path.
        title: Display title of the book.
        author: Display author of the book.
        file_path: Canonical source location (unique across entries).
        cover_ref: Path to a cached cover image, if one was extracted.
        date_added: Unix timestamp when the book was first opened.
        last_opened: Unix timestamp of the most recent open or progress write.
        progress: Fraction of the book read, 0..1.
        last_location: Opaque resume token understood only by the renderer.
    """

    id: str
    title: str
    author: str
    file_path: str
    cover_ref: Optional[str]
    date_added: float
    last_opened: float
    progress: float = 0.0
    last_location: Optional[str] = None

    @property
    def progress_percent(self) -> int:
        """Progress rounded to a whole percentage for display."""
        return round(self.progress * 100)


@dataclass(frozen=True)
class TocEntry:
    """One table-of-contents node as reported by the renderer."""

    label: str
    target: str
    children: tuple["TocEntry", ...] = ()
