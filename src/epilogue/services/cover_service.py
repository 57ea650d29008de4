"""Cover service for library cards.

Resolves a book's stored cover image, falling back to a generated
placeholder whose hue and glyph are derived from the title alone, so the
same title always renders the same card.
"""

import hashlib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import (
    QColor,
    QFont,
    QGuiApplication,
    QImage,
    QImageReader,
    QLinearGradient,
    QPainter,
)

from epilogue.core import LibraryEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceholderCover:
    hue: int
    glyph: str

    @property
    def gradient(self) -> str:
        """CSS form of the placeholder background."""
        return (
            f"linear-gradient(135deg, hsl({self.hue}, 40%, 30%), "
            f"hsl({self.hue}, 40%, 15%))"
        )


def placeholder_for(title: str) -> PlaceholderCover:
    """Deterministic placeholder for a title."""
    title = title or ""
    digest = hashlib.sha1(title.encode("utf-8")).hexdigest()
    hue = int(digest[:8], 16) % 360
    stripped = title.strip()
    glyph = stripped[0].upper() if stripped else "?"
    return PlaceholderCover(hue=hue, glyph=glyph)


class CoverService:
    """Chooses between a stored cover image and a generated placeholder."""

    def resolve(self, entry: LibraryEntry) -> Union[Path, PlaceholderCover]:
        """Return the readable cover path, or the title's placeholder."""
        if entry.cover_ref:
            cover = Path(entry.cover_ref)
            if cover.is_file() and QImageReader(str(cover)).canRead():
                return cover
            logger.debug(f"Cover for {entry.title!r} does not resolve: {cover}")
        return placeholder_for(entry.title)

    def render_placeholder(self, placeholder: PlaceholderCover, width: int = 180, height: int = 270) -> QImage:
        """Paint the placeholder gradient and glyph into an image."""
        # QPainter text rendering needs a GUI application
        if QGuiApplication.instance() is None:
            self._app = QGuiApplication([])

        image = QImage(width, height, QImage.Format_ARGB32)
        gradient = QLinearGradient(QPointF(0, 0), QPointF(width, height))
        gradient.setColorAt(0.0, QColor.fromHslF(placeholder.hue / 360, 0.4, 0.3))
        gradient.setColorAt(1.0, QColor.fromHslF(placeholder.hue / 360, 0.4, 0.15))

        painter = QPainter(image)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            painter.fillRect(QRectF(0, 0, width, height), gradient)
            font = QFont()
            font.setPixelSize(max(height // 3, 1))
            font.setBold(True)
            painter.setFont(font)
            painter.setPen(QColor(255, 255, 255, 200))
            painter.drawText(QRectF(0, 0, width, height), Qt.AlignCenter, placeholder.glyph)
        finally:
            painter.end()
        return image
