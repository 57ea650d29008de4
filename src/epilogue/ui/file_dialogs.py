"""Native file pickers for books, background media and ambient audio."""

from pathlib import Path
from typing import Optional

from PySide6.QtWidgets import QFileDialog, QWidget

from epilogue.core.media import AUDIO_EXTENSIONS, IMAGE_EXTENSIONS, MOTION_EXTENSIONS


def _patterns(extensions) -> str:
    return " ".join(f"*.{ext}" for ext in sorted(extensions))


BOOK_FILTER = "EPUB Files (*.epub)"
MEDIA_FILTER = ";;".join([
    f"All Media ({_patterns(IMAGE_EXTENSIONS | MOTION_EXTENSIONS)})",
    f"Images ({_patterns(IMAGE_EXTENSIONS)})",
    f"Videos ({_patterns(MOTION_EXTENSIONS)})",
])
AUDIO_FILTER = f"Audio Files ({_patterns(AUDIO_EXTENSIONS)})"


class QtFilePicker:
    """Modal QFileDialog pickers; each returns None when cancelled."""

    def __init__(self, parent: Optional[QWidget] = None):
        self.parent = parent

    def pick_book(self) -> Optional[Path]:
        return self._pick("Open Book", BOOK_FILTER)

    def pick_media(self) -> Optional[Path]:
        return self._pick("Choose Background", MEDIA_FILTER)

    def pick_audio(self) -> Optional[Path]:
        return self._pick("Choose Ambient Audio", AUDIO_FILTER)

    def _pick(self, caption: str, file_filter: str) -> Optional[Path]:
        file_path, _ = QFileDialog.getOpenFileName(
            self.parent,
            caption,
            str(Path.home()),
            file_filter,
        )
        return Path(file_path) if file_path else None
