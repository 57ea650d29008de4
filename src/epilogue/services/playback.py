"""Playback handles for motion backgrounds and ambient audio."""

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QAudioOutput, QMediaPlayer

logger = logging.getLogger(__name__)


class PlaybackError(RuntimeError):
    """Raised when playback cannot start."""


class PlaybackHandle(ABC):
    """Looping media player owned exclusively by BackgroundState."""

    @abstractmethod
    def load(self, path: str) -> None:
        """Replace the current source. Raises PlaybackError if unusable."""

    @abstractmethod
    def play(self) -> None:
        """Start or resume playback. Raises PlaybackError on failure."""

    @abstractmethod
    def stop(self) -> None:
        """Stop playback and release the current source."""

    @abstractmethod
    def set_muted(self, muted: bool) -> None:
        ...

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """Set output volume in the 0..1 range."""


class NullPlaybackHandle(PlaybackHandle):
    """Silent handle used where no audio device is wanted (tests, headless)."""

    def __init__(self) -> None:
        self.source: Optional[str] = None
        self.playing = False
        self.muted = False
        self.volume = 1.0

    def load(self, path: str) -> None:
        self.source = path
        self.playing = False

    def play(self) -> None:
        if self.source is not None:
            self.playing = True

    def stop(self) -> None:
        self.source = None
        self.playing = False

    def set_muted(self, muted: bool) -> None:
        self.muted = muted

    def set_volume(self, volume: float) -> None:
        self.volume = volume


class QtPlaybackHandle(PlaybackHandle):
    """QMediaPlayer with an audio output, looping indefinitely."""

    def __init__(self) -> None:
        self.player = QMediaPlayer()
        self.audio_output = QAudioOutput()
        self.player.setAudioOutput(self.audio_output)
        self.player.setLoops(QMediaPlayer.Loops.Infinite)
        self.player.errorOccurred.connect(self._on_error)

    def load(self, path: str) -> None:
        if not Path(path).exists():
            raise PlaybackError(f"Media file not found: {path}")
        self.player.setSource(QUrl.fromLocalFile(str(Path(path).resolve())))

    def play(self) -> None:
        if self.player.source().isEmpty():
            raise PlaybackError("No media loaded")
        if self.player.error() != QMediaPlayer.Error.NoError:
            raise PlaybackError(self.player.errorString())
        self.player.play()

    def stop(self) -> None:
        self.player.stop()
        self.player.setSource(QUrl())

    def set_muted(self, muted: bool) -> None:
        self.audio_output.setMuted(muted)

    def set_volume(self, volume: float) -> None:
        self.audio_output.setVolume(volume)

    def _on_error(self, error, message: str) -> None:
        logger.error(f"Playback error ({error}): {message}")
