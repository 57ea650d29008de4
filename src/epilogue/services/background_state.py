"""Background State - background media layer and ambient audio track."""

import logging
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QObject, Signal

from epilogue.core.colors import clamp
from epilogue.core.media import MediaKind, classify_media, is_audio_track

from .playback import NullPlaybackHandle, PlaybackError, PlaybackHandle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentMedia:
    path: Optional[str] = None
    kind: MediaKind = MediaKind.NONE


@dataclass(frozen=True)
class CurrentAudio:
    path: Optional[str] = None
    volume: int = 50
    muted: bool = True


class BackgroundState(QObject):
    """
    Owns exactly one background media reference and exactly one ambient
    audio track, independently of each other.

    The two playback handles are owned by this object; no other component
    may drive them. Playback failures are logged and never raised: the
    state still records the media or track as set, and a later unmute
    retries playback.
    """

    media_changed = Signal()
    audio_changed = Signal()

    def __init__(
        self,
        motion_player: Optional[PlaybackHandle] = None,
        audio_player: Optional[PlaybackHandle] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._motion = motion_player or NullPlaybackHandle()
        self._audio = audio_player or NullPlaybackHandle()

        self._media_path: Optional[str] = None
        self._media_kind = MediaKind.NONE
        # Motion media starts muted
        self._media_muted = True
        self._motion.set_muted(True)

        self._track_path: Optional[str] = None
        self._volume = 0.5
        self._track_muted = True
        self._audio.set_volume(self._volume)
        self._audio.set_muted(True)

    # Background media

    def set_media(self, path: Optional[str]) -> bool:
        """Show path as the background, replacing whatever was shown.

        Returns:
            False if the extension is unsupported (state unchanged).
        """
        if not path:
            self.clear_media()
            return True

        kind = classify_media(path)
        if kind is None:
            logger.warning(f"Unsupported background media: {path}")
            return False

        self._teardown_media()
        self._media_path = path
        self._media_kind = kind
        if kind is MediaKind.MOTION:
            self._motion.set_muted(self._media_muted)
            try:
                self._motion.load(path)
                self._motion.play()
            except PlaybackError as e:
                logger.warning(f"Motion background playback failed for {path}: {e}")
        logger.debug(f"Background set to {kind.value}: {path}")
        self.media_changed.emit()
        return True

    def clear_media(self) -> None:
        if self._media_kind is MediaKind.NONE and self._media_path is None:
            return
        self._teardown_media()
        self.media_changed.emit()

    def get_current_media(self) -> CurrentMedia:
        return CurrentMedia(self._media_path, self._media_kind)

    def set_muted(self, muted: bool) -> None:
        """Mute motion media; legal with no media set."""
        self._media_muted = bool(muted)
        self._motion.set_muted(self._media_muted)
        if not self._media_muted and self._media_kind is MediaKind.MOTION:
            self._start(self._motion, self._media_path)
        self.media_changed.emit()

    def toggle_mute(self) -> bool:
        """Flip the motion media mute flag and return the new value."""
        self.set_muted(not self._media_muted)
        return self._media_muted

    def is_muted(self) -> bool:
        return self._media_muted

    def _teardown_media(self) -> None:
        if self._media_kind is MediaKind.MOTION:
            self._motion.stop()
        self._media_path = None
        self._media_kind = MediaKind.NONE

    # Ambient audio

    def set_audio_track(self, path: Optional[str]) -> bool:
        """Play path as the ambient track, keeping volume and mute settings.

        Returns:
            False if path is not an audio file (state unchanged).
        """
        if not path:
            self.clear_audio_track()
            return True
        if not is_audio_track(path):
            logger.warning(f"Unsupported audio track: {path}")
            return False

        self._audio.stop()
        self._track_path = path
        self._audio.set_volume(self._volume)
        self._audio.set_muted(self._track_muted)
        try:
            self._audio.load(path)
            if not self._track_muted:
                self._audio.play()
        except PlaybackError as e:
            logger.warning(f"Ambient audio playback failed for {path}: {e}")
        self.audio_changed.emit()
        return True

    def clear_audio_track(self) -> None:
        if self._track_path is None:
            return
        self._audio.stop()
        self._track_path = None
        self.audio_changed.emit()

    def set_audio_volume(self, percent: float) -> None:
        """Set the ambient volume from a 0-100 value."""
        self._volume = float(clamp(percent, 0, 100)) / 100
        self._audio.set_volume(self._volume)
        self.audio_changed.emit()

    def set_audio_muted(self, muted: bool) -> None:
        self._track_muted = bool(muted)
        self._audio.set_muted(self._track_muted)
        if not self._track_muted:
            self._start(self._audio, self._track_path)
        self.audio_changed.emit()

    def toggle_audio_mute(self) -> bool:
        self.set_audio_muted(not self._track_muted)
        return self._track_muted

    def get_current_audio(self) -> CurrentAudio:
        return CurrentAudio(self._track_path, round(self._volume * 100), self._track_muted)

    @staticmethod
    def _start(handle: PlaybackHandle, path: Optional[str]) -> None:
        if path is None:
            return
        try:
            handle.play()
        except PlaybackError as e:
            logger.warning(f"Playback retry failed for {path}: {e}")
