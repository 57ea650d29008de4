"""Typed user commands consumed by the CommandDispatcher."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class Command:
    """Base class for every user-initiated action."""

    # Commands that change the atmosphere flush preferences once handled
    changes_atmosphere = False


class AtmosphereCommand(Command):
    changes_atmosphere = True


# Presets

@dataclass(frozen=True)
class ApplyPreset(AtmosphereCommand):
    name: str


@dataclass(frozen=True)
class SavePreset(Command):
    name: str


@dataclass(frozen=True)
class DeletePreset(Command):
    name: str


# Overlay

@dataclass(frozen=True)
class SetTint(AtmosphereCommand):
    color: Optional[str]
    opacity: float


@dataclass(frozen=True)
class ClearTint(AtmosphereCommand):
    pass


# Background media and ambient audio

@dataclass(frozen=True)
class SetBackgroundMedia(AtmosphereCommand):
    """Show path as background; None asks the media picker for one."""

    path: Optional[str] = None


@dataclass(frozen=True)
class ClearBackgroundMedia(AtmosphereCommand):
    pass


@dataclass(frozen=True)
class SetBackgroundMuted(AtmosphereCommand):
    muted: bool


@dataclass(frozen=True)
class SetAudioTrack(AtmosphereCommand):
    """Play path as ambient audio; None asks the audio picker for one."""

    path: Optional[str] = None


@dataclass(frozen=True)
class ClearAudioTrack(AtmosphereCommand):
    pass


@dataclass(frozen=True)
class SetAudioVolume(AtmosphereCommand):
    percent: float


@dataclass(frozen=True)
class SetAudioMuted(AtmosphereCommand):
    muted: bool


# Reader appearance

@dataclass(frozen=True)
class SetFontFamily(AtmosphereCommand):
    family: str


@dataclass(frozen=True)
class SetFontSize(AtmosphereCommand):
    px: float


@dataclass(frozen=True)
class StepFontSize(AtmosphereCommand):
    """Grow (positive) or shrink (negative) the font by delta pixels."""

    delta: int = 2


@dataclass(frozen=True)
class SetTextColor(AtmosphereCommand):
    color: str


@dataclass(frozen=True)
class SetContainerColor(AtmosphereCommand):
    color: str


@dataclass(frozen=True)
class SetContainerOpacity(AtmosphereCommand):
    opacity: float


@dataclass(frozen=True)
class SetGlass(AtmosphereCommand):
    enabled: bool


@dataclass(frozen=True)
class SetGlassBlur(AtmosphereCommand):
    px: float


@dataclass(frozen=True)
class SetScrollbarColors(AtmosphereCommand):
    track: Optional[str] = None
    thumb: Optional[str] = None


@dataclass(frozen=True)
class SetLayoutFlow(AtmosphereCommand):
    flow: str


# Reading session

@dataclass(frozen=True)
class OpenBook(Command):
    """Open path for reading; None asks the book picker for one."""

    path: Optional[Path] = None


@dataclass(frozen=True)
class CloseBook(Command):
    pass


@dataclass(frozen=True)
class NextPage(Command):
    pass


@dataclass(frozen=True)
class PreviousPage(Command):
    pass


@dataclass(frozen=True)
class GoTo(Command):
    target: str


@dataclass(frozen=True)
class RemoveBook(Command):
    book_id: str
