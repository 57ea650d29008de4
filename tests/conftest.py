"""Shared fixtures and fakes for the test suite."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from typing import Dict, List, Optional  # noqa: E402

import pytest  # noqa: E402

from epilogue.core import BookMetadata, LayoutFlow, TocEntry  # noqa: E402
from epilogue.io import InMemoryBackend  # noqa: E402
from epilogue.services import (  # noqa: E402
    Atmosphere,
    BackgroundState,
    NullPlaybackHandle,
    OverlayState,
    ReaderAppearanceState,
)
from epilogue.ui import DocumentRenderer, Notifier  # noqa: E402


class FakeClock:
    """Manually advanced clock for recency and snapshot timestamps."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float = 1.0) -> float:
        self.now += seconds
        return self.now


class FakeRenderer(DocumentRenderer):
    """Records every call; tokens listed in bad_tokens fail to resolve."""

    def __init__(self, metadata: Optional[BookMetadata] = None, toc=None):
        self.metadata = metadata or BookMetadata(title="Dune", author="Frank Herbert")
        self.toc: List[TocEntry] = toc or []
        self.calls: List[tuple] = []
        self.position: Optional[str] = None
        self.flow: Optional[LayoutFlow] = None
        self.typography: Dict[str, str] = {}
        self.bad_tokens = set()
        self.surface = False

    async def open(self, data: bytes) -> BookMetadata:
        self.calls.append(("open", data))
        return self.metadata

    def render_to(self, flow: LayoutFlow) -> None:
        self.calls.append(("render_to", flow.name))
        self.flow = flow
        self.surface = True

    async def render_at(self, token: Optional[str] = None) -> None:
        self.calls.append(("render_at", token))
        if token in self.bad_tokens:
            raise ValueError(f"Unresolvable position: {token}")
        self.position = token or "start"

    def current_resume_token(self) -> Optional[str]:
        return self.position if self.surface else None

    def destroy(self) -> None:
        self.calls.append(("destroy",))
        self.surface = False

    def set_typography(self, typography: Dict[str, str]) -> None:
        self.calls.append(("set_typography", dict(typography)))
        self.typography = dict(typography)

    def next_page(self) -> None:
        self.calls.append(("next_page",))

    def prev_page(self) -> None:
        self.calls.append(("prev_page",))

    async def table_of_contents(self) -> List[TocEntry]:
        return self.toc

    def close(self) -> None:
        self.calls.append(("close",))
        self.surface = False
        self.position = None

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    return InMemoryBackend(clock=clock)


@pytest.fixture
def notifier():
    notifier = Notifier()
    notifier.posted = []
    notifier.notice_posted.connect(lambda level, message: notifier.posted.append((level, message)))
    return notifier


@pytest.fixture
def motion_player():
    return NullPlaybackHandle()


@pytest.fixture
def audio_player():
    return NullPlaybackHandle()


@pytest.fixture
def atmosphere(motion_player, audio_player):
    return Atmosphere(
        background=BackgroundState(motion_player, audio_player),
        overlay=OverlayState(),
        reader=ReaderAppearanceState(),
    )


@pytest.fixture
def renderer():
    return FakeRenderer()
