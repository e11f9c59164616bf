"""
Pytest fixtures for asciiplay tests
"""

from __future__ import annotations

import asyncio

import pytest

from asciiplay.color import AnsiColorCache
from asciiplay.dimension import Dimension
from asciiplay.display import Display
from asciiplay.frames import Frame
from asciiplay.media import MediaReader
from asciiplay.player import Player

RED = (255, 0, 0, 255)
BLUE = (0, 0, 255, 255)
GRAY = (128, 128, 128, 255)
CLEAR = (0, 0, 0, 0)


def solid_frame(
    index: int = 0,
    color: tuple[int, int, int, int] = RED,
    width: int = 2,
    height: int = 2,
    ansi_cache: AnsiColorCache | None = None,
) -> Frame:
    """RGBA frame filled with a single color."""
    return Frame(index, bytes(color) * (width * height), width, height, ansi_cache=ansi_cache)


class FakeReader(MediaReader):
    """MediaReader producing prepared frames, in one burst or incrementally."""

    def __init__(
        self,
        file_path,
        options=None,
        frames=(),
        dimension=Dimension(2, 2),
        incremental=False,
        error=None,
        dimension_error=None,
        title=None,
    ):
        super().__init__(file_path, options)
        self.frames = list(frames)
        self.dimension = dimension
        self.incremental = incremental
        self.error = error
        self.dimension_error = dimension_error
        self.title = title

    async def read_dimension(self):
        if self.dimension_error is not None:
            raise self.dimension_error
        return self.dimension

    async def read_title(self):
        return self.title or await super().read_title()

    async def read_frames(self, dimension):
        self.emit("start")
        emitted = []
        for frame in self.frames:
            if self.incremental:
                await asyncio.sleep(0.001)
            emitted.append(frame)
            self.emit("frame", frame)
        if self.error is not None:
            raise self.error
        self.emit("finish", emitted)
        return emitted


class FakePlayer(Player):
    """Player handing out FakeReaders; created readers are kept in ``readers``."""

    def __init__(self, **reader_kwargs):
        super().__init__()
        self.reader_kwargs = reader_kwargs
        self.readers: list[FakeReader] = []
        self.destroyed = False

    def get_media_reader(self, file_path, options=None):
        reader = FakeReader(file_path, options, **self.reader_kwargs)
        self.readers.append(reader)
        return reader

    def destroy(self):
        self.destroyed = True
        super().destroy()


class FakeDisplay(Display):
    """Display recording what it was asked to paint."""

    def __init__(self, width=8, height=4, **kwargs):
        self.rendered = False
        self.help_visible = False
        self.destroyed = False
        self.painted: list[tuple[Frame, Frame | None]] = []
        self.updates = 0
        self.size = Dimension(width, height)
        super().__init__(**kwargs)

    def get_dimension(self):
        return self.size if self.rendered else None

    def is_rendered(self):
        return self.rendered

    def is_showing_help(self):
        return self.help_visible

    def render(self):
        self.rendered = True
        self.update()
        return self

    def show_help(self):
        self.help_visible = True
        return self

    def hide_help(self):
        self.help_visible = False
        return self

    def paint(self, frame, previous_frame):
        frame.get_paint(self.size, previous_frame)
        self.painted.append((frame, previous_frame))

    def update(self):
        self.updates += 1

    def destroy(self):
        self.destroyed = True
        super().destroy()


@pytest.fixture
def ansi_cache() -> AnsiColorCache:
    """A fresh color cache so tests never share conversions."""
    return AnsiColorCache()


@pytest.fixture
def frames(ansi_cache) -> list[Frame]:
    """Three distinct 2x2 frames."""
    return [
        solid_frame(0, RED, ansi_cache=ansi_cache),
        solid_frame(1, BLUE, ansi_cache=ansi_cache),
        solid_frame(2, GRAY, ansi_cache=ansi_cache),
    ]


@pytest.fixture
def media_file(tmp_path):
    """An existing file to pass the file checks."""
    path = tmp_path / "movie.mp4"
    path.write_bytes(b"\x00" * 16)
    return path


async def wait_until(predicate, timeout: float = 2.0, interval: float = 0.005) -> None:
    """Poll ``predicate`` on the running loop until it is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met in time")
        await asyncio.sleep(interval)
