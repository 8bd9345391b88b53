"""
Pytest fixtures for asciiplay tests
"""

import io
import time

import pytest

from asciiplay.renderer import CURSOR_HOME


class RecordingStream(io.StringIO):
    """Text stream that remembers every write with its timestamp."""

    def __init__(self):
        super().__init__()
        self.writes: list[tuple[float, str]] = []

    def write(self, s):
        self.writes.append((time.perf_counter(), s))
        return super().write(s)

    def isatty(self):
        return False

    @property
    def frame_writes(self) -> list[tuple[float, str]]:
        """Writes that are complete rendered frames."""
        return [(t, s) for t, s in self.writes if s.startswith(CURSOR_HOME)]


def solid_frame(width: int, height: int, rgb: tuple[int, int, int]) -> bytes:
    """A raw RGB frame filled with one color."""
    return bytes(rgb) * (width * height)


@pytest.fixture
def recording_stream() -> RecordingStream:
    """
    Returns a terminal stand-in recording all writes.
    :return: The stream
    """
    return RecordingStream()


@pytest.fixture
def make_frame():
    """
    Returns a factory for solid color raw frames.
    :return: solid_frame(width, height, rgb)
    """
    return solid_frame
