"""
Frame Renderer - Convert raw RGB frames to colored ASCII art.

Each pixel becomes one character cell: its luminance selects a glyph from a
ramp ordered dark to bright, and its color is quantized to the 256-color
terminal palette (6x6x6 color cube plus the 24-step grayscale ramp).

Example:
    from asciiplay.dimensions import RasterDimensions
    from asciiplay.renderer import FrameRenderer

    renderer = FrameRenderer(RasterDimensions(80, 24))
    renderer.draw(frame_bytes)  # one write per frame
"""

from __future__ import annotations

import sys
from typing import TextIO

import numpy as np

from .config import ASCII_CHARS_10
from .dimensions import RasterDimensions

# ANSI escape codes
ESC = "\033"
RESET = f"{ESC}[0m"
CURSOR_HOME = f"{ESC}[H"
CLEAR_SCREEN = f"{ESC}[2J"
HIDE_CURSOR = f"{ESC}[?25l"
SHOW_CURSOR = f"{ESC}[?25h"

# Luma weights in thousandths (0.299, 0.587, 0.114), they sum to exactly 1000
LUMA_WEIGHTS = (299, 587, 114)
LUMA_SCALE = 255 * 1000

# Foreground color escape for every palette index
COLOR_CODES = np.array([f"{ESC}[38;5;{i}m" for i in range(256)])


def glyph_index(r: int, g: int, b: int, ramp_length: int = len(ASCII_CHARS_10)) -> int:
    """Index into a glyph ramp for the luminance of one pixel."""
    weighted = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    index = weighted * (ramp_length - 1) // LUMA_SCALE
    return min(max(index, 0), ramp_length - 1)


def rgb_to_ansi256(r: int, g: int, b: int) -> int:
    """
    Quantize an RGB color to a 256-color terminal palette index.

    Achromatic colors use the grayscale ramp (232-255) with pure black and
    white mapped into the cube corners (16 and 231). Everything else maps to
    the 6x6x6 color cube (16-231). Rounding is half-up.

    :return: Palette index in [16, 255]
    """
    if r == g == b:
        if r < 8:
            return 16
        if r > 248:
            return 231
        # round((r - 8) / 247 * 24)
        return 232 + (48 * (r - 8) + 247) // 494
    # round(c / 255 * 5) per channel
    return 16 + 36 * ((10 * r + 255) // 510) + 6 * ((10 * g + 255) // 510) + (10 * b + 255) // 510


def map_pixel(r: int, g: int, b: int, charset: str = ASCII_CHARS_10) -> tuple[str, int]:
    """Map one RGB pixel to its (glyph, color index) pair."""
    return charset[glyph_index(r, g, b, len(charset))], rgb_to_ansi256(r, g, b)


def map_pixels(pixels: np.ndarray, ramp_length: int = len(ASCII_CHARS_10)) -> tuple[np.ndarray, np.ndarray]:
    """
    Vectorized pixel mapping over a whole raster.

    Produces the same results as :func:`glyph_index` and
    :func:`rgb_to_ansi256` for every pixel.

    :param pixels: (height, width, 3) uint8 RGB array
    :param ramp_length: Number of glyphs in the ramp
    :return: Tuple of (glyph indices, palette indices), both (height, width)
    """
    channels = pixels.astype(np.int64)
    r = channels[:, :, 0]
    g = channels[:, :, 1]
    b = channels[:, :, 2]

    weighted = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    glyphs = np.clip(weighted * (ramp_length - 1) // LUMA_SCALE, 0, ramp_length - 1)

    cube = (
        16
        + 36 * ((10 * r + 255) // 510)
        + 6 * ((10 * g + 255) // 510)
        + (10 * b + 255) // 510
    )
    gray = np.where(r < 8, 16, np.where(r > 248, 231, 232 + (48 * (r - 8) + 247) // 494))
    achromatic = (r == g) & (g == b)
    colors = np.where(achromatic, gray, cube)

    return glyphs, colors


class FrameRenderer:
    """
    Render raw RGB frames of a fixed raster size to the terminal.

    A frame is turned into a single text block: cursor home, then one line per
    raster row where every cell is a color escape immediately followed by its
    glyph, and every line ends with a style reset. :meth:`draw` writes the
    block with one write call so successive frames overdraw in place.
    """

    def __init__(
        self,
        dimensions: RasterDimensions,
        charset: str = ASCII_CHARS_10,
        stream: TextIO | None = None,
    ):
        """
        Initialize the renderer.

        :param dimensions: Raster size of every frame
        :param charset: Glyph ramp, darkest first
        :param stream: Output stream (default: sys.stdout at draw time)
        """
        if len(charset) < 2:
            raise ValueError("charset needs at least two characters")
        self.dimensions = dimensions
        self.charset = charset
        self._stream = stream
        self._glyphs = np.array(list(charset))
        self.frames_drawn = 0

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def to_pixels(self, frame: bytes | bytearray | memoryview | np.ndarray) -> np.ndarray:
        """View a raw frame buffer as a (height, width, 3) array."""
        width, height = self.dimensions.width, self.dimensions.height
        if isinstance(frame, np.ndarray):
            data = frame.reshape(-1).astype(np.uint8, copy=False)
        else:
            data = np.frombuffer(frame, dtype=np.uint8)
        if data.size != self.dimensions.frame_size:
            raise ValueError(
                f"Frame has {data.size} bytes, expected {self.dimensions.frame_size} "
                f"for a {width}x{height} raster"
            )
        return data.reshape(height, width, 3)

    def render(self, frame: bytes | bytearray | memoryview | np.ndarray) -> str:
        """
        Render a frame as an escape-coded text block.

        :param frame: Raw RGB frame, row-major, 3 bytes per pixel
        :return: Text block starting with cursor home, one line per row
        """
        pixels = self.to_pixels(frame)
        glyph_indices, colors = map_pixels(pixels, len(self.charset))
        cells = np.char.add(COLOR_CODES[colors], self._glyphs[glyph_indices])

        rows = [CURSOR_HOME]
        for row in cells:
            rows.append("".join(row))
            rows.append(RESET)
            rows.append("\n")
        return "".join(rows)

    def draw(self, frame: bytes | bytearray | memoryview | np.ndarray) -> None:
        """Render a frame and write it to the output stream in one write."""
        output = self.render(frame)
        stream = self.stream
        stream.write(output)
        stream.flush()
        self.frames_drawn += 1


__all__ = [
    "ESC",
    "RESET",
    "CURSOR_HOME",
    "CLEAR_SCREEN",
    "HIDE_CURSOR",
    "SHOW_CURSOR",
    "FrameRenderer",
    "glyph_index",
    "map_pixel",
    "map_pixels",
    "rgb_to_ansi256",
]
