"""Raster sizing.

Fits a video into the terminal's character grid. Terminal cells are not
square, so the fitted raster compensates with a character aspect ratio
(cell width divided by cell height, 0.5 for cells twice as tall as wide).
"""

from __future__ import annotations

import math
import os
import sys
from dataclasses import dataclass
from typing import TextIO


@dataclass(frozen=True)
class RasterDimensions:
    """Target character grid of one rendered frame."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Invalid raster dimensions: {self.width}x{self.height}")

    @property
    def frame_size(self) -> int:
        """Size in bytes of one raw RGB frame at this raster size."""
        return self.width * self.height * 3

    def __str__(self) -> str:
        return f"{self.width}x{self.height}"


def fit_dimensions(
    video_width: int,
    video_height: int,
    columns: int,
    rows: int,
    char_aspect: float = 0.5,
    reserved_rows: int = 2,
) -> RasterDimensions:
    """
    Fit a video into a terminal while preserving its visual proportions.

    Starts from the full terminal width. If the resulting height does not fit
    the rows left after ``reserved_rows``, the height is pinned to that limit
    and the width recomputed from it. Truncation can produce a zero extent for
    extreme aspect ratios or tiny terminals, so both sides are clamped to 1.

    :param video_width: Source video width in pixels
    :param video_height: Source video height in pixels
    :param columns: Terminal width in character cells
    :param rows: Terminal height in character cells
    :param char_aspect: Width/height ratio of one character cell
    :param reserved_rows: Rows kept free below the video for status text
    :return: Fitted raster dimensions
    """
    if video_width <= 0 or video_height <= 0:
        raise ValueError(f"Invalid video size: {video_width}x{video_height}")
    if columns <= 0 or rows <= 0:
        raise ValueError(f"Invalid terminal size: {columns}x{rows}")
    if char_aspect <= 0:
        raise ValueError(f"char_aspect must be positive, got {char_aspect}")

    max_height = max(1, rows - reserved_rows)
    video_aspect = video_width / video_height

    width = columns
    height = math.floor(width * char_aspect / video_aspect)

    if height > max_height:
        height = max_height
        width = math.floor(height * video_aspect / char_aspect)

    return RasterDimensions(width=max(1, min(width, columns)), height=max(1, height))


def get_terminal_size(
    stream: TextIO | None = None, fallback: tuple[int, int] = (80, 24)
) -> tuple[int, int]:
    """Get terminal size as (columns, rows) with fallback."""
    if stream is None:
        stream = sys.stdout
    try:
        size = os.get_terminal_size(stream.fileno())
    except (AttributeError, OSError, ValueError):
        return fallback
    if size.columns <= 0 or size.lines <= 0:
        return fallback
    return size.columns, size.lines


__all__ = ["RasterDimensions", "fit_dimensions", "get_terminal_size"]
