"""Video metadata probing via ffprobe."""

from __future__ import annotations

import json
import logging
import subprocess
from dataclasses import dataclass
from fractions import Fraction
from pathlib import Path

from ..errors import MetadataError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VideoInfo:
    """Size and frame rate of the first video stream of a file."""

    width: int
    height: int
    fps: float

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def frame_interval(self) -> float:
        """Seconds between two frames at the source frame rate."""
        return 1.0 / self.fps


def parse_frame_rate(rate: str) -> float:
    """Parse an ffprobe rational frame rate such as ``"30000/1001"``.

    :raises MetadataError: If the rate is malformed or not positive
    """
    try:
        if "/" in rate:
            num, den = rate.split("/", 1)
            fps = float(Fraction(int(num), int(den)))
        else:
            fps = float(rate)
    except (ValueError, ZeroDivisionError):
        raise MetadataError(f"Invalid frame rate: {rate!r}") from None
    if not fps > 0:
        raise MetadataError(f"Invalid frame rate: {rate!r}")
    return fps


def parse_probe_output(output: str) -> VideoInfo:
    """Extract :class:`VideoInfo` from ffprobe's JSON output."""
    try:
        streams = json.loads(output)["streams"]
        stream = streams[0]
        width = int(stream["width"])
        height = int(stream["height"])
        rate = str(stream["r_frame_rate"])
    except json.JSONDecodeError as e:
        raise MetadataError(f"Failed to parse ffprobe output: {e}") from e
    except (KeyError, IndexError, TypeError, ValueError):
        raise MetadataError("No usable video stream found") from None

    if width <= 0 or height <= 0:
        raise MetadataError(f"Invalid video size: {width}x{height}")
    return VideoInfo(width=width, height=height, fps=parse_frame_rate(rate))


def probe_video(path: str | Path, ffprobe: str = "ffprobe") -> VideoInfo:
    """
    Query width, height and frame rate of the first video stream.

    :param path: Video file
    :param ffprobe: ffprobe executable
    :return: Video metadata
    :raises MetadataError: If ffprobe is missing, fails or returns garbage
    """
    cmd = [
        ffprobe,
        "-v", "error",
        "-select_streams", "v:0",
        "-show_entries", "stream=width,height,r_frame_rate",
        "-of", "json",
        str(path),
    ]
    logger.debug(f"Probing: {' '.join(cmd)}")
    try:
        # Filenames echoed in diagnostics need not be valid UTF-8
        result = subprocess.run(
            cmd, capture_output=True, text=True, encoding="utf-8", errors="replace"
        )
    except OSError as e:
        raise MetadataError(f"Failed to run {ffprobe}: {e}") from e

    if result.returncode != 0:
        detail = result.stderr.strip().splitlines()
        message = "Failed to get video info"
        if detail:
            message = f"{message}: {detail[-1]}"
        raise MetadataError(message)

    info = parse_probe_output(result.stdout)
    logger.debug(f"Probed {path}: {info}")
    return info


__all__ = ["VideoInfo", "parse_frame_rate", "parse_probe_output", "probe_video"]
