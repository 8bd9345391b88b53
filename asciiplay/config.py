"""Playback configuration.

PlayerConfig bundles every environment-dependent constant of a playback
session: character cell geometry, reserved status rows, the glyph ramp,
frame queue bounds and the external binaries used for probing and decoding.

Values can come from the environment (``ASCIIPLAY_*`` variables) and are
overridden by explicit arguments, e.g. from the command line.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from enum import Enum

# Character sets ordered from dark to bright
ASCII_CHARS_10 = " .:-=+*#%@"
ASCII_CHARS_70 = " .'`^\",:;Il!i><~+_-?][}{1)(|\\/tfjrxnuvczXYUJCLQ0OZmwqpdbkhao*#MW&8%B@$"

RAMPS = {
    "standard": ASCII_CHARS_10,
    "extended": ASCII_CHARS_70,
}

ENV_PREFIX = "ASCIIPLAY_"


class OverflowPolicy(Enum):
    """What the frame queue does when a frame arrives while it is full."""

    BLOCK = "block"  # Producer waits, which stops reading from the decoder
    DROP_OLDEST = "drop_oldest"  # Oldest pending frame is discarded


@dataclass
class PlayerConfig:
    """Configuration for a terminal playback session."""

    # Terminal geometry
    char_aspect: float = 0.5  # Width/height ratio of one character cell
    reserved_rows: int = 2  # Rows kept free for status text
    fallback_size: tuple[int, int] = (80, 24)  # Columns, rows if size query fails

    # Rendering
    charset: str = ASCII_CHARS_10

    # Frame queue
    queue_capacity: int = 120
    overflow: OverflowPolicy = OverflowPolicy.BLOCK

    # Decoder
    chunk_size: int = 65536
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"
    stderr_tail_lines: int = 20

    # Controls
    enable_keyboard: bool = True

    def __post_init__(self) -> None:
        if not self.char_aspect > 0:
            raise ValueError(f"char_aspect must be positive, got {self.char_aspect}")
        # Each frame ends with a newline, a full-height raster would scroll
        if self.reserved_rows < 1:
            raise ValueError(f"reserved_rows must be at least 1, got {self.reserved_rows}")
        if len(self.charset) < 2:
            raise ValueError("charset needs at least two characters")
        if self.queue_capacity < 1:
            raise ValueError(f"queue_capacity must be at least 1, got {self.queue_capacity}")
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be at least 1, got {self.chunk_size}")
        columns, rows = self.fallback_size
        if columns < 1 or rows < 1:
            raise ValueError(f"Invalid fallback terminal size: {self.fallback_size}")
        if not isinstance(self.overflow, OverflowPolicy):
            self.overflow = OverflowPolicy(self.overflow)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides) -> "PlayerConfig":
        """Build a configuration from ``ASCIIPLAY_*`` environment variables.

        Keyword arguments that are not None take precedence over the
        environment.

        :param environ: Mapping to read from (default: os.environ)
        :return: Validated configuration
        """
        if environ is None:
            environ = os.environ

        parsers = {
            "char_aspect": float,
            "reserved_rows": int,
            "queue_capacity": int,
            "ffmpeg": str,
            "ffprobe": str,
        }
        values = {}
        for name, parse in parsers.items():
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is None or raw == "":
                continue
            try:
                values[name] = parse(raw)
            except ValueError:
                raise ValueError(
                    f"Invalid value for {ENV_PREFIX}{name.upper()}: {raw!r}"
                ) from None

        known = {f.name for f in fields(cls)}
        for name, value in overrides.items():
            if name not in known:
                raise TypeError(f"Unknown configuration option: {name}")
            if value is not None:
                values[name] = value

        return cls(**values)

    def with_options(self, **changes) -> "PlayerConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


__all__ = [
    "ASCII_CHARS_10",
    "ASCII_CHARS_70",
    "RAMPS",
    "OverflowPolicy",
    "PlayerConfig",
]
