"""
asciiplay - Play videos as colored ASCII art directly in the terminal
"""

from .config import ASCII_CHARS_10, ASCII_CHARS_70, RAMPS, OverflowPolicy, PlayerConfig
from .dimensions import RasterDimensions, fit_dimensions, get_terminal_size
from .errors import AsciiPlayError, DecodeError, InputNotFoundError, MetadataError
from .renderer import FrameRenderer, map_pixel, map_pixels, rgb_to_ansi256
from .streams import DecoderProcess, FrameIngestor, FrameQueue, VideoInfo, probe_video
from .player import PlaybackResult, PlaybackScheduler, PlaybackState, TerminalPlayer

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "PlayerConfig",
    "OverflowPolicy",
    "ASCII_CHARS_10",
    "ASCII_CHARS_70",
    "RAMPS",
    # Sizing
    "RasterDimensions",
    "fit_dimensions",
    "get_terminal_size",
    # Rendering
    "FrameRenderer",
    "map_pixel",
    "map_pixels",
    "rgb_to_ansi256",
    # Streams
    "VideoInfo",
    "probe_video",
    "DecoderProcess",
    "FrameIngestor",
    "FrameQueue",
    # Playback
    "PlaybackScheduler",
    "PlaybackState",
    "PlaybackResult",
    "TerminalPlayer",
    # Errors
    "AsciiPlayError",
    "InputNotFoundError",
    "MetadataError",
    "DecodeError",
]
