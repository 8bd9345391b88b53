"""
Command line interface - Watch a video in colored ASCII art.

Usage:
    asciiplay video.mp4
    asciiplay --char-aspect 0.45 --ramp extended video.mp4
    python -m asciiplay video.mp4

Exit codes:
    0   Playback finished or stopped by the user
    1   Input missing, metadata probe failed or decoder failed
    2   Invalid arguments
"""

from __future__ import annotations

import argparse
import logging
import sys

from .config import RAMPS, OverflowPolicy, PlayerConfig
from .errors import AsciiPlayError
from .player import TerminalPlayer

logger = logging.getLogger("asciiplay")


def _positive_float(value: str) -> float:
    number = float(value)
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asciiplay",
        description="Play a video as colored ASCII art in the terminal.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Controls:
  Ctrl+C      - Stop and exit
  q / Escape  - Stop and exit

Environment:
  ASCIIPLAY_CHAR_ASPECT, ASCIIPLAY_RESERVED_ROWS, ASCIIPLAY_QUEUE_CAPACITY,
  ASCIIPLAY_FFMPEG, ASCIIPLAY_FFPROBE set defaults for the matching options.
        """,
    )
    parser.add_argument("video", help="Path to the video file")
    parser.add_argument(
        "--char-aspect",
        "-a",
        type=_positive_float,
        default=None,
        help="Terminal char aspect ratio (width/height, default: 0.5)",
    )
    parser.add_argument(
        "--reserved-rows",
        type=_positive_int,
        default=None,
        help="Terminal rows kept free below the video, at least 1 (default: 2)",
    )
    parser.add_argument(
        "--ramp",
        choices=sorted(RAMPS),
        default="standard",
        help="Glyph ramp, standard (10 chars) or extended (70 chars)",
    )
    parser.add_argument(
        "--queue-capacity",
        type=_positive_int,
        default=None,
        help="Maximum number of decoded frames waiting to be shown (default: 120)",
    )
    parser.add_argument(
        "--drop-frames",
        action="store_true",
        help="Drop the oldest waiting frame when the queue is full instead of "
        "pausing the decoder",
    )
    parser.add_argument(
        "--no-keyboard",
        action="store_true",
        help="Ignore q / Escape, only Ctrl+C stops playback",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        help="Also write debug logs to PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log messages verbosity",
    )
    return parser


def setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    """Send asciiplay log records to stderr and optionally to a file."""
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [console_handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    if log_file:
        file_handler = logging.FileHandler(filename=log_file, mode="w")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.handlers.append(file_handler)


def config_from_args(args: argparse.Namespace) -> PlayerConfig:
    """Build the playback configuration from the environment and CLI options."""
    return PlayerConfig.from_env(
        char_aspect=args.char_aspect,
        reserved_rows=args.reserved_rows,
        queue_capacity=args.queue_capacity,
        charset=RAMPS[args.ramp],
        overflow=OverflowPolicy.DROP_OLDEST if args.drop_frames else None,
        enable_keyboard=False if args.no_keyboard else None,
    )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    try:
        config = config_from_args(args)
    except ValueError as e:
        logger.error(f"Error: {e}")
        return 1

    player = TerminalPlayer(args.video, config=config)
    try:
        player.play()
    except AsciiPlayError as e:
        logger.error(f"Error: {e}")
        for line in getattr(e, "diagnostics", []):
            logger.debug(f"  {line}")
        return 1
    except KeyboardInterrupt:
        # Interrupted before playback started, nothing was drawn yet
        logger.info("Stopped by user")
    finally:
        for handler in logger.handlers:
            handler.flush()
    return 0


__all__ = ["build_parser", "config_from_args", "main", "setup_logging"]
