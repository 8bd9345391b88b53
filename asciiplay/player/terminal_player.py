"""
Terminal Player - Play a video file as colored ASCII art in the terminal.

Ties the pipeline together for one playback session: probe the source, fit
the raster to the terminal, spawn the decoder, ingest its output on a reader
thread and pace rendering on the calling thread.

Example:
    from asciiplay import TerminalPlayer, PlayerConfig

    player = TerminalPlayer("video.mp4")
    result = player.play()

    # Custom configuration
    config = PlayerConfig(char_aspect=0.45, queue_capacity=30)
    TerminalPlayer("video.mp4", config=config).play()

Controls:
    Ctrl+C          - Stop and exit
    Q / Escape      - Stop and exit (interactive terminals)
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, TextIO

from blessed import Terminal

from ..config import PlayerConfig
from ..dimensions import RasterDimensions, fit_dimensions, get_terminal_size
from ..errors import InputNotFoundError
from ..renderer import CLEAR_SCREEN, HIDE_CURSOR, SHOW_CURSOR, FrameRenderer
from ..streams import DecoderProcess, FrameIngestor, FrameQueue, VideoInfo, probe_video
from .keyboard import KeyboardListener, quit_handler
from .scheduler import PlaybackScheduler

logger = logging.getLogger(__name__)


@dataclass
class PlaybackResult:
    """Summary of a finished playback session."""

    frames_rendered: int = 0
    frames_dropped: int = 0
    cancelled: bool = False
    elapsed: float = 0.0


class TerminalPlayer:
    """Play a video file, or any raw RGB byte stream, in the terminal."""

    def __init__(
        self,
        video_path: str | Path | None = None,
        *,
        config: PlayerConfig | None = None,
        stream: TextIO | None = None,
        terminal: Terminal | None = None,
    ):
        """
        Initialize the player.

        :param video_path: Video file to play with :meth:`play`
        :param config: Playback configuration (default: PlayerConfig())
        :param stream: Terminal output stream (default: sys.stdout)
        :param terminal: blessed Terminal for keyboard input (created on demand)
        """
        self.video_path = Path(video_path) if video_path is not None else None
        self.config = config or PlayerConfig()
        self._stream = stream
        self._terminal = terminal

        # Runtime state
        self._cancel = threading.Event()
        self._queue: FrameQueue | None = None
        self._decoder: DecoderProcess | None = None
        self._lock = threading.Lock()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def fit(self, info: VideoInfo) -> RasterDimensions:
        """Fit the video to the current terminal size."""
        columns, rows = get_terminal_size(self.stream, self.config.fallback_size)
        return fit_dimensions(
            info.width,
            info.height,
            columns,
            rows,
            char_aspect=self.config.char_aspect,
            reserved_rows=self.config.reserved_rows,
        )

    def play(self) -> PlaybackResult:
        """Play the video file.

        :raises ValueError: If the player was created without a video path
        :raises InputNotFoundError: If the file does not exist
        :raises MetadataError: If probing fails
        :raises DecodeError: If the decoder cannot start or fails
        """
        if self.video_path is None:
            raise ValueError("No video path given, use play_stream() for raw frame sources")
        if not self.video_path.is_file():
            raise InputNotFoundError(str(self.video_path))

        info = probe_video(self.video_path, ffprobe=self.config.ffprobe)
        dimensions = self.fit(info)

        logger.info(f"Playing: {self.video_path}")
        logger.info(f"Video: {info.width}x{info.height} @ {info.fps:.2f} fps")
        logger.info(f"ASCII: {dimensions}")
        logger.info("Press Ctrl+C to stop")

        decoder = DecoderProcess(
            self.video_path,
            dimensions,
            ffmpeg=self.config.ffmpeg,
            stderr_tail_lines=self.config.stderr_tail_lines,
        )
        decoder.start()
        with self._lock:
            self._decoder = decoder
        try:
            result = self._run_session(decoder.stdout, info, dimensions)
            if not result.cancelled:
                decoder.check()
        finally:
            decoder.close()
            with self._lock:
                self._decoder = None

        self._log_result(result)
        return result

    def play_stream(
        self,
        reader: BinaryIO,
        info: VideoInfo,
        dimensions: RasterDimensions | None = None,
    ) -> PlaybackResult:
        """Play raw RGB frames read from ``reader``.

        :param reader: Binary stream of rgb24 frames at ``dimensions``
        :param info: Frame rate and source size
        :param dimensions: Raster size of the frames (default: fitted to the terminal)
        """
        if dimensions is None:
            dimensions = self.fit(info)
        result = self._run_session(reader, info, dimensions)
        self._log_result(result)
        return result

    def cancel(self) -> None:
        """Stop playback immediately, discarding frames not yet rendered."""
        self._cancel.set()
        with self._lock:
            decoder = self._decoder
            queue = self._queue
        if decoder is not None:
            decoder.terminate()
        if queue is not None:
            queue.clear()
            queue.close()

    def _run_session(
        self, reader: BinaryIO, info: VideoInfo, dimensions: RasterDimensions
    ) -> PlaybackResult:
        config = self.config
        self._cancel.clear()
        queue = FrameQueue(capacity=config.queue_capacity, overflow=config.overflow)
        with self._lock:
            self._queue = queue

        ingestor = FrameIngestor(dimensions.frame_size, queue)
        renderer = FrameRenderer(dimensions, charset=config.charset, stream=self.stream)
        scheduler = PlaybackScheduler(queue, renderer.draw, info.fps, cancel_event=self._cancel)

        errors: list[BaseException] = []

        def ingest() -> None:
            try:
                ingestor.consume(reader, chunk_size=config.chunk_size)
            except Exception as e:  # re-raised on the calling thread
                errors.append(e)
                queue.close()

        reader_thread = threading.Thread(target=ingest, name="frame-ingest", daemon=True)
        keyboard = self._create_keyboard_listener()

        start = time.perf_counter()
        out = self.stream
        out.write(HIDE_CURSOR)
        out.write(CLEAR_SCREEN)
        out.flush()
        try:
            reader_thread.start()
            if keyboard is not None:
                keyboard.start()
            try:
                scheduler.run()
            except KeyboardInterrupt:
                self.cancel()
        except BaseException:
            self.cancel()
            raise
        finally:
            if keyboard is not None:
                keyboard.stop()
            out.write(SHOW_CURSOR)
            out.flush()
            with self._lock:
                self._queue = None

        reader_thread.join(timeout=2.0)
        if reader_thread.is_alive():
            logger.debug("Frame reader still blocked after playback ended")
        if errors and not self.cancelled:
            raise errors[0]

        return PlaybackResult(
            frames_rendered=scheduler.frames_rendered,
            frames_dropped=queue.dropped,
            cancelled=self.cancelled,
            elapsed=time.perf_counter() - start,
        )

    def _create_keyboard_listener(self) -> KeyboardListener | None:
        if not self.config.enable_keyboard:
            return None
        try:
            interactive = sys.stdin.isatty() and self.stream.isatty()
        except (AttributeError, ValueError):
            interactive = False
        if not interactive:
            return None
        if self._terminal is None:
            self._terminal = Terminal()
        return KeyboardListener(quit_handler(self._terminal, self.cancel))

    def _log_result(self, result: PlaybackResult) -> None:
        if result.cancelled:
            logger.info("Stopped by user")
        else:
            logger.info("Playback finished")
        logger.debug(
            f"Rendered {result.frames_rendered} frames in {result.elapsed:.2f}s, "
            f"dropped {result.frames_dropped}"
        )


__all__ = ["PlaybackResult", "TerminalPlayer"]
