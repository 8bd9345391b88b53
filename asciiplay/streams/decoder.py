"""Decoder subprocess producing raw RGB frames.

DecoderProcess wraps an ffmpeg child that scales the input to the fitted
raster and writes interleaved ``rgb24`` pixels to its stdout, with no headers
and no padding. The child's error output would corrupt the rendered display,
so it is collected into a bounded tail buffer on a background thread and only
surfaced if the decoder exits abnormally.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from collections import deque
from pathlib import Path
from typing import BinaryIO

from ..dimensions import RasterDimensions
from ..errors import DecodeError

logger = logging.getLogger(__name__)


def build_decoder_command(
    path: str | Path, dimensions: RasterDimensions, ffmpeg: str = "ffmpeg"
) -> list[str]:
    """Build the ffmpeg command line for raw RGB output at the raster size."""
    return [
        ffmpeg,
        "-nostdin",
        "-loglevel", "error",
        "-i", str(path),
        "-vf", f"scale={dimensions.width}:{dimensions.height}",
        "-an",
        "-f", "rawvideo",
        "-pix_fmt", "rgb24",
        "-",
    ]


class DecoderProcess:
    """Run ffmpeg as a raw frame source.

    Example:
        with DecoderProcess("movie.mp4", RasterDimensions(80, 22)) as decoder:
            ingestor.consume(decoder.stdout)
        decoder.check()  # raises DecodeError on abnormal exit
    """

    def __init__(
        self,
        path: str | Path,
        dimensions: RasterDimensions,
        ffmpeg: str = "ffmpeg",
        stderr_tail_lines: int = 20,
    ) -> None:
        self.path = Path(path)
        self.dimensions = dimensions
        self.ffmpeg = ffmpeg
        self._process: subprocess.Popen | None = None
        self._stderr_tail: deque[str] = deque(maxlen=max(1, stderr_tail_lines))
        self._stderr_thread: threading.Thread | None = None
        self._terminated = False
        self._lock = threading.Lock()

    @property
    def command(self) -> list[str]:
        return build_decoder_command(self.path, self.dimensions, self.ffmpeg)

    def start(self) -> None:
        """Spawn the decoder.

        :raises DecodeError: If the executable cannot be started
        """
        if self._process is not None:
            return
        logger.debug(f"Starting decoder: {' '.join(self.command)}")
        try:
            self._process = subprocess.Popen(
                self.command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise DecodeError(f"Failed to start {self.ffmpeg}: {e}") from e

        self._stderr_thread = threading.Thread(
            target=self._drain_stderr, name="decoder-stderr", daemon=True
        )
        self._stderr_thread.start()

    def _drain_stderr(self) -> None:
        stderr = self._process.stderr
        for raw_line in iter(stderr.readline, b""):
            line = raw_line.decode("utf-8", errors="replace").rstrip()
            if line:
                self._stderr_tail.append(line)

    @property
    def stdout(self) -> BinaryIO:
        if self._process is None:
            raise RuntimeError("Decoder has not been started")
        return self._process.stdout

    @property
    def diagnostics(self) -> list[str]:
        """Last lines the decoder wrote to its error stream."""
        return list(self._stderr_tail)

    @property
    def terminated(self) -> bool:
        """Whether the decoder was stopped by :meth:`terminate`."""
        return self._terminated

    def terminate(self, timeout: float = 2.0) -> None:
        """Stop the decoder synchronously. Safe to call more than once."""
        with self._lock:
            process = self._process
            if process is None or process.poll() is not None:
                return
            self._terminated = True
            process.terminate()
            try:
                process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.debug("Decoder ignored SIGTERM, killing it")
                process.kill()
                process.wait()

    def wait(self) -> int:
        """Wait for the decoder to exit and collect its remaining output."""
        if self._process is None:
            raise RuntimeError("Decoder has not been started")
        returncode = self._process.wait()
        if self._stderr_thread is not None:
            self._stderr_thread.join(timeout=1.0)
        return returncode

    def check(self) -> None:
        """Wait for exit and raise if the decoder failed on its own.

        :raises DecodeError: On a non-zero exit not caused by :meth:`terminate`
        """
        returncode = self.wait()
        if returncode != 0 and not self._terminated:
            diagnostics = self.diagnostics
            message = f"Decoder exited with status {returncode}"
            if diagnostics:
                message = f"{message}: {diagnostics[-1]}"
            raise DecodeError(message, diagnostics)

    def close(self) -> None:
        """Terminate if still running and release the pipes."""
        if self._process is None:
            return
        self.terminate()
        self.wait()
        for pipe in (self._process.stdout, self._process.stderr):
            if pipe is not None:
                pipe.close()

    def __enter__(self) -> "DecoderProcess":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["DecoderProcess", "build_decoder_command"]
