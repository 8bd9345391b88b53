"""Reassemble fixed-size raw frames from a decoder byte stream."""

from __future__ import annotations

import logging
from typing import BinaryIO

from .frame_queue import FrameQueue

logger = logging.getLogger(__name__)


class FrameIngestor:
    """Slice an unbounded byte stream into frames of ``frame_size`` bytes.

    The decoder gives no guarantee that read boundaries line up with frame
    boundaries, so incoming chunks are accumulated and complete frames are
    cut off the front. After every :meth:`feed` fewer than ``frame_size``
    bytes remain pending.
    """

    def __init__(self, frame_size: int, queue: FrameQueue) -> None:
        if frame_size < 1:
            raise ValueError(f"frame_size must be at least 1, got {frame_size}")
        self.frame_size = frame_size
        self.queue = queue
        self._buffer = bytearray()
        self.frames_ingested = 0

    @property
    def pending(self) -> int:
        """Bytes of an incomplete frame held for the next chunk."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> int:
        """Accept a chunk and enqueue every frame it completes.

        :return: Number of frames enqueued
        """
        self._buffer += chunk
        count = 0
        while len(self._buffer) >= self.frame_size:
            frame = bytes(self._buffer[: self.frame_size])
            del self._buffer[: self.frame_size]
            if not self.queue.put(frame):
                # Consumer closed the queue, nothing downstream wants frames
                self._buffer.clear()
                break
            count += 1
        self.frames_ingested += count
        return count

    def consume(self, reader: BinaryIO, chunk_size: int = 65536) -> int:
        """Read ``reader`` until EOF, then close the queue.

        :param reader: Binary stream, typically the decoder's stdout
        :param chunk_size: Maximum bytes per read
        :return: Number of frames enqueued
        """
        read = getattr(reader, "read1", reader.read)
        try:
            while not self.queue.closed:
                chunk = read(chunk_size)
                if not chunk:
                    break
                self.feed(chunk)
        finally:
            if self._buffer:
                logger.debug(f"Discarding {len(self._buffer)} trailing bytes of an incomplete frame")
                self._buffer.clear()
            self.queue.close()
        logger.debug(f"Ingested {self.frames_ingested} frames")
        return self.frames_ingested


__all__ = ["FrameIngestor"]
