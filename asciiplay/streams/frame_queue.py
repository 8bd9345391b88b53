"""Bounded FIFO handoff between the frame ingestor and the playback scheduler.

One producer (the ingestor on the decoder reader thread) and one consumer
(the scheduler). The queue can be closed by either side: the producer closes
it at end of stream, the consumer closes it on cancellation so a producer
blocked on a full queue wakes up and stops.
"""

from __future__ import annotations

import threading
from collections import deque

from ..config import OverflowPolicy


class FrameQueue:
    """Thread-safe bounded frame FIFO with close semantics.

    Example:
        queue = FrameQueue(capacity=60)
        queue.put(frame)           # producer
        frame = queue.get(0.1)     # consumer, None on timeout
        queue.close()              # end of stream
    """

    def __init__(self, capacity: int = 120, overflow: OverflowPolicy = OverflowPolicy.BLOCK) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self.capacity = capacity
        self.overflow = overflow
        self._frames: deque[bytes] = deque()
        self._closed = False
        self._dropped = 0
        self._cond = threading.Condition()

    def put(self, frame: bytes) -> bool:
        """Append a frame.

        With OverflowPolicy.BLOCK a full queue makes the caller wait until the
        consumer takes a frame. With OverflowPolicy.DROP_OLDEST the oldest
        pending frame is discarded instead.

        :return: False if the queue is closed and the frame was not added
        """
        with self._cond:
            if self.overflow is OverflowPolicy.BLOCK:
                while len(self._frames) >= self.capacity and not self._closed:
                    self._cond.wait()
            if self._closed:
                return False
            if len(self._frames) >= self.capacity:
                self._frames.popleft()
                self._dropped += 1
            self._frames.append(frame)
            self._cond.notify_all()
            return True

    def get(self, timeout: float | None = None) -> bytes | None:
        """Take the oldest frame.

        :param timeout: Seconds to wait for a frame (None = until one arrives
            or the queue is closed)
        :return: Frame, or None on timeout or when closed and empty
        """
        with self._cond:
            if not self._frames and not self._closed:
                self._cond.wait_for(lambda: self._frames or self._closed, timeout)
            if not self._frames:
                return None
            frame = self._frames.popleft()
            self._cond.notify_all()
            return frame

    def close(self) -> None:
        """Mark the end of the stream. Pending frames can still be taken."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def clear(self) -> int:
        """Discard all pending frames and return how many were discarded."""
        with self._cond:
            count = len(self._frames)
            self._frames.clear()
            self._cond.notify_all()
            return count

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def drained(self) -> bool:
        """Whether the queue is closed and holds no more frames."""
        with self._cond:
            return self._closed and not self._frames

    @property
    def dropped(self) -> int:
        """Number of frames discarded by the DROP_OLDEST policy."""
        return self._dropped

    def __len__(self) -> int:
        with self._cond:
            return len(self._frames)


__all__ = ["FrameQueue"]
