"""Tests for the bounded frame queue."""

import threading
import time

import pytest

from asciiplay.config import OverflowPolicy
from asciiplay.streams import FrameQueue


class TestFrameQueue:
    """Tests for FrameQueue."""

    def test_fifo_order(self):
        """Test frames come out in the order they went in."""
        queue = FrameQueue(capacity=10)
        for i in range(5):
            queue.put(bytes([i]))
        assert [queue.get(0) for _ in range(5)] == [bytes([i]) for i in range(5)]

    def test_get_timeout_returns_none(self):
        """Test an empty open queue times out with None."""
        queue = FrameQueue()
        start = time.perf_counter()
        assert queue.get(timeout=0.05) is None
        assert time.perf_counter() - start >= 0.04
        assert not queue.drained

    def test_close_keeps_pending_frames(self):
        """Test frames queued before close can still be taken."""
        queue = FrameQueue()
        queue.put(b"a")
        queue.close()
        assert not queue.drained
        assert queue.get(0) == b"a"
        assert queue.get(0) is None
        assert queue.drained

    def test_put_after_close(self):
        """Test a closed queue rejects new frames."""
        queue = FrameQueue()
        queue.close()
        assert queue.put(b"a") is False
        assert len(queue) == 0

    def test_close_wakes_waiting_consumer(self):
        """Test a blocked get returns as soon as the queue closes."""
        queue = FrameQueue()
        threading.Timer(0.05, queue.close).start()
        start = time.perf_counter()
        assert queue.get(timeout=5.0) is None
        assert time.perf_counter() - start < 2.0

    def test_block_policy_waits_for_consumer(self):
        """Test a full queue blocks the producer until a frame is taken."""
        queue = FrameQueue(capacity=2, overflow=OverflowPolicy.BLOCK)
        queue.put(b"1")
        queue.put(b"2")

        done = threading.Event()

        def produce():
            queue.put(b"3")
            done.set()

        thread = threading.Thread(target=produce)
        thread.start()
        assert not done.wait(0.1)
        assert len(queue) == 2

        assert queue.get(0) == b"1"
        assert done.wait(2.0)
        thread.join()
        assert [queue.get(0), queue.get(0)] == [b"2", b"3"]
        assert queue.dropped == 0

    def test_block_policy_unblocks_on_close(self):
        """Test closing the queue releases a blocked producer."""
        queue = FrameQueue(capacity=1)
        queue.put(b"1")
        results = []
        thread = threading.Thread(target=lambda: results.append(queue.put(b"2")))
        thread.start()
        time.sleep(0.05)
        queue.close()
        thread.join(2.0)
        assert results == [False]

    def test_drop_oldest_policy(self):
        """Test a full queue discards its oldest frame."""
        queue = FrameQueue(capacity=2, overflow=OverflowPolicy.DROP_OLDEST)
        for frame in (b"1", b"2", b"3", b"4"):
            assert queue.put(frame) is True
        assert len(queue) == 2
        assert queue.dropped == 2
        assert [queue.get(0), queue.get(0)] == [b"3", b"4"]

    def test_clear(self):
        """Test clear discards pending frames."""
        queue = FrameQueue()
        queue.put(b"1")
        queue.put(b"2")
        assert queue.clear() == 2
        assert len(queue) == 0

    def test_invalid_capacity(self):
        """Test capacity must be positive."""
        with pytest.raises(ValueError):
            FrameQueue(capacity=0)
