"""Tests for frame reassembly from a decoder byte stream."""

import io
import random

import pytest

from asciiplay.config import OverflowPolicy
from asciiplay.streams import FrameIngestor, FrameQueue

FRAME_SIZE = 2 * 2 * 3


def numbered_frames(count: int, frame_size: int = FRAME_SIZE) -> list[bytes]:
    """Frames whose bytes all equal their index, easy to tell apart."""
    return [bytes([i % 256]) * frame_size for i in range(count)]


def drain(queue: FrameQueue) -> list[bytes]:
    frames = []
    while True:
        frame = queue.get(0)
        if frame is None:
            return frames
        frames.append(frame)


class TestFrameIngestor:
    """Tests for FrameIngestor."""

    def test_one_byte_chunks(self):
        """Test frames split into single bytes are reassembled in order."""
        frames = numbered_frames(5)
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        for byte in b"".join(frames):
            ingestor.feed(bytes([byte]))
            assert ingestor.pending < FRAME_SIZE

        assert drain(queue) == frames
        assert ingestor.frames_ingested == 5

    def test_random_chunk_boundaries(self):
        """Test chunks that straddle frame boundaries."""
        rng = random.Random(1234)
        frames = numbered_frames(20)
        data = b"".join(frames)
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        pos = 0
        while pos < len(data):
            size = rng.randint(1, 3 * FRAME_SIZE)
            ingestor.feed(data[pos:pos + size])
            assert ingestor.pending < FRAME_SIZE
            pos += size

        assert drain(queue) == frames

    def test_chunk_with_several_frames(self):
        """Test a single chunk holding multiple frames plus a remainder."""
        frames = numbered_frames(3)
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        emitted = ingestor.feed(b"".join(frames) + b"\x07" * 5)

        assert emitted == 3
        assert ingestor.pending == 5
        assert drain(queue) == frames

    def test_frames_are_exact_size(self):
        """Test every enqueued frame has exactly frame_size bytes."""
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)
        ingestor.feed(bytes(range(200)))
        for frame in drain(queue):
            assert len(frame) == FRAME_SIZE
            assert isinstance(frame, bytes)

    def test_consume_closes_queue(self):
        """Test consuming a stream to EOF closes the queue."""
        frames = numbered_frames(4)
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        count = ingestor.consume(io.BytesIO(b"".join(frames)), chunk_size=1)

        assert count == 4
        assert queue.closed
        assert drain(queue) == frames
        assert queue.drained

    def test_consume_discards_trailing_partial_frame(self):
        """Test an incomplete last frame is dropped at EOF."""
        frames = numbered_frames(2)
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        ingestor.consume(io.BytesIO(b"".join(frames) + b"\xff" * 4), chunk_size=7)

        assert drain(queue) == frames
        assert ingestor.pending == 0

    def test_consume_stops_when_queue_closed(self):
        """Test a consumer-side close stops ingestion."""
        queue = FrameQueue(capacity=100)
        queue.close()
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        assert ingestor.consume(io.BytesIO(bytes(FRAME_SIZE * 3))) == 0
        assert len(queue) == 0

    def test_feed_after_close_returns_zero(self):
        """Test frames completed after close are not enqueued."""
        queue = FrameQueue(capacity=100)
        ingestor = FrameIngestor(FRAME_SIZE, queue)
        queue.close()

        assert ingestor.feed(bytes(FRAME_SIZE * 2)) == 0
        assert ingestor.pending == 0

    def test_drop_policy_keeps_newest(self):
        """Test a bounded dropping queue keeps the most recent frames."""
        frames = numbered_frames(10)
        queue = FrameQueue(capacity=3, overflow=OverflowPolicy.DROP_OLDEST)
        ingestor = FrameIngestor(FRAME_SIZE, queue)

        ingestor.feed(b"".join(frames))

        assert drain(queue) == frames[-3:]
        assert queue.dropped == 7

    def test_invalid_frame_size(self):
        """Test frame_size must be positive."""
        with pytest.raises(ValueError):
            FrameIngestor(0, FrameQueue())
