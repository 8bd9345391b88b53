"""asciiplay streams package.

This package provides the frame source side of playback:

- VideoInfo / probe_video: Source metadata from ffprobe
- DecoderProcess: ffmpeg child emitting raw rgb24 frames
- FrameIngestor: Reassembles fixed-size frames from arbitrary chunks
- FrameQueue: Bounded FIFO handoff to the playback scheduler

Example:
    from asciiplay.streams import DecoderProcess, FrameIngestor, FrameQueue, probe_video

    info = probe_video("movie.mp4")
    queue = FrameQueue(capacity=60)
    ingestor = FrameIngestor(dimensions.frame_size, queue)
    with DecoderProcess("movie.mp4", dimensions) as decoder:
        ingestor.consume(decoder.stdout)
"""

from .decoder import DecoderProcess, build_decoder_command
from .frame_queue import FrameQueue
from .ingest import FrameIngestor
from .probe import VideoInfo, parse_frame_rate, parse_probe_output, probe_video

__all__ = [
    "DecoderProcess",
    "build_decoder_command",
    "FrameQueue",
    "FrameIngestor",
    "VideoInfo",
    "parse_frame_rate",
    "parse_probe_output",
    "probe_video",
]
