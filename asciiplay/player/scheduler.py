"""Frame pacing for terminal playback.

The scheduler drains the frame queue at the source frame rate. Frames may
arrive in bursts (the decoder runs faster than real time for small rasters)
or trickle in slower than real time; either way the next render is due one
frame interval after the previous render finished, also after an idle gap.

State machine::

    IDLE ----frame available----> PLAYING
    PLAYING --render, queue non-empty--> PLAYING
    PLAYING --render, queue empty------> IDLE
    IDLE / PLAYING --stream drained or cancelled--> STOPPED
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from typing import Callable

from ..streams.frame_queue import FrameQueue

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    """Playback state machine."""

    IDLE = "idle"
    PLAYING = "playing"
    STOPPED = "stopped"


TRANSITIONS: dict[PlaybackState, frozenset[PlaybackState]] = {
    PlaybackState.IDLE: frozenset({PlaybackState.PLAYING, PlaybackState.STOPPED}),
    PlaybackState.PLAYING: frozenset(
        {PlaybackState.PLAYING, PlaybackState.IDLE, PlaybackState.STOPPED}
    ),
    PlaybackState.STOPPED: frozenset(),
}


class PlaybackScheduler:
    """Render queued frames at a fixed interval derived from the frame rate.

    Example:
        scheduler = PlaybackScheduler(queue, renderer.draw, fps=25.0)
        rendered = scheduler.run()  # returns when the queue is drained
    """

    def __init__(
        self,
        queue: FrameQueue,
        render: Callable[[bytes], None],
        fps: float,
        cancel_event: threading.Event | None = None,
        clock: Callable[[], float] = time.perf_counter,
        poll_interval: float = 0.05,
    ) -> None:
        """
        Initialize the scheduler.

        :param queue: Frame source, closed by the producer at end of stream
        :param render: Called with each frame, in queue order
        :param fps: Source frame rate
        :param cancel_event: Set to stop playback before the next render
        :param clock: Monotonic clock in seconds
        :param poll_interval: Max seconds to block on an empty queue before
            checking for cancellation again
        """
        if not fps > 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self._queue = queue
        self._render = render
        self.fps = fps
        self._cancel = cancel_event if cancel_event is not None else threading.Event()
        self._clock = clock
        self.poll_interval = poll_interval
        self._state = PlaybackState.IDLE
        self._next_due: float | None = None
        self.frames_rendered = 0

    @property
    def state(self) -> PlaybackState:
        """Current playback state."""
        return self._state

    @property
    def frame_interval(self) -> float:
        """Seconds between two renders."""
        return 1.0 / self.fps

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        """Stop playback; no render starts after this returns."""
        self._cancel.set()

    def transition(self, new_state: PlaybackState) -> None:
        """Move to ``new_state``.

        :raises RuntimeError: If the transition is not allowed
        """
        if new_state not in TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Invalid playback transition: {self._state.value} -> {new_state.value}"
            )
        if new_state is not self._state:
            logger.debug(f"Playback {self._state.value} -> {new_state.value}")
        self._state = new_state

    def _wait_until(self, deadline: float) -> bool:
        """Sleep until ``deadline``. Returns False if cancelled meanwhile."""
        remaining = deadline - self._clock()
        while remaining > 0:
            if self._cancel.wait(remaining):
                return False
            remaining = deadline - self._clock()
        return not self._cancel.is_set()

    def step(self, frame: bytes) -> None:
        """Render one frame once it is due and update the state."""
        if self._state is PlaybackState.IDLE:
            self.transition(PlaybackState.PLAYING)

        if self._next_due is not None and not self._wait_until(self._next_due):
            return
        if self._cancel.is_set():
            return

        self._render(frame)
        self.frames_rendered += 1
        # Wall-clock delay after the draw, independent of decode progress
        self._next_due = self._clock() + self.frame_interval

        if len(self._queue) > 0:
            self.transition(PlaybackState.PLAYING)
        else:
            self.transition(PlaybackState.IDLE)

    def run(self) -> int:
        """Play until the queue is drained or playback is cancelled.

        :return: Number of frames rendered
        """
        if self._state is PlaybackState.STOPPED:
            raise RuntimeError("Scheduler has already stopped")
        try:
            while not self._cancel.is_set():
                frame = self._queue.get(timeout=self.poll_interval)
                if frame is None:
                    if self._queue.drained:
                        break
                    continue
                self.step(frame)
        finally:
            self.transition(PlaybackState.STOPPED)
        logger.debug(f"Scheduler stopped after {self.frames_rendered} frames")
        return self.frames_rendered


__all__ = ["PlaybackState", "PlaybackScheduler", "TRANSITIONS"]
