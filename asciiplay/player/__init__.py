"""Playback components.

This package provides the consumer side of playback:

- PlaybackScheduler: Paces rendering at the source frame rate
- PlaybackState: IDLE / PLAYING / STOPPED state machine
- TerminalPlayer: Orchestrates a full playback session
- KeyboardHandler: Key bindings via blessed (q / Escape to quit)
"""

from .keyboard import KeyboardHandler, KeyboardListener, quit_handler
from .scheduler import PlaybackScheduler, PlaybackState, TRANSITIONS
from .terminal_player import PlaybackResult, TerminalPlayer

__all__ = [
    # Scheduling
    "PlaybackScheduler",
    "PlaybackState",
    "TRANSITIONS",
    # Session
    "PlaybackResult",
    "TerminalPlayer",
    # Controls
    "KeyboardHandler",
    "KeyboardListener",
    "quit_handler",
]
