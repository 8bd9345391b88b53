"""Keyboard controls for terminal playback using the blessed library."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from blessed import Terminal

logger = logging.getLogger(__name__)


class KeyboardHandler:
    """Dispatch key presses to bound handlers."""

    def __init__(self, terminal: Terminal):
        self.terminal = terminal
        self._bindings: dict[str, Callable[[], None]] = {}
        self._char_bindings: dict[str, Callable[[], None]] = {}

    def bind(self, key: str, handler: Callable[[], None]) -> None:
        """Bind a handler to a key.

        Key can be a key name (e.g., 'KEY_ESCAPE') or a character.
        """
        if key.startswith("KEY_"):
            self._bindings[key] = handler
        else:
            self._char_bindings[key] = handler

    def process(self, timeout: float = 0.05) -> bool:
        """Wait up to ``timeout`` for one key and dispatch it.

        Returns True if a bound handler ran.
        """
        key = self.terminal.inkey(timeout=timeout)
        if not key:
            return False

        if key.name and key.name in self._bindings:
            self._bindings[key.name]()
            return True

        char = str(key)
        if char in self._char_bindings:
            self._char_bindings[char]()
            return True

        return False


class KeyboardListener:
    """Poll a KeyboardHandler on a background thread in cbreak mode."""

    def __init__(self, handler: KeyboardHandler, poll_timeout: float = 0.05):
        self.handler = handler
        self.poll_timeout = poll_timeout
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name="keyboard", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        with self.handler.terminal.cbreak():
            while not self._stop.is_set():
                self.handler.process(timeout=self.poll_timeout)

    def stop(self) -> None:
        """Stop polling and leave cbreak mode."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            if self._thread.is_alive():
                logger.debug("Keyboard listener did not stop in time")
            self._thread = None


def quit_handler(terminal: Terminal, on_quit: Callable[[], None]) -> KeyboardHandler:
    """Create a handler where q, Q and Escape call ``on_quit``."""
    handler = KeyboardHandler(terminal)
    handler.bind("q", on_quit)
    handler.bind("Q", on_quit)
    handler.bind("KEY_ESCAPE", on_quit)
    return handler


__all__ = ["KeyboardHandler", "KeyboardListener", "quit_handler"]
