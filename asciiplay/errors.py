"""Exception types raised by asciiplay.

All errors derive from AsciiPlayError so callers (the CLI in particular) can
map any failure of a playback session to a one-line diagnostic and exit code.
User cancellation is not an error and has no exception type.
"""

from __future__ import annotations


class AsciiPlayError(Exception):
    """Base class for all asciiplay errors."""


class InputNotFoundError(AsciiPlayError):
    """The input video file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"File not found: {path}")
        self.path = path


class MetadataError(AsciiPlayError):
    """The metadata probe could not run or produced unusable output."""


class DecodeError(AsciiPlayError):
    """The decoder could not be spawned or exited abnormally.

    :param message: Short description of the failure
    :param diagnostics: Last lines the decoder wrote to its error stream
    """

    def __init__(self, message: str, diagnostics: list[str] | None = None) -> None:
        super().__init__(message)
        self.diagnostics = list(diagnostics or [])


__all__ = [
    "AsciiPlayError",
    "InputNotFoundError",
    "MetadataError",
    "DecodeError",
]
