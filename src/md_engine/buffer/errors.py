"""Error types raised by the text store and editing session."""

from __future__ import annotations

from os import PathLike
from typing import Optional


class TextStoreError(RuntimeError):
    """Base class for text store contract violations."""


class OutOfRangeError(TextStoreError, IndexError):
    """Raised when an insert targets a byte position outside ``[0, length]``."""

    def __init__(self, message: str, *, position: int, length: int) -> None:
        super().__init__(message)
        self.position = position
        self.length = length


class DocumentIOError(OSError):
    """Raised when a document cannot be read from or written to disk."""

    def __init__(self, message: str, *, path: Optional[str | PathLike[str]] = None) -> None:
        super().__init__(message)
        self.path = path
