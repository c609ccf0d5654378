"""
errors.py - Typed failures raised by the banner library.

Every fatal error carries the path and operation that failed so callers can
log or report it without re-deriving context. Colour fallbacks are not errors:
they are announced with DegenerateInputWarning and the run continues.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class BannerError(Exception):
    """Base class for all adbanner failures."""


class DecodeError(BannerError, OSError):
    """A source image is missing, unreadable or in an unsupported codec."""

    def __init__(self, path: Union[str, Path], operation: str = "decode", reason: str = "") -> None:
        self.path = Path(path)
        self.operation = operation
        self.reason = reason
        message = f"{operation} failed for {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class FontError(BannerError, OSError):
    """The caption font could not be loaded."""

    def __init__(self, path: Optional[Union[str, Path]], reason: str = "") -> None:
        self.path = Path(path) if path else None
        self.reason = reason
        message = f"could not load font {self.path or '<unset>'}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class StorageError(BannerError, OSError):
    """The persistence sink refused the write."""

    def __init__(self, path: Union[str, Path], reason: str = "") -> None:
        self.path = Path(path)
        self.reason = reason
        message = f"could not store {self.path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DegenerateInputWarning(UserWarning):
    """No qualifying colour was found; a documented fallback colour is used."""
