"""Exception types shared across the dashboard."""

from __future__ import annotations


class HomeboardError(Exception):
    """Base class for dashboard errors."""


class FetchError(HomeboardError):
    """Raised when an HTTP JSON fetch does not produce a usable result."""


class NetworkError(FetchError):
    """Raised when a request cannot be completed or returns a non-200 status."""


class DecodeError(FetchError):
    """Raised when a response body is not JSON or not the expected shape."""


class FatalInitError(HomeboardError):
    """Raised when the terminal or the light bridge cannot be initialized."""


__all__ = ["HomeboardError", "FetchError", "NetworkError", "DecodeError", "FatalInitError"]
