"""callbridge exception hierarchy."""

from typing import Any, Optional


class CallbridgeError(Exception):
    """Base exception for all callbridge operations."""

    def __init__(self, message: str, detail: Optional[str] = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


class UsageError(CallbridgeError, RuntimeError):
    """Programmer error, e.g. a completion gate triggered before anyone awaited it."""
    pass


class UpstreamError(CallbridgeError):
    """A callback reported an error value that is not an exception."""

    def __init__(self, error: Any, message: Optional[str] = None):
        self.error = error
        super().__init__(message or f"Callback reported error: {error!r}")


class EmitterError(UpstreamError):
    """An emitter fired an "error" event with a non-exception payload."""

    def __init__(self, error: Any, event: str = "error"):
        self.event = event
        super().__init__(error, f"Emitter fired {event!r} with: {error!r}")
