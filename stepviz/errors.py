"""Exception types raised by stepviz."""

from __future__ import annotations


class StepvizError(Exception):
    """Base class for stepviz errors."""


class EventDecodeError(StepvizError):
    """Raised when an inbound message cannot be decoded into an event."""

    def __init__(self, message: str, raw: str | bytes | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class TransportError(StepvizError):
    """Raised when the streaming transport fails."""
