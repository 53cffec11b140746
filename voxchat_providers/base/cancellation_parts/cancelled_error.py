"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a caller-driven cancellation is observed.

    The gateway converts it into ``TransportError(reason="aborted")`` at its
    boundary; it only escapes from direct token use.
    """


__all__ = ["CancelledError"]
