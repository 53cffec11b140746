"""
Normalized outputs of the gateway: chunks, results and stream signals.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class NormalizedChunk:
    """One incremental unit of assistant output during streaming."""

    text: str


@dataclass(frozen=True)
class NormalizedResult:
    """The full assistant reply."""

    text: str


class StreamSignal(Enum):
    """Non-chunk outcomes of decoding one stream line.

    ``SKIP`` means the line carried nothing to deliver; ``END_OF_STREAM``
    means the backend signalled that no more events follow.
    """

    SKIP = "skip"
    END_OF_STREAM = "end_of_stream"


__all__ = ["NormalizedChunk", "NormalizedResult", "StreamSignal"]
