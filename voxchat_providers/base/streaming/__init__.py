"""Streaming package for the gateway.

Exposes the line buffer, the stream decoder and the per-call lifecycle state
machine under a single namespace.
"""

from .line_buffer import LineBuffer
from .lifecycle import StreamLifecycle, StreamState
from .stream_decoder import StreamDecoder, accumulate_chunks

__all__ = [
    "LineBuffer",
    "StreamDecoder",
    "accumulate_chunks",
    "StreamLifecycle",
    "StreamState",
]
