"""Decoding of server-sent event streams into normalized chunks.

Backends stream newline-delimited ``data: <json>`` events. The decoder
re-assembles lines across network reads with :class:`LineBuffer` and lets the
protocol adapter of the call interpret each line.

Leniency rules:
    - blank lines and non-``data:`` lines are skipped (adapter returns SKIP);
    - a data line whose JSON does not parse is logged as
      ``stream.decode_error`` and skipped;
    - events without text are skipped;
    - the end-of-stream signal stops decoding before any further line is
      consulted, even lines already buffered.

Any other exception raised by the adapter (e.g. a ``TransportError`` for an
error event) propagates to the caller.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from ..errors import MalformedResponseError
from ..log_support import LogContext
from ..logging import get_logger, normalized_log_event
from ..models import NormalizedChunk, NormalizedResult, StreamSignal
from .line_buffer import LineBuffer

if TYPE_CHECKING:  # pragma: no cover - typing only
    from ...adapters.base import ProtocolAdapter

# Longest excerpt of an undecodable line kept in the log.
_LINE_EXCERPT_CHARS = 200


class StreamDecoder:
    """Turn raw response bytes into :class:`NormalizedChunk` values.

    One decoder serves one call; it is restartable (a new decoder per call)
    but not resumable.
    """

    def __init__(
        self,
        adapter: "ProtocolAdapter",
        logger: Optional[logging.Logger] = None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self._adapter = adapter
        self._logger = logger or get_logger("voxchat.stream")
        self._ctx = ctx
        self.ended = False
        self.skipped_lines = 0

    def _decode_line(self, line: str) -> NormalizedChunk | StreamSignal:
        if not line.strip():
            return StreamSignal.SKIP
        try:
            return self._adapter.decode_stream_event(line)
        except MalformedResponseError as exc:
            self.skipped_lines += 1
            normalized_log_event(
                self._logger,
                "stream.decode_error",
                self._ctx,
                phase="decode",
                error_code=exc.code.value,
                level=logging.WARNING,
                line=line[:_LINE_EXCERPT_CHARS],
                error=exc.message,
            )
            return StreamSignal.SKIP

    def _lines(self, byte_chunks: Iterable[bytes]) -> Iterator[str]:
        buffer = LineBuffer()
        for data in byte_chunks:
            yield from buffer.feed(data)
        yield from buffer.flush()

    def decode(self, byte_chunks: Iterable[bytes]) -> Iterator[NormalizedChunk]:
        """Yield chunks decoded from ``byte_chunks`` in arrival order."""
        for line in self._lines(byte_chunks):
            result = self._decode_line(line)
            if result is StreamSignal.END_OF_STREAM:
                self.ended = True
                return
            if isinstance(result, NormalizedChunk) and result.text:
                yield result


def accumulate_chunks(chunks: Iterable[NormalizedChunk]) -> NormalizedResult:
    """Concatenate chunk texts into the full reply."""
    return NormalizedResult(text="".join(c.text for c in chunks))


__all__ = ["StreamDecoder", "accumulate_chunks"]
