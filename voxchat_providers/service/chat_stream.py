"""
NDJSON encoding of a streamed completion for the HTTP bridge.

Each line is one JSON object:

    {"type": "delta" | "final" | "error", "delta": ..., "text": ..., "error": ...}

Invariants:
    - ``delta`` events carry one chunk, in arrival order;
    - exactly one terminal event follows: ``final`` with the full text, or
      ``error`` with the gateway error code and message.

Setup failures (unknown model, missing key) are raised before the response
starts so the route can still answer with a proper HTTP status.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator, Optional

from ..base.errors import GatewayError
from ..base.models import NormalizedChunk


def _line(
    event_type: str,
    *,
    delta: Optional[str] = None,
    text: Optional[str] = None,
    error: Optional[str] = None,
    code: Optional[str] = None,
) -> bytes:
    payload: Dict[str, Any] = {"type": event_type, "delta": delta, "text": text, "error": error}
    if code is not None:
        payload["code"] = code
    return (json.dumps(payload, ensure_ascii=False) + "\n").encode("utf-8")


def iter_ndjson(chunks: Iterator[NormalizedChunk]) -> Iterator[bytes]:
    """Yield NDJSON lines for ``chunks`` followed by one terminal event."""
    parts = []
    try:
        for chunk in chunks:
            parts.append(chunk.text)
            yield _line("delta", delta=chunk.text)
    except GatewayError as exc:
        yield _line("error", error=exc.message, code=exc.code.value)
        return
    yield _line("final", text="".join(parts))


__all__ = ["iter_ndjson"]
