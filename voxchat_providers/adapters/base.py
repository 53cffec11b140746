"""Protocol adapter contract shared by every wire dialect.

An adapter is a stateless translator between the normalized gateway values
and one backend wire protocol. It performs no I/O: the gateway owns the HTTP
exchange and hands bytes (or decoded stream lines) to the adapter.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple

from ..base.errors import MalformedResponseError
from ..base.models import (
    CompletionCredentials,
    NormalizedChunk,
    NormalizedRequest,
    NormalizedResult,
    StreamSignal,
)
from ..config.defaults import EVENT_STREAM_MEDIA_TYPE, SSE_DATA_PREFIX
from ..registry import Dialect


Headers = Dict[str, str]


class ProtocolAdapter(ABC):
    """Encode requests for, and decode responses from, one dialect.

    Subclasses set ``dialect`` and ``path`` and implement the three codec
    methods. ``endpoint_url`` and the JSON/SSE helpers are shared.
    """

    dialect: Dialect
    path: str

    @property
    def name(self) -> str:
        return self.dialect.value

    def endpoint_url(self, base_url: str) -> str:
        """Return the POST target for ``base_url``.

        A base that already ends with the dialect path is treated as a full
        endpoint URL and used verbatim.
        """
        base = base_url.rstrip("/")
        if base.endswith(self.path):
            return base
        return base + self.path

    @abstractmethod
    def encode_request(
        self, request: NormalizedRequest, credentials: Optional[CompletionCredentials] = None
    ) -> Tuple[Headers, bytes]:
        """Return ``(headers, body)`` for ``request`` in this dialect."""

    @abstractmethod
    def decode_response(self, body: bytes) -> NormalizedResult:
        """Decode a complete (non-streamed) response body."""

    @abstractmethod
    def decode_stream_event(self, line: str) -> NormalizedChunk | StreamSignal:
        """Decode one line of an event stream."""

    # ---- shared helpers -------------------------------------------------
    def _base_headers(self, request: NormalizedRequest) -> Headers:
        headers: Headers = {"Content-Type": "application/json"}
        if request.stream:
            headers["Accept"] = EVENT_STREAM_MEDIA_TYPE
        return headers

    @staticmethod
    def _dump(payload: Dict[str, Any]) -> bytes:
        return json.dumps(payload, ensure_ascii=False).encode("utf-8")

    def _load_json(self, raw: bytes | str) -> Any:
        """Parse ``raw`` as JSON or raise :class:`MalformedResponseError`."""
        try:
            return json.loads(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise MalformedResponseError(
                f"invalid JSON from {self.name} backend", provider=self.name, raw=exc
            ) from exc

    def _malformed(self, what: str) -> MalformedResponseError:
        return MalformedResponseError(f"{self.name} response missing {what}", provider=self.name)

    @staticmethod
    def sse_payload(line: str) -> Optional[str]:
        """Return the payload of a ``data:`` line, or None for other lines.

        The marker must start the line; only the line terminator is ignored.
        """
        raw = line.rstrip("\r\n")
        if not raw.startswith(SSE_DATA_PREFIX):
            return None
        return raw[len(SSE_DATA_PREFIX):].strip()


__all__ = ["ProtocolAdapter", "Headers"]
