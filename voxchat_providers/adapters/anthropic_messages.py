"""Anthropic messages dialect.

Differences from the OpenAI shapes:
    - auth via ``x-api-key`` plus a pinned ``anthropic-version`` header;
    - body is ``{model, messages, max_tokens}``; temperature and the stream
      flag are not forwarded, streaming is requested with the Accept header;
    - system turns are not allowed in ``messages`` and travel as a
      top-level ``system`` string instead;
    - the reply is a list of content blocks, and stream events are typed
      (``content_block_delta``, ``message_stop``, ``error``, ...).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..base.errors import TransportError
from ..base.models import (
    CompletionCredentials,
    NormalizedChunk,
    NormalizedRequest,
    NormalizedResult,
    StreamSignal,
)
from ..config.defaults import (
    ANTHROPIC_API_VERSION,
    ANTHROPIC_MESSAGES_PATH,
    DEFAULT_MAX_OUTPUT_TOKENS,
)
from ..registry import Dialect
from .base import Headers, ProtocolAdapter


class AnthropicMessagesAdapter(ProtocolAdapter):
    """Adapter for the Anthropic ``/v1/messages`` API."""

    dialect = Dialect.ANTHROPIC_MESSAGES
    path = ANTHROPIC_MESSAGES_PATH

    def encode_request(
        self, request: NormalizedRequest, credentials: Optional[CompletionCredentials] = None
    ) -> Tuple[Headers, bytes]:
        headers = self._base_headers(request)
        headers["anthropic-version"] = ANTHROPIC_API_VERSION
        if credentials is not None and credentials.secret_key:
            headers["x-api-key"] = credentials.secret_key

        system_parts: List[str] = []
        messages: List[Dict[str, str]] = []
        for turn in request.turns:
            if turn.role == "system":
                system_parts.append(turn.content)
            else:
                messages.append(turn.to_dict())
        body: Dict[str, Any] = {
            "model": request.model_id,
            "messages": messages,
            "max_tokens": request.max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
        }
        if system_parts:
            body["system"] = "\n\n".join(system_parts)
        return headers, self._dump(body)

    def decode_response(self, body: bytes) -> NormalizedResult:
        data = self._load_json(body)
        blocks = data.get("content") if isinstance(data, dict) else None
        if not isinstance(blocks, list):
            raise self._malformed("content")
        texts = [
            b["text"]
            for b in blocks
            if isinstance(b, dict) and b.get("type") == "text" and isinstance(b.get("text"), str)
        ]
        return NormalizedResult(text="".join(texts))

    def decode_stream_event(self, line: str) -> NormalizedChunk | StreamSignal:
        payload = self.sse_payload(line)
        if not payload:
            return StreamSignal.SKIP
        data = self._load_json(payload)
        if not isinstance(data, dict):
            return StreamSignal.SKIP
        kind = data.get("type")
        if kind == "content_block_delta":
            delta = data.get("delta")
            text = delta.get("text") if isinstance(delta, dict) else None
            if isinstance(text, str) and text:
                return NormalizedChunk(text=text)
            return StreamSignal.SKIP
        if kind == "message_stop":
            return StreamSignal.END_OF_STREAM
        if kind == "error":
            err = data.get("error")
            detail = err.get("message") if isinstance(err, dict) else str(err)
            raise TransportError(
                f"stream error event: {detail}", reason="upstream", provider=self.name
            )
        return StreamSignal.SKIP


__all__ = ["AnthropicMessagesAdapter"]
