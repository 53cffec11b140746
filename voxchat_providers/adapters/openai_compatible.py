"""OpenAI chat-completions dialect.

Wire shapes:
    request   ``{"messages", "model", "temperature"?, "max_tokens"?, "stream"}``
    response  ``choices[0].message.content``
    stream    ``data: {"choices": [{"delta": {"content": ...}}]}`` lines,
              terminated by ``data: [DONE]``
"""

from __future__ import annotations

from typing import Any, Optional, Tuple

from ..base.errors import TransportError
from ..base.models import (
    CompletionCredentials,
    NormalizedChunk,
    NormalizedRequest,
    NormalizedResult,
    StreamSignal,
)
from ..config.defaults import OPENAI_CHAT_PATH, OPENAI_STREAM_SENTINEL
from ..registry import Dialect
from .base import Headers, ProtocolAdapter


def _first_choice(data: Any) -> Optional[dict]:
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
        return None
    return choices[0]


class OpenAICompatibleAdapter(ProtocolAdapter):
    """Adapter for OpenAI and servers cloning its chat-completions API."""

    dialect = Dialect.OPENAI_COMPATIBLE
    path = OPENAI_CHAT_PATH

    def encode_request(
        self, request: NormalizedRequest, credentials: Optional[CompletionCredentials] = None
    ) -> Tuple[Headers, bytes]:
        headers = self._base_headers(request)
        if credentials is not None and credentials.secret_key:
            headers["Authorization"] = f"Bearer {credentials.secret_key}"
        return headers, self._dump(request.to_dict())

    def decode_response(self, body: bytes) -> NormalizedResult:
        data = self._load_json(body)
        choice = _first_choice(data)
        message = choice.get("message") if choice else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise self._malformed("choices[0].message.content")
        return NormalizedResult(text=content)

    def decode_stream_event(self, line: str) -> NormalizedChunk | StreamSignal:
        payload = self.sse_payload(line)
        if payload is None or payload == "":
            return StreamSignal.SKIP
        if payload == OPENAI_STREAM_SENTINEL:
            return StreamSignal.END_OF_STREAM
        data = self._load_json(payload)
        if isinstance(data, dict) and "error" in data and not data.get("choices"):
            err = data["error"]
            detail = err.get("message") if isinstance(err, dict) else str(err)
            raise TransportError(
                f"stream error event: {detail}", reason="upstream", provider=self.name
            )
        choice = _first_choice(data)
        delta = choice.get("delta") if choice else None
        text = delta.get("content") if isinstance(delta, dict) else None
        if isinstance(text, str) and text:
            return NormalizedChunk(text=text)
        return StreamSignal.SKIP


__all__ = ["OpenAICompatibleAdapter"]
