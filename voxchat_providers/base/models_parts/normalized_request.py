"""
NormalizedRequest: the canonical, dialect-independent gateway input.

Protocol adapters map this envelope onto backend wire shapes. The same
envelope drives blocking and streaming calls; only ``stream`` differs.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional, Tuple

from .chat_turn import ChatTurn


@dataclass(frozen=True)
class NormalizedRequest:
    """Normalized chat request.

    Attributes:
        turns: Ordered conversation turns.
        model_id: Target model identifier.
        temperature: Sampling temperature, omitted from the wire when ``None``.
        max_output_tokens: Completion token cap, omitted when ``None``.
        stream: Whether incremental delivery is requested.

    Methods:
        to_dict: OpenAI-style envelope with unset optional fields dropped.
        with_stream: Copy with the ``stream`` flag replaced.
    """

    turns: Tuple[ChatTurn, ...]
    model_id: str
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None
    stream: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Return the envelope in its canonical wire form."""
        out: Dict[str, Any] = {
            "messages": [t.to_dict() for t in self.turns],
            "model": self.model_id,
        }
        if self.temperature is not None:
            out["temperature"] = self.temperature
        if self.max_output_tokens is not None:
            out["max_tokens"] = self.max_output_tokens
        out["stream"] = self.stream
        return out

    def with_stream(self, stream: bool) -> "NormalizedRequest":
        return replace(self, stream=stream)


__all__ = ["NormalizedRequest"]
