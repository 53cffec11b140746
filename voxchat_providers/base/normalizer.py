"""Request normalization.

Turns the conversation and generation settings held by the chat client into
the single :class:`NormalizedRequest` value the gateway accepts. Both helpers
are total: they never raise for well-typed input and perform no I/O.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Sequence

from .dto.chat import GenerationParameters
from .models import ROLES, ChatTurn, NormalizedRequest


def build_normalized_request(
    turns: Sequence[ChatTurn],
    model_id: str,
    params: Optional[GenerationParameters] = None,
) -> NormalizedRequest:
    """Build the canonical request for ``model_id``.

    Turns are copied in order; without ``params`` the optional generation
    fields stay unset and streaming is off.
    """
    if params is None:
        return NormalizedRequest(turns=tuple(turns), model_id=model_id)
    return NormalizedRequest(
        turns=tuple(turns),
        model_id=model_id,
        temperature=params.temperature,
        max_output_tokens=params.max_output_tokens,
        stream=params.streaming_requested,
    )


def turns_from_dicts(items: Iterable[Mapping[str, Any]]) -> List[ChatTurn]:
    """Convert ``{role, content}`` mappings into turns.

    Unknown roles are mapped to ``"user"``; missing content becomes ``""``.
    """
    out: List[ChatTurn] = []
    for item in items:
        role = str(item.get("role") or "user").lower()
        if role not in ROLES:
            role = "user"
        out.append(ChatTurn(role=role, content=str(item.get("content") or "")))  # type: ignore[arg-type]
    return out


__all__ = ["build_normalized_request", "turns_from_dicts"]
