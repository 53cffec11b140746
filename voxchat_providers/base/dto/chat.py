"""
Pydantic DTOs and validators for inbound chat payloads.

Purpose
-------
This module defines strict, dialect-agnostic request DTOs using Pydantic to
validate inbound chat payloads (HTTP bridge bodies, CLI settings) before they
are turned into domain values. It enforces roles, content constraints, and
the numeric bounds of generation parameters to catch issues early.

External dependencies: Pydantic only (no network calls). No timeouts.

Fallback semantics: Not applicable. Validation either succeeds or raises a
`pydantic.ValidationError`. Callers handle this at the controller edge and
return an appropriate 4xx response in an HTTP server context.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from ...config.defaults import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_STREAMING,
    DEFAULT_TEMPERATURE,
)


Role = Literal["system", "user", "assistant"]


class TurnDTO(BaseModel):
    """A chat turn with a non-empty text body."""

    role: Role
    content: str

    @model_validator(mode="after")
    def _validate_content(self) -> "TurnDTO":
        """Reject blank content; backends refuse empty messages."""
        if self.content.strip() == "":
            raise ValueError("content string must be non-empty")
        return self


class GenerationParameters(BaseModel):
    """Generation settings applied to a request.

    Attributes:
        temperature: Sampling temperature within ``[0, 2]``.
        max_output_tokens: Completion token cap, strictly positive.
        streaming_requested: Whether the caller wants incremental delivery.

    Pure configuration with no lifecycle; defaults mirror the chat client's
    advanced settings.
    """

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0)
    max_output_tokens: int = Field(default=DEFAULT_MAX_OUTPUT_TOKENS, gt=0)
    streaming_requested: bool = DEFAULT_STREAMING


class ChatBodyDTO(BaseModel):
    """Body accepted by the HTTP bridge chat endpoints.

    Parameters:
        model: Catalog model id, or any id when ``provider_kind`` is given.
        messages: Ordered conversation (non-empty; first turn system/user).
        temperature: Optional override within ``[0, 2]``.
        max_tokens: Optional positive completion cap.
        provider_kind: Describes an uncatalogued model together with
            ``locality`` and ``endpoint``.
        api_key: Optional per-call secret; falls back to configuration.
        base_url: Optional per-call base URL override.
    """

    model: str = Field(..., min_length=1)
    messages: List[TurnDTO] = Field(..., min_length=1)
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, gt=0)
    provider_kind: Optional[str] = None
    locality: Literal["cloud", "local"] = "cloud"
    endpoint: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    @model_validator(mode="after")
    def _validate_sequence(self) -> "ChatBodyDTO":
        """Ensure the first turn is from 'system' or 'user'."""
        if self.messages and self.messages[0].role not in ("system", "user"):
            raise ValueError("first message must be from 'system' or 'user'")
        return self


__all__ = [
    "Role",
    "TurnDTO",
    "GenerationParameters",
    "ChatBodyDTO",
]
