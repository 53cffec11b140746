"""Local/generic dialect for self-hosted OpenAI-compatible servers.

Ollama, LM Studio, llama.cpp and similar servers accept the chat-completions
shapes but usually run without authentication, so the Authorization header
is only sent when a key was supplied explicitly.
"""

from __future__ import annotations

from ..registry import Dialect
from .openai_compatible import OpenAICompatibleAdapter


class LocalGenericAdapter(OpenAICompatibleAdapter):
    """OpenAI wire shapes with optional authentication."""

    dialect = Dialect.LOCAL_GENERIC


__all__ = ["LocalGenericAdapter"]
