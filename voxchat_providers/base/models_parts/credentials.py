"""
CompletionCredentials: per-call secret and address override.

The gateway never persists credentials; sourcing them from settings is the
job of `voxchat_providers.config.load_credentials` or the caller.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class CompletionCredentials:
    """Secret key and optional base URL override supplied for one call."""

    secret_key: Optional[str] = None
    base_url_override: Optional[str] = None

    def __repr__(self) -> str:
        masked = "***" if self.secret_key else None
        return f"CompletionCredentials(secret_key={masked!r}, base_url_override={self.base_url_override!r})"


__all__ = ["CompletionCredentials"]
