"""Environment variables holding provider secret keys.

Each provider kind has one canonical ``<KIND>_API_KEY`` variable and may
accept aliases (``CLAUDE_API_KEY`` for Anthropic). Lookups return ``None``
instead of raising; deciding whether a key is required is the registry's job.
"""
from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    kind: f"{kind.upper()}_API_KEY" for kind in ("openai", "anthropic", "local", "other")
}

# Accepted after the canonical name, in order.
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "anthropic": ("CLAUDE_API_KEY",),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """Whether ``val`` looks like a sample value rather than a real secret.

    Matches (case-insensitive) values containing ``placeholder``,
    ``changeme`` or ``example``, and values starting with ``test_``.
    """
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(m in lowered for m in _PLACEHOLDER_MARKERS)


def get_env_var_name(provider: str) -> Optional[str]:
    return ENV_MAP.get(provider.lower()) if provider else None


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield the variable names checked for ``provider``, canonical first."""
    kind = (provider or "").lower()
    canonical = ENV_MAP.get(kind)
    if canonical:
        yield canonical
    yield from (alias for alias in ENV_ALIASES.get(kind, ()) if alias != canonical)


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(key, variable)`` for the first usable candidate, else ``(None, None)``."""
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_name",
    "get_env_var_candidates",
    "resolve_provider_key",
]
