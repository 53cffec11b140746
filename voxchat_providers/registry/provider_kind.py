"""Provider kinds, wire dialects and the compiled-in provider table."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..config.defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
)


class ProviderKind(str, Enum):
    """Backend families a model descriptor may name."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    LOCAL = "local"
    OTHER = "other"


class Dialect(str, Enum):
    """Closed set of wire protocols the gateway speaks."""

    OPENAI_COMPATIBLE = "openai_compatible"
    ANTHROPIC_MESSAGES = "anthropic_messages"
    LOCAL_GENERIC = "local_generic"


@dataclass(frozen=True)
class ProviderSpec:
    """Static facts about one provider kind.

    Attributes:
        kind: The provider kind described.
        dialect: Wire protocol used to talk to it.
        default_base_url: Compiled-in base URL, or ``None`` when the kind has
            no well-known address.
        requires_secret: Whether the dialect's auth scheme needs a key.
    """

    kind: ProviderKind
    dialect: Dialect
    default_base_url: Optional[str]
    requires_secret: bool


PROVIDER_SPECS: Dict[ProviderKind, ProviderSpec] = {
    ProviderKind.OPENAI: ProviderSpec(
        ProviderKind.OPENAI, Dialect.OPENAI_COMPATIBLE, OPENAI_DEFAULT_BASE_URL, True
    ),
    ProviderKind.ANTHROPIC: ProviderSpec(
        ProviderKind.ANTHROPIC, Dialect.ANTHROPIC_MESSAGES, ANTHROPIC_DEFAULT_BASE_URL, True
    ),
    # No compiled-in address; local-locality models fall back to the loopback.
    ProviderKind.LOCAL: ProviderSpec(ProviderKind.LOCAL, Dialect.LOCAL_GENERIC, None, False),
    ProviderKind.OTHER: ProviderSpec(ProviderKind.OTHER, Dialect.LOCAL_GENERIC, None, False),
}

# Model families the chat client ships as self-hosted entries.
LEGACY_LOCAL_TAGS = frozenset({"mistral", "meta", "lmstudio", "ollama"})


def parse_provider_kind(raw: str | None) -> Optional[ProviderKind]:
    """Map a raw provider tag onto :class:`ProviderKind` (None if unknown).

    Matching is case-insensitive; legacy local family tags map to ``LOCAL``.
    """
    name = (raw or "").lower().strip()
    if not name:
        return None
    if name in LEGACY_LOCAL_TAGS:
        return ProviderKind.LOCAL
    try:
        return ProviderKind(name)
    except ValueError:
        return None


__all__ = [
    "ProviderKind",
    "Dialect",
    "ProviderSpec",
    "PROVIDER_SPECS",
    "LEGACY_LOCAL_TAGS",
    "parse_provider_kind",
]
