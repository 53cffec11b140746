"""Protocol adapters, one per wire dialect.

``adapter_for`` is the only dispatch point over :class:`Dialect`; adding a
dialect means adding an enum member and a row in ``_ADAPTERS``.
"""

from __future__ import annotations

from typing import Dict, Type

from ..base.errors import UnsupportedProviderError
from ..registry import Dialect
from .anthropic_messages import AnthropicMessagesAdapter
from .base import ProtocolAdapter
from .local_generic import LocalGenericAdapter
from .openai_compatible import OpenAICompatibleAdapter


_ADAPTERS: Dict[Dialect, Type[ProtocolAdapter]] = {
    Dialect.OPENAI_COMPATIBLE: OpenAICompatibleAdapter,
    Dialect.ANTHROPIC_MESSAGES: AnthropicMessagesAdapter,
    Dialect.LOCAL_GENERIC: LocalGenericAdapter,
}


def adapter_for(dialect: Dialect) -> ProtocolAdapter:
    """Return a fresh adapter for ``dialect``.

    Raises:
        UnsupportedProviderError: for values outside the dialect enum.
    """
    klass = _ADAPTERS.get(dialect) if isinstance(dialect, Dialect) else None
    if klass is None:
        raise UnsupportedProviderError(f"no protocol adapter for dialect {dialect!r}")
    return klass()


__all__ = [
    "ProtocolAdapter",
    "OpenAICompatibleAdapter",
    "AnthropicMessagesAdapter",
    "LocalGenericAdapter",
    "adapter_for",
]
