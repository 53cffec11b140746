"""Provider registry: which dialect and address serve a model.

Public surface for :mod:`.provider_kind` (kinds, dialects, the provider
table) and :mod:`.resolver` (pure resolution functions).
"""

from .provider_kind import (
    LEGACY_LOCAL_TAGS,
    PROVIDER_SPECS,
    Dialect,
    ProviderKind,
    ProviderSpec,
    parse_provider_kind,
)
from .resolver import requires_secret, resolve_address, resolve_dialect

__all__ = [
    "ProviderKind",
    "Dialect",
    "ProviderSpec",
    "PROVIDER_SPECS",
    "LEGACY_LOCAL_TAGS",
    "parse_provider_kind",
    "resolve_dialect",
    "resolve_address",
    "requires_secret",
]
