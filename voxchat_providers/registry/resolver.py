"""Dialect and address resolution for a model descriptor.

Pure functions: the same descriptor and credentials always resolve to the
same dialect and base URL, and nothing here touches the network.

Address precedence (first present wins):
    1. ``descriptor.endpoint_override``
    2. ``credentials.base_url_override``
    3. the local default, for ``locality == "local"``
    4. the provider's compiled-in default (none for ``other`` and ``local``)
"""

from __future__ import annotations

from typing import Optional

from ..base.errors import UnsupportedProviderError
from ..base.models import CompletionCredentials, ModelDescriptor
from ..config.defaults import LOCAL_DEFAULT_BASE_URL
from .provider_kind import PROVIDER_SPECS, Dialect, parse_provider_kind


def _override_address(
    descriptor: ModelDescriptor, credentials: Optional[CompletionCredentials]
) -> Optional[str]:
    if descriptor.endpoint_override:
        return descriptor.endpoint_override
    if credentials is not None and credentials.base_url_override:
        return credentials.base_url_override
    return None


def resolve_dialect(
    descriptor: ModelDescriptor, credentials: Optional[CompletionCredentials] = None
) -> Dialect:
    """Return the wire dialect for ``descriptor``.

    An unrecognized provider kind is served as ``LOCAL_GENERIC`` when an
    override address exists and rejected otherwise.
    """
    kind = parse_provider_kind(descriptor.provider_kind)
    if kind is not None:
        return PROVIDER_SPECS[kind].dialect
    if _override_address(descriptor, credentials):
        return Dialect.LOCAL_GENERIC
    raise UnsupportedProviderError(
        f"unrecognized provider kind '{descriptor.provider_kind}' and no endpoint override",
        provider=descriptor.provider_kind or "-",
        model=descriptor.id,
    )


def resolve_address(
    descriptor: ModelDescriptor, credentials: Optional[CompletionCredentials] = None
) -> str:
    """Return the base URL (or full endpoint URL) to call for ``descriptor``.

    Raises:
        UnsupportedProviderError: unknown kind without override, or no
            address resolvable at all (a cloud ``other`` or ``local`` model).
    """
    if override := _override_address(descriptor, credentials):
        return override
    kind = parse_provider_kind(descriptor.provider_kind)
    if kind is None:
        raise UnsupportedProviderError(
            f"unrecognized provider kind '{descriptor.provider_kind}' and no endpoint override",
            provider=descriptor.provider_kind or "-",
            model=descriptor.id,
        )
    if descriptor.is_local:
        return LOCAL_DEFAULT_BASE_URL
    default = PROVIDER_SPECS[kind].default_base_url
    if default is None:
        raise UnsupportedProviderError(
            f"no base address configured for provider '{kind.value}'",
            provider=kind.value,
            model=descriptor.id,
        )
    return default


def requires_secret(descriptor: ModelDescriptor) -> bool:
    """Whether a call for ``descriptor`` must carry a secret key.

    Only cloud models of an authenticated kind without an endpoint override
    need one; local models and overridden endpoints make auth optional.
    """
    if descriptor.is_local or descriptor.endpoint_override:
        return False
    kind = parse_provider_kind(descriptor.provider_kind)
    return kind is not None and PROVIDER_SPECS[kind].requires_secret


__all__ = ["resolve_dialect", "resolve_address", "requires_secret"]
