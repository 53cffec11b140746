"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `voxchat_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import (
    GatewayError,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialsError,
    TransportError,
    UnsupportedProviderError,
)
from .classification import classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "GatewayError",
    "UnsupportedProviderError",
    "MissingCredentialsError",
    "TransportError",
    "HttpStatusError",
    "MalformedResponseError",
    "classify_exception",
    "classify_status",
]
