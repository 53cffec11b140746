"""Unified gateway error taxonomy public surface.

This module re-exports the implementations under
``voxchat_providers.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import (
    GatewayError,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialsError,
    TransportError,
    UnsupportedProviderError,
)
from .errors_parts.classification import classify_exception, classify_status

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
