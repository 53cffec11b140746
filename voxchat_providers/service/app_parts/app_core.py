"""Shared helpers for the HTTP bridge routes.

Turns a validated :class:`ChatBodyDTO` into the three gateway inputs
(request, descriptor, credentials) and maps gateway errors onto HTTP
responses. Kept apart from ``app.py`` so the blocking and streaming routes
share one code path.
"""

from __future__ import annotations

from typing import Any, Dict, Tuple

from fastapi import HTTPException, Request

from ...base.dto import ChatBodyDTO, GenerationParameters
from ...base.errors import (
    GatewayError,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialsError,
    TransportError,
    UnsupportedProviderError,
)
from ...base.models import (
    CompletionCredentials,
    ModelDescriptor,
    NormalizedRequest,
)
from ...base.normalizer import build_normalized_request, turns_from_dicts
from ...config import load_credentials
from ...config.catalog import find_model
from ...config.defaults import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_TEMPERATURE
from ...gateway import CompletionGateway
from ...registry import parse_provider_kind


def get_gateway(request: Request) -> CompletionGateway:
    """FastAPI dependency returning the gateway owned by the application."""
    return request.app.state.gateway


def _descriptor_for(body: ChatBodyDTO) -> ModelDescriptor:
    if body.provider_kind:
        return ModelDescriptor(
            id=body.model,
            display_name=body.model,
            provider_kind=body.provider_kind.lower().strip(),
            locality=body.locality,
            endpoint_override=body.endpoint or None,
        )
    desc = find_model(body.model)
    if desc is None:
        raise UnsupportedProviderError(
            f"unknown model '{body.model}'; pass provider_kind to describe it", model=body.model
        )
    if body.endpoint:
        return ModelDescriptor(
            id=desc.id,
            display_name=desc.display_name,
            provider_kind=desc.provider_kind,
            locality=desc.locality,
            endpoint_override=body.endpoint,
        )
    return desc


def _credentials_for(descriptor: ModelDescriptor, body: ChatBodyDTO) -> CompletionCredentials:
    kind = parse_provider_kind(descriptor.provider_kind)
    overrides = {"api_key": body.api_key, "base_url": body.base_url}
    if kind is None:
        return CompletionCredentials(secret_key=body.api_key, base_url_override=body.base_url)
    return load_credentials(kind.value, overrides)


def build_call(
    body: ChatBodyDTO, *, stream: bool
) -> Tuple[NormalizedRequest, ModelDescriptor, CompletionCredentials]:
    """Return ``(request, descriptor, credentials)`` for ``body``."""
    descriptor = _descriptor_for(body)
    params = GenerationParameters(
        temperature=body.temperature if body.temperature is not None else DEFAULT_TEMPERATURE,
        max_output_tokens=body.max_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
        streaming_requested=stream,
    )
    turns = turns_from_dicts(m.model_dump() for m in body.messages)
    request = build_normalized_request(turns, descriptor.id, params)
    return request, descriptor, _credentials_for(descriptor, body)


def status_for(err: GatewayError) -> int:
    """HTTP status the bridge answers with for ``err``."""
    if isinstance(err, UnsupportedProviderError):
        return 400
    if isinstance(err, MissingCredentialsError):
        return 401
    if isinstance(err, TransportError):
        return 504 if err.reason == "timeout" else 502
    if isinstance(err, (HttpStatusError, MalformedResponseError)):
        return 502
    return 500


def error_detail(err: GatewayError) -> Dict[str, Any]:
    detail: Dict[str, Any] = {"code": err.code.value, "message": err.message}
    if isinstance(err, HttpStatusError):
        detail["upstream_status"] = err.status_code
    return detail


def http_error(err: GatewayError) -> HTTPException:
    return HTTPException(status_code=status_for(err), detail=error_detail(err))


__all__ = [
    "get_gateway",
    "build_call",
    "status_for",
    "error_detail",
    "http_error",
]
