"""
Error classification helpers mapping HTTP statuses and exceptions to
normalized ErrorCode values.
"""
from __future__ import annotations

from typing import Dict

import httpx

from .error_code import ErrorCode
from .provider_error import GatewayError


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
    529: ErrorCode.UNAVAILABLE,
}


def classify_status(status_code: int) -> ErrorCode:
    """Map an HTTP status code onto an :class:`ErrorCode`.

    Unlisted 5xx statuses fall back to ``SERVER_ERROR``; anything else that is
    not in the table is ``UNKNOWN``.
    """
    if status_code in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status_code]
    if 500 <= status_code < 600:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. GatewayError passthrough.
        2. Timeout exceptions (builtin and httpx).
        3. HTTP status carried by an ``httpx.HTTPStatusError``.
        4. Remaining httpx transport failures as ``TRANSIENT``.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, GatewayError):
        return exc.code
    if isinstance(exc, (TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.HTTPStatusError):
        return classify_status(exc.response.status_code)
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    return ErrorCode.UNKNOWN


__all__ = [
    "classify_status",
    "classify_exception",
    "_HTTP_STATUS_MAP",
]
