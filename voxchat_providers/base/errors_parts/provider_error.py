"""
Structured gateway error types.

Every failure the completion gateway surfaces is a `GatewayError` carrying a
normalized `ErrorCode`. The concrete subclasses mirror the failure modes a
caller has to tell apart: no resolvable backend, missing credentials, network
or timeout trouble, a non-2xx HTTP status, and a response body that does not
match the dialect schema.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class GatewayError(Exception):
    """Represents a structured gateway error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider kind where the error originated (e.g., ``"openai"``).
        model: Optional model id associated with the failure.
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    provider: str = "-"
    model: Optional[str] = None
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


class UnsupportedProviderError(GatewayError):
    """No dialect or address could be resolved for the selected model."""

    def __init__(self, message: str, *, provider: str = "-", model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.UNSUPPORTED, message=message, provider=provider, model=model)


class MissingCredentialsError(GatewayError):
    """A cloud backend was selected without the secret key its auth scheme needs."""

    def __init__(self, message: str, *, provider: str = "-", model: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.AUTH, message=message, provider=provider, model=model)


_TRANSPORT_CODES = {
    "timeout": ErrorCode.TIMEOUT,
    "aborted": ErrorCode.CANCELLED,
    "network": ErrorCode.TRANSIENT,
    "upstream": ErrorCode.TRANSIENT,
}


class TransportError(GatewayError):
    """Network failure, timeout, abort, or an error event sent mid-stream.

    ``reason`` is one of ``"network"``, ``"timeout"``, ``"aborted"`` or
    ``"upstream"``.
    """

    def __init__(
        self,
        message: str,
        *,
        reason: str = "network",
        provider: str = "-",
        model: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=_TRANSPORT_CODES.get(reason, ErrorCode.TRANSIENT),
            message=message,
            provider=provider,
            model=model,
            raw=raw,
        )
        self.reason = reason


class HttpStatusError(GatewayError):
    """The backend answered with a non-2xx status.

    ``status_code`` is kept so callers can distinguish auth failures,
    rate limiting and server errors; ``detail`` holds a short body excerpt.
    """

    def __init__(
        self,
        status_code: int,
        *,
        detail: str = "",
        provider: str = "-",
        model: Optional[str] = None,
    ) -> None:
        from .classification import classify_status

        super().__init__(
            code=classify_status(status_code),
            message=f"HTTP {status_code}" + (f": {detail}" if detail else ""),
            provider=provider,
            model=model,
        )
        self.status_code = status_code
        self.detail = detail


class MalformedResponseError(GatewayError):
    """The response body did not match the expected dialect schema."""

    def __init__(
        self,
        message: str,
        *,
        provider: str = "-",
        model: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, provider=provider, model=model, raw=raw)


__all__ = [
    "GatewayError",
    "UnsupportedProviderError",
    "MissingCredentialsError",
    "TransportError",
    "HttpStatusError",
    "MalformedResponseError",
]
