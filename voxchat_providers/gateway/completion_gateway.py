"""Completion gateway: executes normalized requests against any backend.

Purpose:
- Resolve dialect and address for a model, encode the request with the
  matching protocol adapter, perform exactly one POST and decode the reply,
  either as one :class:`NormalizedResult` or as a stream of chunks.

External dependencies:
- ``httpx`` synchronous client. The client is injectable (tests pass one
  built on ``httpx.MockTransport``); otherwise the pooled client from
  :mod:`voxchat_providers.base.http` is used.

Timeout strategy:
- One overall timeout (``timeout_seconds`` or the configured request
  timeout) starts a wall-clock :class:`Deadline` before the POST. The httpx
  phase timeouts of the call are set to what is left of it, and every body
  read (error bodies included) is checked against it, for blocking and
  streaming calls alike. A read already in progress is bounded by the httpx
  read timeout, so a call ends at most one read timeout past the deadline.
  Expiry surfaces as ``TransportError(reason="timeout")``.

Failure semantics:
- No retries, no fallback between providers. Setup errors are raised before
  any I/O; HTTP failures surface as ``TransportError`` / ``HttpStatusError``;
  undecodable replies as ``MalformedResponseError``. Streaming tolerates
  undecodable lines but nothing else.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import closing
from dataclasses import dataclass
from typing import Callable, Iterator, Optional

import httpx

from ..adapters import ProtocolAdapter, adapter_for
from ..base.cancellation import CancellationToken, CancelledError
from ..base.errors import (
    GatewayError,
    HttpStatusError,
    MissingCredentialsError,
    TransportError,
)
from ..base.http import get_httpx_client
from ..base.log_support import LogContext
from ..base.logging import get_logger, normalized_log_event
from ..base.models import (
    CompletionCredentials,
    ModelDescriptor,
    NormalizedChunk,
    NormalizedRequest,
    NormalizedResult,
)
from ..base.streaming import StreamDecoder, StreamLifecycle, StreamState
from ..base.timeouts import Deadline, get_timeout_config
from ..config.defaults import ERROR_DETAIL_MAX_CHARS
from ..registry import requires_secret, resolve_address, resolve_dialect


@dataclass(frozen=True)
class _PreparedCall:
    """Everything needed to perform one exchange; built before any I/O."""

    adapter: ProtocolAdapter
    url: str
    headers: dict
    body: bytes
    ctx: LogContext


# Floor for httpx phase timeouts once the deadline is (nearly) spent.
_MIN_PHASE_TIMEOUT = 0.001


def _excerpt(body: bytes) -> str:
    return body.decode("utf-8", errors="replace").strip()[:ERROR_DETAIL_MAX_CHARS]


class CompletionGateway:
    """Blocking and streaming chat completions over every supported dialect.

    Instances hold no per-call state and may serve concurrent calls.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout_seconds: Optional[float] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._client = client
        self._timeout_seconds = timeout_seconds
        self._logger = logger or get_logger("voxchat.gateway")

    # ---- setup ----------------------------------------------------------
    def _http(self, purpose: str) -> httpx.Client:
        return self._client if self._client is not None else get_httpx_client(purpose)

    def _overall_timeout(self) -> float:
        if self._timeout_seconds is not None and self._timeout_seconds > 0:
            return self._timeout_seconds
        return get_timeout_config().request_timeout_seconds

    def _httpx_timeout(self, deadline: Deadline) -> httpx.Timeout:
        """Per-phase httpx timeouts, none longer than what is left of ``deadline``."""
        remaining = max(deadline.remaining, _MIN_PHASE_TIMEOUT)
        connect = get_timeout_config().connect_timeout_seconds
        return httpx.Timeout(remaining, connect=min(connect, remaining))

    def _prepare(
        self,
        request: NormalizedRequest,
        descriptor: ModelDescriptor,
        credentials: Optional[CompletionCredentials],
    ) -> _PreparedCall:
        dialect = resolve_dialect(descriptor, credentials)
        base_url = resolve_address(descriptor, credentials)
        if requires_secret(descriptor) and not (credentials and credentials.secret_key):
            raise MissingCredentialsError(
                f"no API key configured for provider '{descriptor.provider_kind}'",
                provider=descriptor.provider_kind,
                model=request.model_id,
            )
        adapter = adapter_for(dialect)
        headers, body = adapter.encode_request(request, credentials)
        ctx = LogContext(
            provider=descriptor.provider_kind,
            model=request.model_id,
            dialect=dialect.value,
            request_id=uuid.uuid4().hex[:12],
        )
        return _PreparedCall(adapter, adapter.endpoint_url(base_url), headers, body, ctx)

    # ---- shared I/O helpers ---------------------------------------------
    @staticmethod
    def _guarded_bytes(
        resp: httpx.Response,
        deadline: Deadline,
        token: Optional[CancellationToken],
    ) -> Iterator[bytes]:
        """Yield body bytes, enforcing the deadline and cancellation per read."""
        for data in resp.iter_bytes():
            if token is not None:
                token.raise_if_cancelled()
            if deadline.expired:
                raise TransportError(
                    f"request exceeded {deadline.seconds:g}s", reason="timeout"
                )
            yield data

    @classmethod
    def _check_status(
        cls,
        resp: httpx.Response,
        deadline: Deadline,
        token: Optional[CancellationToken] = None,
    ) -> None:
        if resp.is_success:
            return
        body = b"".join(cls._guarded_bytes(resp, deadline, token))
        raise HttpStatusError(resp.status_code, detail=_excerpt(body))

    @staticmethod
    def _as_gateway_error(
        exc: BaseException, token: Optional[CancellationToken]
    ) -> Optional[GatewayError]:
        """Translate ``exc`` into the gateway taxonomy (None if foreign)."""
        if token is not None and token.cancelled:
            return TransportError(f"stream cancelled: {token.reason or 'by caller'}", reason="aborted", raw=exc)
        if isinstance(exc, GatewayError):
            return exc
        if isinstance(exc, CancelledError):
            return TransportError(str(exc), reason="aborted", raw=exc)
        if isinstance(exc, httpx.TimeoutException):
            return TransportError(f"request timed out: {exc}", reason="timeout", raw=exc)
        if isinstance(exc, (httpx.HTTPError, httpx.StreamError)):
            return TransportError(f"network failure: {exc}", reason="network", raw=exc)
        return None

    def _fail(
        self,
        event: str,
        exc: BaseException,
        token: Optional[CancellationToken],
        ctx: LogContext,
        emitted: Optional[int] = None,
    ) -> BaseException:
        err = self._as_gateway_error(exc, token)
        if err is None:
            return exc
        if err.model is None:
            err.model = ctx.model
        if err.provider == "-":
            err.provider = ctx.provider or "-"
        normalized_log_event(
            self._logger,
            event,
            ctx,
            phase="finalize",
            error_code=err.code.value,
            emitted=emitted,
            level=logging.ERROR,
            error=err.message,
            status_code=getattr(err, "status_code", None),
        )
        return err

    # ---- blocking -------------------------------------------------------
    def complete(
        self,
        request: NormalizedRequest,
        descriptor: ModelDescriptor,
        credentials: Optional[CompletionCredentials] = None,
    ) -> NormalizedResult:
        """Execute ``request`` and return the full reply.

        Raises:
            UnsupportedProviderError: no dialect/address for ``descriptor``.
            MissingCredentialsError: cloud model without a secret key.
            TransportError: network failure or timeout.
            HttpStatusError: non-2xx response.
            MalformedResponseError: reply does not match the dialect schema.
        """
        call = self._prepare(request.with_stream(False), descriptor, credentials)
        normalized_log_event(
            self._logger,
            "chat.start",
            call.ctx,
            phase="start",
            turns=len(request.turns),
            temperature=request.temperature,
            max_tokens=request.max_output_tokens,
        )
        deadline = Deadline(self._overall_timeout())
        t0 = time.perf_counter()
        try:
            with self._http("chat").stream(
                "POST",
                call.url,
                headers=call.headers,
                content=call.body,
                timeout=self._httpx_timeout(deadline),
            ) as resp:
                self._check_status(resp, deadline)
                body = b"".join(self._guarded_bytes(resp, deadline, None))
            result = call.adapter.decode_response(body)
        except Exception as exc:
            err = self._fail("chat.error", exc, None, call.ctx)
            if err is exc:
                raise
            raise err from exc
        normalized_log_event(
            self._logger,
            "chat.end",
            call.ctx,
            phase="finalize",
            emitted=True,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
            chars=len(result.text),
        )
        return result

    # ---- streaming ------------------------------------------------------
    def stream(
        self,
        request: NormalizedRequest,
        descriptor: ModelDescriptor,
        credentials: Optional[CompletionCredentials] = None,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Iterator[NormalizedChunk]:
        """Return a lazy iterator over the chunks of a streamed reply.

        Setup errors are raised here, before the iterator is returned. The
        request is sent on the first ``next()``. Closing the iterator early
        closes the connection.
        """
        call = self._prepare(request.with_stream(True), descriptor, credentials)
        return self._run_stream(call, cancellation_token)

    def _run_stream(
        self, call: _PreparedCall, token: Optional[CancellationToken]
    ) -> Iterator[NormalizedChunk]:
        ctx = call.ctx

        def _on_state(previous: StreamState, current: StreamState) -> None:
            normalized_log_event(
                self._logger,
                "stream.state",
                ctx,
                phase=current.value,
                level=logging.DEBUG,
                previous=previous.value,
            )

        lifecycle = StreamLifecycle(on_change=_on_state)
        normalized_log_event(self._logger, "stream.start", ctx, phase="start")
        deadline = Deadline(self._overall_timeout())
        t0 = time.perf_counter()
        first_chunk_ms: Optional[float] = None
        emitted = 0
        lifecycle.transition(StreamState.CONNECTING)
        try:
            if token is not None:
                token.raise_if_cancelled()
            with self._http("stream").stream(
                "POST",
                call.url,
                headers=call.headers,
                content=call.body,
                timeout=self._httpx_timeout(deadline),
            ) as resp:
                if token is not None:
                    token.add_callback(resp.close)
                try:
                    self._check_status(resp, deadline, token)
                    lifecycle.transition(StreamState.STREAMING)
                    decoder = StreamDecoder(call.adapter, self._logger, ctx)
                    for chunk in decoder.decode(self._guarded_bytes(resp, deadline, token)):
                        if token is not None:
                            token.raise_if_cancelled()
                        lifecycle.transition(StreamState.STREAMING)
                        if first_chunk_ms is None:
                            first_chunk_ms = (time.perf_counter() - t0) * 1000.0
                        emitted += 1
                        yield chunk
                    if token is not None:
                        token.raise_if_cancelled()
                finally:
                    if token is not None:
                        token.remove_callback(resp.close)
        except GeneratorExit:
            lifecycle.fail()
            normalized_log_event(
                self._logger,
                "stream.end",
                ctx,
                phase="finalize",
                emitted=emitted,
                error_code="cancelled",
                closed_by_consumer=True,
            )
            raise
        except Exception as exc:
            lifecycle.fail()
            err = self._fail("stream.error", exc, token, ctx, emitted=emitted)
            if err is exc:
                raise
            raise err from exc
        lifecycle.transition(StreamState.COMPLETED)
        normalized_log_event(
            self._logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            time_to_first_chunk_ms=first_chunk_ms,
            total_duration_ms=(time.perf_counter() - t0) * 1000.0,
        )

    def stream_complete(
        self,
        request: NormalizedRequest,
        descriptor: ModelDescriptor,
        credentials: Optional[CompletionCredentials],
        on_chunk: Callable[[str], None],
        on_complete: Callable[[str], None],
        cancellation_token: Optional[CancellationToken] = None,
    ) -> None:
        """Stream ``request``, pushing each chunk to ``on_chunk``.

        ``on_complete`` receives the concatenated text exactly once when the
        stream ends gracefully. It is never called after a failure or a
        cancellation; those raise instead (``TransportError`` with
        ``reason="aborted"`` for cancellation).
        """
        parts = []
        with closing(self.stream(request, descriptor, credentials, cancellation_token)) as chunks:
            for chunk in chunks:
                parts.append(chunk.text)
                on_chunk(chunk.text)
        on_complete("".join(parts))


__all__ = ["CompletionGateway"]
