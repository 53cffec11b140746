"""Pytest configuration for the gateway test suite.

Every test runs with a scrubbed provider environment (no real keys, no
config file, no ``.env``) and with the pooled HTTP clients closed afterwards.
HTTP traffic is served by ``httpx.MockTransport``; nothing reaches the
network.
"""

from __future__ import annotations

import json
import time
from typing import Callable, Iterable, Iterator, List, Optional

import httpx
import pytest

from voxchat_providers.base.http import close_all_clients
from voxchat_providers.config import reset_config_cache
from voxchat_providers.gateway import CompletionGateway

_SCRUBBED_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_BASE_URL",
    "ANTHROPIC_API_KEY",
    "ANTHROPIC_BASE_URL",
    "CLAUDE_API_KEY",
    "LOCAL_API_KEY",
    "LOCAL_BASE_URL",
    "OTHER_API_KEY",
    "OTHER_BASE_URL",
    "VOXCHAT_CONFIG_FILE",
    "VOXCHAT_LOG_LEVEL",
    "VOXCHAT_TIMEOUT_REQUEST_SECONDS",
    "VOXCHAT_TIMEOUT_CONNECT_SECONDS",
    "VOXCHAT_CORS_ORIGINS",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Remove provider settings from the environment for one test."""
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config_cache()
    yield
    reset_config_cache()
    close_all_clients()


class ChunkedStream(httpx.SyncByteStream):
    """Response body delivered in the given pieces, optionally failing.

    ``fail_after`` raises ``httpx.ReadError`` once that many pieces were
    delivered; ``delay`` sleeps before every piece after the first.
    """

    def __init__(self, parts: Iterable[bytes], *, fail_after: Optional[int] = None, delay: float = 0.0) -> None:
        self._parts = list(parts)
        self._fail_after = fail_after
        self._delay = delay
        self.closed = False

    def __iter__(self) -> Iterator[bytes]:
        for i, part in enumerate(self._parts):
            if self._fail_after is not None and i >= self._fail_after:
                raise httpx.ReadError("connection reset by peer")
            if i and self._delay:
                time.sleep(self._delay)
            yield part
        if self._fail_after is not None and self._fail_after >= len(self._parts):
            raise httpx.ReadError("connection reset by peer")

    def close(self) -> None:
        self.closed = True


def sse(*events: object, done: bool = False) -> bytes:
    """Encode events as ``data: <json>`` lines (``[DONE]`` appended if asked)."""
    lines = [f"data: {json.dumps(e)}" if not isinstance(e, str) else f"data: {e}" for e in events]
    if done:
        lines.append("data: [DONE]")
    return ("\n\n".join(lines) + "\n\n").encode("utf-8")


def openai_delta(text: str) -> dict:
    return {"choices": [{"index": 0, "delta": {"content": text}}]}


@pytest.fixture()
def recorded() -> List[httpx.Request]:
    """Requests seen by the mock transport, in order."""
    return []


@pytest.fixture()
def make_gateway(recorded: List[httpx.Request]) -> Callable[..., CompletionGateway]:
    """Build a gateway whose client is served by ``handler``.

    Every request is appended to the ``recorded`` fixture before the
    handler runs.
    """
    clients: List[httpx.Client] = []

    def _make(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> CompletionGateway:
        def _recording(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            return handler(request)

        client = httpx.Client(transport=httpx.MockTransport(_recording))
        clients.append(client)
        return CompletionGateway(client=client, **kwargs)

    yield _make
    for c in clients:
        c.close()


@pytest.fixture()
def sse_body() -> Callable[..., bytes]:
    return sse


@pytest.fixture()
def delta() -> Callable[[str], dict]:
    return openai_delta


@pytest.fixture()
def chunked() -> Callable[..., ChunkedStream]:
    return ChunkedStream
