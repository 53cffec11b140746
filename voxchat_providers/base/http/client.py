"""Shared HTTP client pool for the gateway.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances so
    repeated calls to the same backend share connections. Gateways that are
    not handed an explicit client obtain one here.

External dependencies:
    - ``httpx`` for the underlying synchronous HTTP client.

Timeout strategy:
    - Pooled clients are created with the timeouts of
      :func:`get_timeout_config`; the gateway still passes the per-request
      timeout explicitly and enforces the overall deadline itself.

Lifecycle & cleanup:
    - Clients are cached by ``purpose`` (e.g. ``"chat"`` vs ``"stream"``).
      Absolute endpoint URLs are used per request, so no base URL is bound.
    - All clients are closed at interpreter exit via ``atexit``; tests may
      call :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[str, httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(purpose: str = "chat") -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``purpose``.

    The first request for a purpose creates the client; later requests reuse
    it. Safe for concurrent use.
    """
    client = _CLIENTS.get(purpose)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is not None and not client.is_closed:
            return client
        client = httpx.Client(timeout=get_timeout_config().as_httpx())
        _CLIENTS[purpose] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
