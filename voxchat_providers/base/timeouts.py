"""Unified timeout configuration for the gateway.

One fixed overall request timeout applies uniformly to blocking and
streaming calls. It configures the ``httpx`` timeouts of each request and is
also enforced as a wall-clock :class:`Deadline` across the whole exchange,
because httpx read timeouts only bound the gap between two reads and a slow
trickling stream would otherwise never expire.

Key Components
--------------
TimeoutConfig
    Frozen dataclass with the normalized timeout values.

get_timeout_config()
    Process-cached configuration, re-read only when the environment
    overrides change. Supported environment variables (all optional):
        VOXCHAT_TIMEOUT_REQUEST_SECONDS
        VOXCHAT_TIMEOUT_CONNECT_SECONDS

Deadline
    Monotonic deadline checked cooperatively between reads.
"""
from __future__ import annotations

from dataclasses import dataclass
import os
import time

import httpx


DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0

_REQUEST_ENV = "VOXCHAT_TIMEOUT_REQUEST_SECONDS"
_CONNECT_ENV = "VOXCHAT_TIMEOUT_CONNECT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        request_timeout_seconds: Overall cap for one request, from sending
            the POST until the last byte of the body (or stream) is read.
        connect_timeout_seconds: Cap for establishing the TCP/TLS connection;
            never larger than the overall cap.
    """

    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS

    def as_httpx(self) -> httpx.Timeout:
        """Return the equivalent per-phase ``httpx.Timeout``."""
        return httpx.Timeout(
            self.request_timeout_seconds,
            connect=min(self.connect_timeout_seconds, self.request_timeout_seconds),
        )


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read a positive float from the environment, else return ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = f"{os.getenv(_REQUEST_ENV, '')}/{os.getenv(_CONNECT_ENV, '')}"
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    _CACHED = TimeoutConfig(
        request_timeout_seconds=_parse_env_float(_REQUEST_ENV, DEFAULT_REQUEST_TIMEOUT_SECONDS),
        connect_timeout_seconds=_parse_env_float(_CONNECT_ENV, DEFAULT_CONNECT_TIMEOUT_SECONDS),
    )
    _ENV_GUARD = guard
    return _CACHED


class Deadline:
    """Wall-clock deadline for one call."""

    def __init__(self, seconds: float, *, clock=time.monotonic) -> None:
        self._clock = clock
        self.seconds = seconds
        self._expires_at = clock() + seconds

    @property
    def remaining(self) -> float:
        return max(0.0, self._expires_at - self._clock())

    @property
    def expired(self) -> bool:
        return self._clock() >= self._expires_at


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "Deadline",
    "DEFAULT_REQUEST_TIMEOUT_SECONDS",
]
