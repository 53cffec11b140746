import httpx

from voxchat_providers.base.timeouts import (
    DEFAULT_REQUEST_TIMEOUT_SECONDS,
    Deadline,
    TimeoutConfig,
    get_timeout_config,
)


def test_defaults_and_env(monkeypatch):
    assert get_timeout_config().request_timeout_seconds == DEFAULT_REQUEST_TIMEOUT_SECONDS
    monkeypatch.setenv("VOXCHAT_TIMEOUT_REQUEST_SECONDS", "12.5")
    monkeypatch.setenv("VOXCHAT_TIMEOUT_CONNECT_SECONDS", "nope")
    cfg = get_timeout_config()
    assert cfg.request_timeout_seconds == 12.5
    assert cfg.connect_timeout_seconds == 10.0
    assert get_timeout_config() is cfg
    monkeypatch.setenv("VOXCHAT_TIMEOUT_REQUEST_SECONDS", "-3")
    assert get_timeout_config().request_timeout_seconds == DEFAULT_REQUEST_TIMEOUT_SECONDS


def test_as_httpx_caps_connect():
    t = TimeoutConfig(request_timeout_seconds=2.0, connect_timeout_seconds=10.0).as_httpx()
    assert isinstance(t, httpx.Timeout)
    assert t.connect == 2.0
    assert t.read == 2.0


def test_deadline_with_fake_clock():
    now = [100.0]
    deadline = Deadline(5.0, clock=lambda: now[0])
    assert not deadline.expired
    assert deadline.remaining == 5.0
    now[0] = 104.0
    assert deadline.remaining == 1.0
    now[0] = 105.0
    assert deadline.expired
    now[0] = 200.0
    assert deadline.remaining == 0.0
