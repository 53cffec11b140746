import json

import pytest

from voxchat_providers.config import (
    get_provider_config,
    load_credentials,
    load_external_config,
    reset_config_cache,
)
from voxchat_providers.config.defaults import LOCAL_DEFAULT_BASE_URL, OPENAI_DEFAULT_BASE_URL
from voxchat_providers.config.env import (
    get_env_var_candidates,
    get_env_var_name,
    is_placeholder,
    resolve_provider_key,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("sk-live-123", False),
        ("PLACEHOLDER_KEY", True),
        ("changeme", True),
        ("your-key-example", True),
        ("test_abc", True),
        (None, False),
    ],
)
def test_is_placeholder(value, expected):
    assert is_placeholder(value) is expected


def test_env_var_names():
    assert get_env_var_name("OpenAI") == "OPENAI_API_KEY"
    assert get_env_var_name("unknown") is None
    assert list(get_env_var_candidates("anthropic")) == ["ANTHROPIC_API_KEY", "CLAUDE_API_KEY"]


def test_claude_alias_used_when_canonical_missing(monkeypatch):
    monkeypatch.setenv("CLAUDE_API_KEY", "sk-ant-alias")
    assert resolve_provider_key("anthropic") == ("sk-ant-alias", "CLAUDE_API_KEY")
    monkeypatch.setenv("ANTHROPIC_API_KEY", "sk-ant-main")
    assert resolve_provider_key("anthropic") == ("sk-ant-main", "ANTHROPIC_API_KEY")


def test_placeholder_env_is_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "changeme")
    assert resolve_provider_key("openai") == (None, None)
    assert "api_key" not in get_provider_config("openai")


def test_defaults_only():
    cfg = get_provider_config("local")
    assert cfg == {}
    assert load_credentials("local", {"base_url": LOCAL_DEFAULT_BASE_URL}).base_url_override == LOCAL_DEFAULT_BASE_URL
    creds = load_credentials("openai")
    assert creds.secret_key is None
    assert creds.base_url_override is None


def test_merge_order_file_env_overrides(monkeypatch, tmp_path):
    cfg_file = tmp_path / "voxchat.json"
    cfg_file.write_text(
        json.dumps({"openai": {"api_key": "sk-file", "base_url": "https://file.invalid/v1"}}),
        encoding="utf-8",
    )
    monkeypatch.setenv("VOXCHAT_CONFIG_FILE", str(cfg_file))
    assert get_provider_config("openai")["api_key"] == "sk-file"

    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    cfg = get_provider_config("openai")
    assert cfg["api_key"] == "sk-env"
    assert cfg["base_url"] == "https://file.invalid/v1"

    cfg = get_provider_config("openai", {"api_key": "sk-call", "base_url": None})
    assert cfg["api_key"] == "sk-call"
    assert cfg["base_url"] == "https://file.invalid/v1"


def test_yaml_config_file(monkeypatch, tmp_path):
    cfg_file = tmp_path / "voxchat.yaml"
    cfg_file.write_text("local:\n  base_url: http://10.0.0.5:1234/v1\n", encoding="utf-8")
    monkeypatch.setenv("VOXCHAT_CONFIG_FILE", str(cfg_file))
    creds = load_credentials("local")
    assert creds.base_url_override == "http://10.0.0.5:1234/v1"
    assert creds.secret_key is None


def test_invalid_config_file_is_empty(monkeypatch, tmp_path):
    cfg_file = tmp_path / "broken.yaml"
    cfg_file.write_text("- just\n- a list\n", encoding="utf-8")
    monkeypatch.setenv("VOXCHAT_CONFIG_FILE", str(cfg_file))
    assert load_external_config() == {}


def test_config_file_cached_per_path(monkeypatch, tmp_path):
    first = tmp_path / "a.json"
    first.write_text(json.dumps({"openai": {"api_key": "sk-a"}}), encoding="utf-8")
    second = tmp_path / "b.json"
    second.write_text(json.dumps({"openai": {"api_key": "sk-b"}}), encoding="utf-8")
    monkeypatch.setenv("VOXCHAT_CONFIG_FILE", str(first))
    assert load_external_config()["openai"]["api_key"] == "sk-a"
    first.write_text(json.dumps({"openai": {"api_key": "sk-changed"}}), encoding="utf-8")
    assert load_external_config()["openai"]["api_key"] == "sk-a"
    monkeypatch.setenv("VOXCHAT_CONFIG_FILE", str(second))
    assert load_external_config()["openai"]["api_key"] == "sk-b"


def test_dotenv_replaces_placeholder(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("# keys\nOPENAI_API_KEY='sk-from-dotenv'\n\nNOT_A_PAIR\n", encoding="utf-8")
    monkeypatch.setenv("OPENAI_API_KEY", "placeholder")
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    reset_config_cache()
    assert load_credentials("openai").secret_key == "sk-from-dotenv"


def test_load_credentials_overrides():
    creds = load_credentials("openai", {"api_key": "sk-call", "base_url": OPENAI_DEFAULT_BASE_URL})
    assert creds.secret_key == "sk-call"
    assert creds.base_url_override is None
    creds = load_credentials("openai", {"base_url": "https://proxy.internal/v1"})
    assert creds.base_url_override == "https://proxy.internal/v1"
    assert "sk-call" not in repr(load_credentials("openai", {"api_key": "sk-call"}))
