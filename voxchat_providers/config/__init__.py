"""Provider settings for the gateway.

Settings for one provider kind are layered, later layers winning:

1. compiled-in base URLs (:mod:`.defaults`);
2. the section named after the provider in the file pointed to by
   ``VOXCHAT_CONFIG_FILE`` (JSON, or YAML when it is not JSON);
3. ``<PROVIDER>_API_KEY`` / ``<PROVIDER>_BASE_URL`` environment variables,
   after a ``.env`` file (``DOTENV_FILE``, default ``./.env``) was applied;
   when no key is found yet, key aliases such as ``CLAUDE_API_KEY``;
4. per-call overrides (``None`` values ignored).

Values that look like placeholders (``changeme``, ``test_...``) never count
as configured.

Config file example::

    anthropic:
      api_key: sk-ant-...
    local:
      base_url: http://192.168.1.20:1234/v1
    models:
      - id: qwen2.5-7b
        provider_kind: local
        locality: local

The ``models`` list is read by :mod:`.catalog`.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..base.models import CompletionCredentials
from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
)
from .env import is_placeholder, resolve_provider_key

CONFIG_FILE_ENV = "VOXCHAT_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {"base_url": ANTHROPIC_DEFAULT_BASE_URL},
    # loopback default is applied by the registry to local-locality models only
    "local": {},
    "other": {},
}

# setting name -> environment variable suffix
_ENV_SUFFIXES = {"api_key": "API_KEY", "base_url": "BASE_URL"}  # pragma: allowlist secret

_file_state: Dict[str, Any] = {"path": None, "data": None}
_dotenv_applied = False


def _parse_dotenv(path: Path) -> Dict[str, str]:
    """Return the ``KEY=VALUE`` pairs of a dotenv file (quotes stripped)."""
    pairs: Dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        key = key.strip()
        if key:
            pairs[key] = value.strip().strip("'\"")
    return pairs


def _apply_dotenv() -> None:
    """Copy ``.env`` entries into the environment once per process.

    A variable that is already set wins unless it holds a placeholder.
    """
    global _dotenv_applied
    if _dotenv_applied:
        return
    _dotenv_applied = True
    path = Path(os.getenv(DOTENV_FILE_ENV, ".env"))
    if not path.is_file():
        return
    for key, value in _parse_dotenv(path).items():
        current = os.environ.get(key)
        if current is None or is_placeholder(current):
            os.environ[key] = value


def _parse_config_text(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError:
            return {}
    return data if isinstance(data, dict) else {}


def load_external_config() -> Dict[str, Any]:
    """Return the parsed ``VOXCHAT_CONFIG_FILE`` (``{}`` if unset, missing or invalid).

    Parsed once per path; pointing the variable elsewhere re-reads.
    """
    path = os.getenv(CONFIG_FILE_ENV)
    if _file_state["data"] is not None and _file_state["path"] == path:
        return _file_state["data"]
    data: Dict[str, Any] = {}
    if path and Path(path).is_file():
        data = _parse_config_text(Path(path).read_text(encoding="utf-8"))
    _file_state.update(path=path, data=data)
    return data


def reset_config_cache() -> None:
    """Drop the parsed config file and allow ``.env`` to be applied again."""
    global _dotenv_applied
    _file_state.update(path=None, data=None)
    _dotenv_applied = False


def _from_environment(provider: str) -> Dict[str, Any]:
    found: Dict[str, Any] = {}
    for setting, suffix in _ENV_SUFFIXES.items():
        value = os.getenv(f"{provider.upper()}_{suffix}")
        if value and not is_placeholder(value):
            found[setting] = value
    return found


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged settings of ``provider`` (see module docstring for order)."""
    _apply_dotenv()
    name = (provider or "").lower().strip()
    merged: Dict[str, Any] = dict(DEFAULTS.get(name, {}))
    section = load_external_config().get(name)
    if isinstance(section, dict):
        merged.update(section)
    merged.update(_from_environment(name))
    if not merged.get("api_key"):
        alias_key, _ = resolve_provider_key(name)
        if alias_key:
            merged["api_key"] = alias_key
    merged.update({k: v for k, v in (overrides or {}).items() if v is not None})
    return merged


def load_credentials(provider_kind: str, overrides: Optional[Dict[str, Any]] = None) -> CompletionCredentials:
    """Build per-call credentials for ``provider_kind`` from the settings.

    The base URL is reported as ``base_url_override`` only when it differs
    from the compiled-in default, so the registry's address precedence stays
    in charge otherwise.
    """
    settings = get_provider_config(provider_kind, overrides)
    default = DEFAULTS.get((provider_kind or "").lower().strip(), {}).get("base_url")
    base_url = settings.get("base_url")
    return CompletionCredentials(
        secret_key=settings.get("api_key") or None,
        base_url_override=base_url if base_url and base_url != default else None,
    )


__all__ = [
    "get_provider_config",
    "load_credentials",
    "load_external_config",
    "reset_config_cache",
    "DEFAULTS",
    "CONFIG_FILE_ENV",
]
