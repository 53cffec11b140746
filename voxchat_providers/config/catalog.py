"""Model catalog: the selectable models offered by the chat client.

The built-in entries are the defaults of the chat client's model picker.
Additional descriptors may be declared under a ``models`` key of the external
config file (see :mod:`voxchat_providers.config`); entries there with the id
of a built-in model replace it.

Entry shape (file)
------------------

.. code-block:: yaml

    models:
      - id: phi-3-mini
        display_name: Phi-3 Mini
        provider_kind: local
        locality: local
        endpoint: http://127.0.0.1:1234/v1
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.models import ModelDescriptor
from . import load_external_config


DEFAULT_MODELS: tuple[ModelDescriptor, ...] = (
    ModelDescriptor(id="gpt-3.5-turbo", display_name="GPT-3.5 Turbo", provider_kind="openai", locality="cloud"),
    ModelDescriptor(id="gpt-4", display_name="GPT-4", provider_kind="openai", locality="cloud"),
    ModelDescriptor(id="claude-3-opus", display_name="Claude 3 Opus", provider_kind="anthropic", locality="cloud"),
    ModelDescriptor(id="llama-3-70b", display_name="Llama 3 (70B)", provider_kind="meta", locality="local"),
    ModelDescriptor(id="mistral-7b", display_name="Mistral (7B)", provider_kind="mistral", locality="local"),
)


def _descriptor_from_entry(entry: Dict[str, Any]) -> Optional[ModelDescriptor]:
    """Convert one config-file entry into a descriptor.

    Entries without an ``id`` or ``provider_kind`` are ignored.
    """
    mid = entry.get("id")
    kind = entry.get("provider_kind") or entry.get("provider")
    if not mid or not kind:
        return None
    locality = str(entry.get("locality") or "cloud").lower()
    if locality not in ("cloud", "local"):
        locality = "cloud"
    return ModelDescriptor(
        id=str(mid),
        display_name=str(entry.get("display_name") or entry.get("name") or mid),
        provider_kind=str(kind).lower().strip(),
        locality=locality,  # type: ignore[arg-type]
        endpoint_override=entry.get("endpoint") or entry.get("endpoint_override") or None,
    )


def list_models() -> List[ModelDescriptor]:
    """Return the catalog: built-ins first, then file-declared models."""
    by_id: Dict[str, ModelDescriptor] = {m.id: m for m in DEFAULT_MODELS}
    raw = load_external_config().get("models")
    if isinstance(raw, list):
        for entry in raw:
            if not isinstance(entry, dict):
                continue
            if (desc := _descriptor_from_entry(entry)) is not None:
                by_id[desc.id] = desc
    return list(by_id.values())


def find_model(model_id: str) -> Optional[ModelDescriptor]:
    """Return the catalog descriptor for ``model_id`` (or None)."""
    for desc in list_models():
        if desc.id == model_id:
            return desc
    return None


__all__ = ["DEFAULT_MODELS", "list_models", "find_model"]
