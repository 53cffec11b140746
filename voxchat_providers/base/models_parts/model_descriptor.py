"""
ModelDescriptor: identifies which backend, dialect and address serve a model.
"""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict, Literal, Optional


Locality = Literal["cloud", "local"]


@dataclass(frozen=True)
class ModelDescriptor:
    """Description of a selectable model.

    Attributes:
        id: Model identifier sent to the backend (e.g. ``"gpt-3.5-turbo"``).
        display_name: Human-facing label.
        provider_kind: Raw provider tag (``"openai"``, ``"anthropic"``,
            ``"local"``, ``"other"`` or a legacy local family such as
            ``"ollama"``). Kept as a string so unrecognized kinds can be
            reported precisely by the registry.
        locality: ``"cloud"`` or ``"local"``. Local models make
            authentication optional; cloud models require the provider's
            auth scheme unless ``endpoint_override`` is set.
        endpoint_override: Optional base or full endpoint URL that wins over
            every other address source.
    """

    id: str
    display_name: str
    provider_kind: str
    locality: Locality = "cloud"
    endpoint_override: Optional[str] = None

    @property
    def is_local(self) -> bool:
        return self.locality == "local"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["ModelDescriptor", "Locality"]
