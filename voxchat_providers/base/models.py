"""
Provider-agnostic domain models public surface.

This module re-exports the one-class-per-file implementations under
``voxchat_providers.base.models_parts`` so callers have a single import path.
"""

from .models_parts.chat_turn import ChatTurn, Role, ROLES
from .models_parts.model_descriptor import ModelDescriptor, Locality
from .models_parts.credentials import CompletionCredentials
from .models_parts.normalized_request import NormalizedRequest
from .models_parts.normalized_result import NormalizedChunk, NormalizedResult, StreamSignal

__all__ = [
    "ChatTurn",
    "Role",
    "ROLES",
    "ModelDescriptor",
    "Locality",
    "CompletionCredentials",
    "NormalizedRequest",
    "NormalizedChunk",
    "NormalizedResult",
    "StreamSignal",
]
