"""voxchat_providers package

Provider abstraction and streaming-completion gateway for the voxchat chat
client.

Purpose:
    Accept one normalized chat request, resolve which backend dialect and
    address serve the selected model, execute the call (blocking or streamed)
    and decode the backend's response into one normalized result.

Public API (re-exported):
    - Version: ``__version__``
    - Gateway: :class:`CompletionGateway`
    - Registry: :class:`ProviderKind`, :class:`Dialect`,
      :func:`resolve_dialect`, :func:`resolve_address`
    - Normalizer: :func:`build_normalized_request`
    - Models and errors from :mod:`voxchat_providers.base`
"""

from .base.errors import (
    ErrorCode,
    GatewayError,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialsError,
    TransportError,
    UnsupportedProviderError,
)
from .base.models import (
    ChatTurn,
    CompletionCredentials,
    ModelDescriptor,
    NormalizedChunk,
    NormalizedRequest,
    NormalizedResult,
)
from .base.normalizer import build_normalized_request
from .registry import Dialect, ProviderKind, resolve_address, resolve_dialect
from .gateway import CompletionGateway

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CompletionGateway",
    "ProviderKind",
    "Dialect",
    "resolve_dialect",
    "resolve_address",
    "build_normalized_request",
    "ChatTurn",
    "ModelDescriptor",
    "CompletionCredentials",
    "NormalizedRequest",
    "NormalizedChunk",
    "NormalizedResult",
    "ErrorCode",
    "GatewayError",
    "UnsupportedProviderError",
    "MissingCredentialsError",
    "TransportError",
    "HttpStatusError",
    "MalformedResponseError",
]
