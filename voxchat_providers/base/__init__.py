"""
Gateway Base Package

Provider-agnostic building blocks shared by the registry, the protocol
adapters and the completion gateway:

- Models: frozen domain values (turns, descriptors, requests, results)
- Errors: the gateway error taxonomy and status classification
- Timeouts and cancellation primitives

Streaming, DTO and normalizer modules are imported from their own paths
(``base.streaming``, ``base.dto``, ``base.normalizer``) to keep this package
import free of configuration.
"""

from .models import (
    ChatTurn,
    CompletionCredentials,
    ModelDescriptor,
    NormalizedChunk,
    NormalizedRequest,
    NormalizedResult,
    Role,
    StreamSignal,
)
from .errors import (
    ErrorCode,
    GatewayError,
    HttpStatusError,
    MalformedResponseError,
    MissingCredentialsError,
    TransportError,
    UnsupportedProviderError,
)
from .timeouts import Deadline, TimeoutConfig, get_timeout_config
from .cancellation import CancellationToken, CancelledError

__all__ = [
    # Models
    "Role",
    "ChatTurn",
    "ModelDescriptor",
    "CompletionCredentials",
    "NormalizedRequest",
    "NormalizedChunk",
    "NormalizedResult",
    "StreamSignal",
    # Errors
    "ErrorCode",
    "GatewayError",
    "UnsupportedProviderError",
    "MissingCredentialsError",
    "TransportError",
    "HttpStatusError",
    "MalformedResponseError",
    # Timeouts / cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "Deadline",
    "CancellationToken",
    "CancelledError",
]
