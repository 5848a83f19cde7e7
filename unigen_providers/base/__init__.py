"""
Providers Base Package

Provider-agnostic building blocks shared by the wire adapters:

- Models: conversation turns, image references and per-call request DTOs
- Errors: ``ErrorCode`` taxonomy, ``ProviderError`` and classification
- Cancellation & timeouts: cooperative cancellation and bounded awaits
- Streaming: SSE decoding and ordered chunk delivery
- Routing & resilience: endpoint/credential classifiers and the retry policy
"""

from .cancellation import CancellationToken, CancelledError
from .errors import ConfigurationError, ErrorCode, ProviderError
from .models import (
    GenerationExtras,
    GenerationRequest,
    ImageRef,
    ImageSettings,
    Message,
    Role,
)
from .routing import CredentialKind, EndpointKind, classify_credential, classify_endpoint
from .streaming import ChunkSink, SSEDecoder
from .timeouts import TimeoutConfig, get_timeout_config, with_timeout

__all__ = [
    # Models
    "Role",
    "Message",
    "ImageRef",
    "GenerationExtras",
    "GenerationRequest",
    "ImageSettings",
    # Errors
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "with_timeout",
    "CancellationToken",
    "CancelledError",
    # Streaming
    "ChunkSink",
    "SSEDecoder",
    # Routing
    "CredentialKind",
    "EndpointKind",
    "classify_credential",
    "classify_endpoint",
]
