"""unigen_providers package

Unified generation client for OpenAI-compatible chat-completions endpoints
and Google Gemini (official API and enterprise/Vertex).

Purpose:
    Provide one coroutine, :func:`generate_response`, that turns a model id,
    a conversation history and a new user turn into an ordered stream of
    text chunks delivered to a callback, whatever backend serves it.

Public API (re-exported):
    - Version: ``__version__``
    - Entry point: :func:`generate_response`
    - Models: :class:`Message`, :class:`ImageRef`, :class:`Role`,
      :class:`GenerationExtras`, :class:`ImageSettings`
    - Cancellation: :class:`CancellationToken`, :class:`CancelledError`
    - Errors: :class:`ProviderError`, :class:`ConfigurationError`,
      :class:`ErrorCode`
    - Classifiers: :func:`classify_endpoint`, :func:`classify_credential`,
      :class:`EndpointKind`, :class:`CredentialKind`
"""

from .base.cancellation import CancellationToken, CancelledError
from .base.errors import ConfigurationError, ErrorCode, ProviderError
from .base.models import GenerationExtras, ImageRef, ImageSettings, Message, Role
from .base.routing import CredentialKind, EndpointKind, classify_credential, classify_endpoint
from .service.router import generate_response

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Entry point
    "generate_response",
    # Models
    "Message",
    "ImageRef",
    "Role",
    "GenerationExtras",
    "ImageSettings",
    # Cancellation
    "CancellationToken",
    "CancelledError",
    # Errors
    "ProviderError",
    "ConfigurationError",
    "ErrorCode",
    # Classifiers
    "classify_endpoint",
    "classify_credential",
    "EndpointKind",
    "CredentialKind",
]
