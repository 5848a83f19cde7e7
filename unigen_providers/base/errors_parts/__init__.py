"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `unigen_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ConfigurationError, ProviderError, http_error
from .classification import classify_exception, extract_status, is_rate_limited

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "http_error",
    "classify_exception",
    "extract_status",
    "is_rate_limited",
]
