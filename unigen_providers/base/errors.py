"""Unified provider error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``unigen_providers.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ConfigurationError, ProviderError, http_error
from .errors_parts.classification import (
    classify_exception,
    error_message,
    extract_status,
    is_rate_limited,
)

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ConfigurationError",
    "http_error",
    "classify_exception",
    "error_message",
    "extract_status",
    "is_rate_limited",
]
