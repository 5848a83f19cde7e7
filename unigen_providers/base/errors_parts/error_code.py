"""
Normalized provider error codes (taxonomy).

Defines the `ErrorCode` enumeration used across generation adapters and the
retry policy. Values are lowercase snake_case and are considered a stable
public contract for logging and for callers presenting failures.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    UNSUPPORTED = "unsupported"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"
    # Missing credential/project/token detected before any network call.
    CONFIGURATION = "configuration"
    # 2xx response without any extractable text or image.
    EMPTY_RESPONSE = "empty_response"


__all__ = ["ErrorCode"]
