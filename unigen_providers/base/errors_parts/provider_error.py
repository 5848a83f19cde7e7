"""
Structured provider error exception types.

Wraps vendor and transport failures with a normalized `ErrorCode` and, when
the failure came from a non-2xx response, the HTTP status and raw body text.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider key where the error originated (e.g., ``"openai"``).
        model: Optional model name associated with the failure.
        retryable: Hint for upstream retry logic (not authoritative).
        raw: Optional original exception for diagnostics.
        status: HTTP status when derived from a non-2xx response.
        body: Raw response body text accompanying ``status``.
    """

    code: ErrorCode
    message: str
    provider: str
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None
    status: Optional[int] = None
    body: Optional[str] = None

    @property
    def status_code(self) -> Optional[int]:
        """Alias of ``status`` for callers expecting the requests/httpx name."""
        return self.status

    def __str__(self) -> str:  # pragma: no cover - trivial
        """Return a compact string combining provider, model, code, and message."""
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


class ConfigurationError(ProviderError):
    """Raised before any network call when required settings are missing."""

    def __init__(self, message: str, provider: str, model: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.CONFIGURATION,
            message=message,
            provider=provider,
            model=model,
        )


def http_error(
    *,
    provider: str,
    model: Optional[str],
    status: int,
    body: str,
    prefix: str = "request failed",
) -> ProviderError:
    """Build a vendor error for a non-2xx response, preserving status and body."""
    from .classification import code_for_status

    message = f"{prefix}: {status}"
    if body:
        message += f" - {body}"
    code = code_for_status(status)
    return ProviderError(
        code=code,
        message=message,
        provider=provider,
        model=model,
        retryable=code in (ErrorCode.RATE_LIMIT, ErrorCode.TRANSIENT, ErrorCode.UNAVAILABLE),
        status=status,
        body=body or None,
    )


__all__ = ["ProviderError", "ConfigurationError", "http_error"]
