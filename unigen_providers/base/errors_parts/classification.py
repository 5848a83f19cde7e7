"""
Error classification helpers mapping exceptions to normalized ErrorCode values.

Implements HTTP status extraction (attributes first, then the status number
embedded in the message), status-to-code mapping, the rate-limit heuristic
used by the Gemini retry policy, and message-based fallbacks for exceptions
raised by vendor SDKs.
"""
from __future__ import annotations

import asyncio
import re
from typing import Optional, Dict

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError

_STATUS_IN_MESSAGE = re.compile(r"\b(400|401|403|408|409|429|500|502|503|504)\b")
_QUOTA = re.compile(r"\bquota\b", re.IGNORECASE)
_RATE_LIMIT = re.compile(r"\brate limit\b", re.IGNORECASE)


def error_message(exc: BaseException | str | None) -> str:
    """Return the human-readable message of an exception (or the string itself)."""
    if exc is None:
        return ""
    if isinstance(exc, str):
        return exc
    if isinstance(exc, ProviderError):
        return exc.message
    return str(exc)


def _extract_status(exc: BaseException) -> Optional[int]:
    """Attempt to extract an HTTP status code from a provider exception.

    Supported attribute shapes (checked in order):
    - ``exc.status`` / ``exc.status_code``
    - ``exc.code`` (google-genai ``APIError``)
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status", "status_code", "code"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and not isinstance(val, bool) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


def extract_status(exc: BaseException, message: str | None = None) -> Optional[int]:
    """Return the HTTP status carried by ``exc``, else the one named in its message."""
    status = _extract_status(exc)
    if status is not None:
        return status
    match = _STATUS_IN_MESSAGE.search(message if message is not None else error_message(exc))
    return int(match.group(1)) if match else None


def is_rate_limited(exc: BaseException) -> bool:
    """Return True for 429 responses or messages mentioning quota/rate limit.

    The message heuristic may match unrelated errors that mention those
    words; it is kept broad on purpose to mirror vendor error phrasing.
    """
    message = error_message(exc)
    if extract_status(exc, message) == 429:
        return True
    return bool(_QUOTA.search(message) or _RATE_LIMIT.search(message))


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}


def code_for_status(status: int) -> ErrorCode:
    """Map an HTTP status to an :class:`ErrorCode` (``UNKNOWN`` when unmapped)."""
    if status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    if status >= 500:
        return ErrorCode.SERVER_ERROR
    return ErrorCode.UNKNOWN


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for non-HTTP exceptions."""
    PATTERN_GROUPS = (
        (ErrorCode.RATE_LIMIT, ("rate limit",)),
        (ErrorCode.RATE_LIMIT, ("quota",)),
        (ErrorCode.TIMEOUT, ("timeout",)),
        (ErrorCode.TIMEOUT, ("timed out",)),
        (ErrorCode.AUTH, ("api key",)),
        (ErrorCode.AUTH, ("unauthorized",)),
        (ErrorCode.AUTH, ("forbidden",)),
        (ErrorCode.UNSUPPORTED, ("not supported",)),
        (ErrorCode.NOT_FOUND, ("not found",)),
        (ErrorCode.UNAVAILABLE, ("unavailable",)),
        (ErrorCode.VALIDATION, ("invalid",)),
        (ErrorCode.SERVER_ERROR, ("internal error",)),
    )
    for code, patterns in PATTERN_GROUPS:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_exception(exc: BaseException) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (asyncio/httpx).
        3. Other httpx transport failures (``TRANSIENT``).
        4. HTTP status mapping.
        5. Substring heuristics.
        6. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError, httpx.TimeoutException)):
        return ErrorCode.TIMEOUT
    if isinstance(exc, httpx.TransportError):
        return ErrorCode.TRANSIENT
    status = _extract_status(exc)
    if status is not None:
        return code_for_status(status)
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "code_for_status",
    "error_message",
    "extract_status",
    "is_rate_limited",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
