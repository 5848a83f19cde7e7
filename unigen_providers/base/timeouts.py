"""Unified timeout utilities for generation adapters.

This module centralizes timeout values used across adapters (HTTP connect,
whole-call bound for hung requests) and exposes an async helper that bounds
an awaitable while keeping cancellation distinguishable from expiry.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values in seconds.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use only (re-read when the relevant variables change). Supported
    environment variables (all optional):
        GEMINI_TIMEOUT_MS                 whole-call bound, milliseconds
        UNIGEN_TIMEOUT_SECONDS            whole-call bound, seconds (wins)
        UNIGEN_CONNECT_TIMEOUT_SECONDS    TCP/TLS connect timeout

with_timeout(awaitable, seconds, ...)
    Await with a deadline; expiry raises ``ProviderError(code=TIMEOUT)``.

Failure Modes
-------------
``ProviderError`` with ``ErrorCode.TIMEOUT`` when the deadline elapses.
Cancellation requested through a ``CancellationToken`` is never converted
into a timeout.
"""
from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Callable, Optional, TypeVar

from ..config.defaults import DEFAULT_CONNECT_TIMEOUT_SECONDS, DEFAULT_GENERATION_TIMEOUT_MS
from .errors import ErrorCode, ProviderError

if TYPE_CHECKING:
    from .cancellation import CancellationToken

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        generation_timeout_seconds: Upper bound for one adapter invocation
            (request + full body read). Bounds hung calls.
        connect_timeout_seconds: Connection establishment timeout passed to
            the HTTP client.
    """

    generation_timeout_seconds: float = DEFAULT_GENERATION_TIMEOUT_MS / 1000.0
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None
_ENV_NAMES = ("GEMINI_TIMEOUT_MS", "UNIGEN_TIMEOUT_SECONDS", "UNIGEN_CONNECT_TIMEOUT_SECONDS")


def _parse_env_float(name: str, default: float | None) -> float | None:
    """Parse an environment variable as a positive float with a fallback default."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
        return val if val > 0 else default
    except ValueError:  # pragma: no cover - defensive
        return default


def get_timeout_config() -> TimeoutConfig:
    """Return process-cached `TimeoutConfig` instance.

    Precedence for the generation timeout:
        1. UNIGEN_TIMEOUT_SECONDS
        2. GEMINI_TIMEOUT_MS (milliseconds)
        3. built-in default (120 s)
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - intentional, documented module cache
    cur_guard = "/".join(os.getenv(name, "") for name in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED

    millis = _parse_env_float("GEMINI_TIMEOUT_MS", float(DEFAULT_GENERATION_TIMEOUT_MS))
    generation = _parse_env_float("UNIGEN_TIMEOUT_SECONDS", float(millis) / 1000.0)
    connect = _parse_env_float("UNIGEN_CONNECT_TIMEOUT_SECONDS", DEFAULT_CONNECT_TIMEOUT_SECONDS)

    _CACHED = TimeoutConfig(
        generation_timeout_seconds=float(generation),
        connect_timeout_seconds=float(connect),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


async def with_timeout(
    awaitable: Awaitable[T],
    seconds: Optional[float],
    *,
    provider: str,
    model: Optional[str] = None,
    label: str = "request",
) -> T:
    """Await ``awaitable`` bounded by ``seconds`` (``None`` or <= 0 disables the bound).

    Raises:
        ProviderError: ``ErrorCode.TIMEOUT`` when the deadline elapses.
    """
    if not seconds or seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as exc:
        raise ProviderError(
            code=ErrorCode.TIMEOUT,
            message=f"{label} timed out after {seconds:g}s, please retry later",
            provider=provider,
            model=model,
            retryable=True,
            raw=exc,
        ) from exc


async def run_bounded(
    make_awaitable: Callable[[], Awaitable[T]],
    *,
    seconds: Optional[float],
    cancel_token: "CancellationToken | None",
    provider: str,
    model: Optional[str] = None,
    label: str = "request",
) -> T:
    """Run one adapter exchange under the deadline and the cancellation token.

    The awaitable is created only after the token has been checked, so a call
    cancelled up front never starts network I/O. Cancellation surfaces as
    ``CancelledError``; expiry as ``ProviderError(TIMEOUT)``.
    """
    if cancel_token is None:
        return await with_timeout(make_awaitable(), seconds, provider=provider, model=model, label=label)
    cancel_token.raise_if_cancelled()
    return await cancel_token.run(
        with_timeout(make_awaitable(), seconds, provider=provider, model=model, label=label)
    )


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "with_timeout",
    "run_bounded",
]
