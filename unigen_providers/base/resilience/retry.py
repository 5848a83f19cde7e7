from __future__ import annotations

import asyncio
import math
import re
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol

from ...config.defaults import RETRY_BASE_DELAY_MS, RETRY_MAX_DELAY_MS, RETRY_MAX_RETRIES
from ..cancellation import CancellationToken, CancelledError
from ..errors import error_message, is_rate_limited
from ..logging import LogContext, get_logger, normalized_log_event
from ..streaming import ChunkCallback, ChunkSink

_RETRY_DELAY_FIELD = re.compile(r"""retryDelay['"]?\s*:\s*['"]?(\d+(?:\.\d+)?)s""")
_RETRY_IN = re.compile(r"retry in\s+(\d+(?:\.\d+)?)s", re.IGNORECASE)

logger = get_logger("retry")

Runner = Callable[[ChunkSink], Awaitable[None]]


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_retries: int,
        delay_ms: int,
        error: BaseException,
    ) -> None: ...


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = RETRY_MAX_RETRIES
    base_delay_ms: int = RETRY_BASE_DELAY_MS
    max_delay_ms: int = RETRY_MAX_DELAY_MS
    attempt_logger: AttemptLogger | None = None

    def fallback_delay_ms(self, attempt: int) -> int:
        """Linear backoff: ``base * (attempt + 1)`` capped at ``max_delay_ms``."""
        return min(self.base_delay_ms * (attempt + 1), self.max_delay_ms)


DEFAULT_RETRY_POLICY = RetryPolicy()


def parse_retry_delay_ms(message: str) -> Optional[int]:
    """Return the server-suggested delay in milliseconds, if the message names one.

    Recognizes a ``retryDelay`` field, JSON (``"retryDelay": "3.5s"``) or a
    Python dict repr as rendered by SDK errors (``'retryDelay': '3.5s'``),
    then the ``retry in Ns`` phrasing. Fractions round up.
    """
    for pattern in (_RETRY_DELAY_FIELD, _RETRY_IN):
        match = pattern.search(message)
        if match:
            return math.ceil(float(match.group(1)) * 1000)
    return None


def is_retryable(error: BaseException, delivered_any: bool) -> bool:
    """Only rate limiting is retried, and only while nothing reached the caller."""
    if delivered_any or isinstance(error, CancelledError):
        return False
    return is_rate_limited(error)


async def retry_generation(
    runner: Runner,
    on_chunk: ChunkCallback,
    cancel_token: CancellationToken | None = None,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    ctx: LogContext | None = None,
) -> None:
    """Run ``runner`` until it succeeds, retrying rate-limit failures.

    Each attempt receives a fresh :class:`ChunkSink` bound to ``on_chunk``.
    Once a chunk has been delivered the attempt is no longer retryable, so
    output is never duplicated. Backoff sleeps are cancellable. The last
    error is re-raised unchanged when it is not retryable or the budget is
    spent.
    """
    attempt = 0
    while True:
        sink = ChunkSink(on_chunk, cancel_token)
        try:
            await runner(sink)
            return
        except CancelledError:
            raise
        except Exception as exc:
            if cancel_token is not None and cancel_token.cancelled:
                raise
            if attempt >= policy.max_retries or not is_retryable(exc, sink.delivered_any):
                raise
            message = error_message(exc)
            delay_ms = parse_retry_delay_ms(message)
            if delay_ms is None:
                delay_ms = policy.fallback_delay_ms(attempt)
            normalized_log_event(
                logger,
                "retry",
                ctx,
                phase="retry",
                attempt=attempt + 1,
                error_code="rate_limit",
                emitted=False,
                delay_ms=delay_ms,
                max_retries=policy.max_retries,
                error=message[:500],
            )
            if policy.attempt_logger:
                policy.attempt_logger(
                    attempt=attempt,
                    max_retries=policy.max_retries,
                    delay_ms=delay_ms,
                    error=exc,
                )
            attempt += 1
            if cancel_token is not None:
                await cancel_token.sleep(delay_ms / 1000.0)
            else:
                await asyncio.sleep(delay_ms / 1000.0)


__all__ = [
    "RetryPolicy",
    "DEFAULT_RETRY_POLICY",
    "parse_retry_delay_ms",
    "is_retryable",
    "retry_generation",
]
