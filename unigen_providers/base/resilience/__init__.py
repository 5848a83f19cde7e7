"""Resilience helpers for generation calls (rate-limit retry with backoff)."""

from .retry import (
    DEFAULT_RETRY_POLICY,
    RetryPolicy,
    is_retryable,
    parse_retry_delay_ms,
    retry_generation,
)

__all__ = [
    "DEFAULT_RETRY_POLICY",
    "RetryPolicy",
    "is_retryable",
    "parse_retry_delay_ms",
    "retry_generation",
]
