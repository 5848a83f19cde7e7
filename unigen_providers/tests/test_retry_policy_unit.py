"""Retry policy tests: rate-limit detection, server-suggested delays, budget
exhaustion, no retry after partial delivery and cancellable backoff."""
from __future__ import annotations

import asyncio

import pytest

from unigen_providers.base.cancellation import CancellationToken, CancelledError
from unigen_providers.base.errors import ErrorCode, ProviderError, http_error
from unigen_providers.base.resilience import (
    RetryPolicy,
    is_retryable,
    parse_retry_delay_ms,
    retry_generation,
)
from unigen_providers.base.resilience import retry as retry_mod


@pytest.fixture
def slept(monkeypatch):
    delays: list[float] = []

    async def _fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(retry_mod.asyncio, "sleep", _fake_sleep)
    return delays


def _rate_limited(body: str = "Resource has been exhausted") -> ProviderError:
    return http_error(provider="gemini", model="gemini-2.5-flash", status=429, body=body)


def test_parse_retry_delay_variants():
    assert parse_retry_delay_ms('{"retryDelay": "2.5s"}') == 2500  # nosec B101
    assert parse_retry_delay_ms("retryDelay: 3s") == 3000  # nosec B101
    # SDK errors render details as a Python dict
    assert parse_retry_delay_ms("{'details': [{'retryDelay': '2.5s'}]}") == 2500  # nosec B101
    assert parse_retry_delay_ms("Please retry in 1.2001s.") == 1201  # nosec B101
    assert parse_retry_delay_ms("slow down") is None  # nosec B101


def test_fallback_delay_is_linear_and_capped():
    policy = RetryPolicy(max_retries=5, base_delay_ms=2000, max_delay_ms=5000)
    assert [policy.fallback_delay_ms(i) for i in range(4)] == [2000, 4000, 5000, 5000]  # nosec B101


def test_is_retryable_rules():
    assert is_retryable(_rate_limited(), delivered_any=False)  # nosec B101
    assert not is_retryable(_rate_limited(), delivered_any=True)  # nosec B101
    assert not is_retryable(ProviderError(code=ErrorCode.AUTH, message="bad key", provider="gemini"), delivered_any=False)  # nosec B101
    assert not is_retryable(CancelledError("stop"), delivered_any=False)  # nosec B101


@pytest.mark.asyncio
async def test_server_delay_is_honoured_then_succeeds(slept, collector):
    calls = 0

    async def runner(sink):
        nonlocal calls
        calls += 1
        if calls == 1:
            raise _rate_limited('{"error": {"details": [{"retryDelay": "2.5s"}]}}')
        sink.emit("ok")

    await retry_generation(runner, collector)

    assert calls == 2  # nosec B101
    assert slept == [2.5]  # nosec B101
    assert collector.text == "ok"  # nosec B101


@pytest.mark.asyncio
async def test_budget_exhaustion_reraises_last_error(slept, collector):
    seen: list[int] = []
    policy = RetryPolicy(
        max_retries=2,
        base_delay_ms=100,
        max_delay_ms=1000,
        attempt_logger=lambda **kw: seen.append(kw["delay_ms"]),
    )
    calls = 0

    async def runner(sink):
        nonlocal calls
        calls += 1
        raise Exception("Quota exceeded for requests")

    with pytest.raises(Exception, match="Quota exceeded"):
        await retry_generation(runner, collector, policy=policy)

    assert calls == 3  # nosec B101
    assert seen == [100, 200]  # nosec B101
    assert slept == [0.1, 0.2]  # nosec B101
    assert collector.chunks == []  # nosec B101


@pytest.mark.asyncio
async def test_partial_delivery_is_not_retried(slept, collector):
    calls = 0

    async def runner(sink):
        nonlocal calls
        calls += 1
        sink.emit("partial")
        raise _rate_limited()

    with pytest.raises(ProviderError) as ei:
        await retry_generation(runner, collector)

    assert ei.value.code is ErrorCode.RATE_LIMIT  # nosec B101
    assert calls == 1  # nosec B101
    assert collector.chunks == ["partial"]  # nosec B101
    assert slept == []  # nosec B101


@pytest.mark.asyncio
async def test_non_rate_limit_error_propagates_immediately(slept, collector):
    async def runner(sink):
        raise http_error(provider="gemini", model="m", status=500, body="boom")

    with pytest.raises(ProviderError) as ei:
        await retry_generation(runner, collector)
    assert ei.value.status == 500  # nosec B101
    assert slept == []  # nosec B101


@pytest.mark.asyncio
async def test_cancel_during_backoff_stops_retrying(collector):
    token = CancellationToken()
    calls = 0

    async def runner(sink):
        nonlocal calls
        calls += 1
        raise _rate_limited('"retryDelay": "30s"')

    asyncio.get_running_loop().call_later(0.01, token.cancel, "user stop")
    with pytest.raises(CancelledError):
        await retry_generation(runner, collector, cancel_token=token)
    assert calls == 1  # nosec B101
