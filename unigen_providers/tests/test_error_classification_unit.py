from __future__ import annotations

import types

import httpx

from unigen_providers.base.errors import (
    ConfigurationError,
    ErrorCode,
    ProviderError,
    classify_exception,
    extract_status,
    http_error,
    is_rate_limited,
)


def test_classify_provider_error_passthrough():
    e = ProviderError(code=ErrorCode.AUTH, message="nope", provider="x")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101 - assert is appropriate in unit tests


def test_classify_http_status_mapping():
    # Direct attr
    e1 = types.SimpleNamespace(status_code=404)
    assert classify_exception(e1) is ErrorCode.NOT_FOUND  # nosec B101 - assert is appropriate in unit tests
    # response.status_code
    e2 = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e2) is ErrorCode.UNAVAILABLE  # nosec B101 - assert is appropriate in unit tests


def test_classify_heuristics():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("model not supported")) is ErrorCode.UNSUPPORTED  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101 - assert is appropriate in unit tests


def test_classify_httpx_transport_failures():
    assert classify_exception(httpx.ConnectError("refused")) is ErrorCode.TRANSIENT  # nosec B101
    assert classify_exception(httpx.ReadTimeout("slow")) is ErrorCode.TIMEOUT  # nosec B101


def test_extract_status_prefers_attributes_then_message():
    class _SdkError(Exception):
        code = 429

    assert extract_status(_SdkError("whatever")) == 429  # nosec B101
    assert extract_status(Exception("upstream said 503 Service Unavailable")) == 503  # nosec B101
    # only well-known statuses are read from text
    assert extract_status(Exception("took 404ms")) is None  # nosec B101


def test_is_rate_limited_status_and_message_patterns():
    assert is_rate_limited(http_error(provider="gemini", model="m", status=429, body=""))  # nosec B101
    assert is_rate_limited(Exception("Quota exceeded for metric"))  # nosec B101
    assert is_rate_limited(Exception("Rate Limit reached"))  # nosec B101
    assert not is_rate_limited(Exception("quotas endpoint missing"))  # nosec B101
    assert not is_rate_limited(http_error(provider="gemini", model="m", status=500, body="boom"))  # nosec B101


def test_http_error_preserves_status_and_body():
    err = http_error(provider="openai", model="gpt", status=401, body='{"error":"bad key"}')
    assert err.status == 401 and err.status_code == 401  # nosec B101
    assert err.body == '{"error":"bad key"}'  # nosec B101
    assert err.code is ErrorCode.AUTH  # nosec B101
    assert err.message == 'request failed: 401 - {"error":"bad key"}'  # nosec B101
    assert http_error(provider="openai", model=None, status=502, body="").message == "request failed: 502"  # nosec B101


def test_configuration_error_code():
    err = ConfigurationError("missing Project ID", provider="gemini")
    assert isinstance(err, ProviderError)  # nosec B101
    assert err.code is ErrorCode.CONFIGURATION  # nosec B101
    assert "Project ID" in str(err)  # nosec B101
