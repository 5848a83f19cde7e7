from __future__ import annotations

from unigen_providers.config import get_provider_config
from unigen_providers.config.defaults import GEMINI_DEFAULT_BASE_URL, OPENAI_DEFAULT_BASE_URL
from unigen_providers.config.env import (
    ENV_ALIASES,
    get_env_var_candidates,
    is_placeholder,
    resolve_api_base,
    resolve_provider_key,
)


def test_aliases_order():
    assert ENV_ALIASES["gemini"][0] == "GEMINI_API_KEY"  # nosec B101
    assert ENV_ALIASES["openai"] == ("UNIGEN_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY")  # nosec B101
    # unknown providers resolve like the OpenAI family
    assert tuple(get_env_var_candidates("deepseek")) == ENV_ALIASES["openai"]  # nosec B101


def test_is_placeholder_heuristics():
    assert is_placeholder("placeholder-value")  # nosec B101
    assert is_placeholder("ChangeMe123")  # nosec B101
    assert is_placeholder("example-key")  # nosec B101
    assert is_placeholder("test_token")  # nosec B101
    assert not is_placeholder("real-value")  # nosec B101


def test_resolve_provider_key_prefers_canonical(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "canon")
    monkeypatch.setenv("GOOGLE_API_KEY", "alias")
    val, used = resolve_provider_key("gemini")
    assert val == "canon"  # nosec B101
    assert used == "GEMINI_API_KEY"  # nosec B101


def test_resolve_provider_key_skips_placeholders(monkeypatch):
    monkeypatch.setenv("UNIGEN_API_KEY", "changeme")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-live")
    assert resolve_provider_key("openai") == ("sk-live", "OPENAI_API_KEY")  # nosec B101
    assert resolve_provider_key("gemini") == (None, None)  # nosec B101


def test_get_provider_config_merges_env_and_overrides(monkeypatch):
    monkeypatch.setenv("UNIGEN_API_BASE_URL", "https://relay.example.org")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    cfg = get_provider_config("openai")
    assert cfg["base_url"] == "https://relay.example.org"  # nosec B101
    assert cfg["api_key"] == "sk-env"  # nosec B101

    cfg = get_provider_config("openai", {"base_url": "https://override", "api_key": None})
    assert cfg["base_url"] == "https://override" and cfg["api_key"] == "sk-env"  # nosec B101

    # the env base applies to the OpenAI family only
    assert get_provider_config("gemini")["base_url"] == GEMINI_DEFAULT_BASE_URL  # nosec B101


def test_defaults_without_env():
    assert resolve_api_base() is None  # nosec B101
    cfg = get_provider_config("something-else")
    assert cfg == {"base_url": OPENAI_DEFAULT_BASE_URL}  # nosec B101
