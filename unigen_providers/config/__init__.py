"""Unified configuration layer for generation providers.

Goals
-----
* Centralize defaults (base URLs, timeouts, retry budget).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. ``.env`` file (loaded once, never overriding real environment values)
    3. Environment variables (credentials and ``UNIGEN_API_BASE_URL``)
    4. In-code overrides passed to helper
* Provide a single call site: ``get_provider_config(provider: str)``.

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
"""
from __future__ import annotations

import os
from typing import Any, Dict, Optional

from .defaults import GEMINI_DEFAULT_BASE_URL, OPENAI_DEFAULT_BASE_URL
from .env import is_placeholder, resolve_api_base, resolve_provider_key


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": OPENAI_DEFAULT_BASE_URL},
    "gemini": {"base_url": GEMINI_DEFAULT_BASE_URL},
}

_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders (e.g., contain 'placeholder').
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration (``api_key``, ``base_url``) for a provider.

    Merge order (later wins): defaults -> env vars -> overrides. Unknown
    providers resolve like ``"openai"``. ``None`` override values are ignored.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    if name not in DEFAULTS:
        name = "openai"
    cfg: Dict[str, Any] = dict(DEFAULTS[name])

    key, _env_name = resolve_provider_key(name)
    if key:
        cfg["api_key"] = key
    if name == "openai" and (base := resolve_api_base()):
        cfg["base_url"] = base

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


__all__ = [
    "get_provider_config",
    "DEFAULTS",
]
