"""unigen_providers.config.env
===========================

Centralized environment variable mapping and helpers for credentials and
endpoint defaults.

Purpose
-------
- Provide a single source of truth for mapping provider identifiers to their
  corresponding environment variable names (canonical first, then aliases).
- Offer small utilities to look up a provider credential and the default
  OpenAI-compatible base URL in a consistent way.

Design Notes
------------
- Gemini accepts ``GEMINI_API_KEY`` and ``GOOGLE_API_KEY``, then the shared
  ``UNIGEN_API_KEY``. The OpenAI family prefers the shared key, then
  ``OPENAI_API_KEY`` and finally ``GEMINI_API_KEY`` (proxies commonly accept
  either).
- Placeholder values (``changeme``, ``example`` ...) are skipped.

Failure Modes
-------------
Functions return ``None`` when nothing usable is set; callers decide whether
that is a configuration error.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Provider -> ordered tuple of acceptable env var names (canonical first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY", "UNIGEN_API_KEY"),
    "openai": ("UNIGEN_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY"),
}

# Default OpenAI-compatible base URL (used when no endpoint override is given).
API_BASE_ENV = "UNIGEN_API_BASE_URL"


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names for a provider in priority order.

    Unknown providers are treated as the OpenAI family.
    """
    p = (provider or "").lower()
    yield from ENV_ALIASES.get(p, ENV_ALIASES["openai"])


def resolve_provider_key(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Resolve an API key for a provider from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        (value, env_var_used); (None, None) when nothing usable is set.
    """
    for name in get_env_var_candidates(provider):
        val = (os.environ.get(name) or "").strip()
        if val and not is_placeholder(val):
            return val, name
    return None, None


def resolve_api_base() -> Optional[str]:
    """Return the environment-level OpenAI-compatible base URL, if configured."""
    val = (os.environ.get(API_BASE_ENV) or "").strip()
    return val or None


__all__ = [
    "ENV_ALIASES",
    "API_BASE_ENV",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
    "resolve_api_base",
]
