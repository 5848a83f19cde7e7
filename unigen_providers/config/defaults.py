"""unigen_providers.config.defaults
================================

Central place for small, stable default values used across the
unigen_providers package. These defaults can be overridden via environment
variables or call arguments, but provide sensible fallbacks for local
development and tests.

Module Purpose
--------------
- Provide a single import location for conservative default constants (no I/O).
- Keep adapters free of magic literals (hosts, timeouts, retry budget,
  deep-scan tuning).

This module intentionally avoids importing from other packages to prevent
circular dependencies. Only plain constants should live here.
"""

from __future__ import annotations

# ---- Hosts ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com"
OPENAI_CHAT_COMPLETIONS_PATH = "/v1/chat/completions"

GEMINI_OFFICIAL_HOST = "generativelanguage.googleapis.com"
GEMINI_DEFAULT_BASE_URL = f"https://{GEMINI_OFFICIAL_HOST}"
GEMINI_API_VERSION = "v1beta"

# Enterprise (Vertex) base is derived from the location.
GEMINI_ENTERPRISE_DEFAULT_LOCATION = "us-central1"
GEMINI_ENTERPRISE_BASE_URL_TEMPLATE = "https://{location}-aiplatform.googleapis.com"


# ---- Timeouts ----
# Bound for a hung Gemini call (request + body), milliseconds.
DEFAULT_GENERATION_TIMEOUT_MS = 120_000
DEFAULT_CONNECT_TIMEOUT_SECONDS = 30.0


# ---- Retry (Gemini paths) ----
RETRY_MAX_RETRIES = 2
RETRY_BASE_DELAY_MS = 2000
RETRY_MAX_DELAY_MS = 10_000


# ---- Deep-scan text fallback ----
DEEP_SCAN_MIN_LENGTH = 12
DEEP_SCAN_IGNORE_KEYS = frozenset(
    {"id", "object", "model", "created", "role", "finish_reason", "type"}
)


# ---- Image handling ----
DEFAULT_IMAGE_MIME_TYPE = "image/png"


__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "OPENAI_CHAT_COMPLETIONS_PATH",
    "GEMINI_OFFICIAL_HOST",
    "GEMINI_DEFAULT_BASE_URL",
    "GEMINI_API_VERSION",
    "GEMINI_ENTERPRISE_DEFAULT_LOCATION",
    "GEMINI_ENTERPRISE_BASE_URL_TEMPLATE",
    "DEFAULT_GENERATION_TIMEOUT_MS",
    "DEFAULT_CONNECT_TIMEOUT_SECONDS",
    "RETRY_MAX_RETRIES",
    "RETRY_BASE_DELAY_MS",
    "RETRY_MAX_DELAY_MS",
    "DEEP_SCAN_MIN_LENGTH",
    "DEEP_SCAN_IGNORE_KEYS",
    "DEFAULT_IMAGE_MIME_TYPE",
]
