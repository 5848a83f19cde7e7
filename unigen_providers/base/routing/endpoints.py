"""Endpoint and credential classifiers used by the provider router.

Both classifiers are pure string heuristics with no I/O:

- ``classify_credential``: Google API keys have the shape ``AIza`` followed
  by at least ten URL-safe base64 characters. Anything else (proxy keys,
  bearer tokens) is ``OTHER``.
- ``classify_endpoint``: an endpoint is ``GOOGLE`` when its hostname is the
  official Gemini host. Unparseable input falls back to a substring check.

``normalize_base_url`` reduces an override to its origin so adapters can
append their own paths.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Optional
from urllib.parse import urlsplit

from ...config.defaults import GEMINI_OFFICIAL_HOST

_GOOGLE_KEY_RE = re.compile(r"^AIza[0-9A-Za-z\-_]{10,}$")


class CredentialKind(str, Enum):
    GOOGLE_SHAPED = "google_shaped"
    OTHER = "other"


class EndpointKind(str, Enum):
    GOOGLE = "google"
    OTHER = "other"


def classify_credential(value: Optional[str]) -> CredentialKind:
    """Classify a credential by shape after trimming whitespace."""
    if value and _GOOGLE_KEY_RE.match(value.strip()):
        return CredentialKind.GOOGLE_SHAPED
    return CredentialKind.OTHER


def _hostname(url: str) -> Optional[str]:
    try:
        parts = urlsplit(url)
        return parts.hostname if parts.scheme and parts.netloc else None
    except ValueError:
        return None


def classify_endpoint(url: Optional[str]) -> EndpointKind:
    """Return ``GOOGLE`` for URLs on the official Gemini host."""
    if not url:
        return EndpointKind.OTHER
    raw = url.strip()
    host = _hostname(raw)
    if host is None:
        return EndpointKind.GOOGLE if GEMINI_OFFICIAL_HOST in raw else EndpointKind.OTHER
    return EndpointKind.GOOGLE if host.lower() == GEMINI_OFFICIAL_HOST else EndpointKind.OTHER


def normalize_base_url(url: str) -> str:
    """Return ``scheme://host[:port]`` for a URL, else the input without trailing slashes."""
    raw = url.strip()
    try:
        parts = urlsplit(raw)
    except ValueError:
        return raw.rstrip("/")
    if parts.scheme and parts.netloc:
        return f"{parts.scheme}://{parts.netloc}"
    return raw.rstrip("/")


__all__ = [
    "CredentialKind",
    "EndpointKind",
    "classify_credential",
    "classify_endpoint",
    "normalize_base_url",
]
