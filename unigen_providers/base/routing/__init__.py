"""Routing helpers: endpoint and credential classification."""

from .endpoints import (
    CredentialKind,
    EndpointKind,
    classify_credential,
    classify_endpoint,
    normalize_base_url,
)

__all__ = [
    "CredentialKind",
    "EndpointKind",
    "classify_credential",
    "classify_endpoint",
    "normalize_base_url",
]
