"""HTTP client construction for adapters.

Purpose:
    Provide one place that builds ``httpx.AsyncClient`` instances for the
    REST adapters (OpenAI-compatible and Gemini enterprise). Timeouts derive
    from :func:`get_timeout_config`; no hard-coded numeric literals.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Lifecycle:
    - Every generation call opens its own client and closes it when the call
      resolves, fails or is cancelled. Concurrent calls therefore share no
      connection state and need no locking.
    - Read timeouts are disabled: streaming bodies may idle between frames.
      The whole call is bounded by the caller (``with_timeout``) instead.

Test seam:
    ``set_default_transport`` installs an ``httpx`` transport (for example
    ``httpx.MockTransport``) used by every client created afterwards;
    ``reset_default_transport`` restores real networking.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ..timeouts import get_timeout_config

_DEFAULT_TRANSPORT: Optional[httpx.AsyncBaseTransport] = None


def create_async_client(*, transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` configured with the shared timeouts.

    Parameters:
        transport: Optional transport override; falls back to the transport
            installed via :func:`set_default_transport`.

    Returns:
        An ``httpx.AsyncClient``; use it as an async context manager.
    """
    cfg = get_timeout_config()
    timeout = httpx.Timeout(None, connect=cfg.connect_timeout_seconds)
    chosen = transport or _DEFAULT_TRANSPORT
    if chosen is not None:
        return httpx.AsyncClient(timeout=timeout, transport=chosen)
    return httpx.AsyncClient(timeout=timeout)


def set_default_transport(transport: Optional[httpx.AsyncBaseTransport]) -> None:
    """Install (or clear with ``None``) the transport used by new clients."""
    global _DEFAULT_TRANSPORT  # noqa: PLW0603 - documented test seam
    _DEFAULT_TRANSPORT = transport


def reset_default_transport() -> None:
    """Restore real networking for clients created afterwards."""
    set_default_transport(None)


__all__ = ["create_async_client", "set_default_transport", "reset_default_transport"]
