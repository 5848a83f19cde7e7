"""HTTP utilities package for adapters.

Exposes per-call ``httpx.AsyncClient`` construction and the transport seam.
"""

from .client import create_async_client, reset_default_transport, set_default_transport

__all__ = ["create_async_client", "set_default_transport", "reset_default_transport"]
