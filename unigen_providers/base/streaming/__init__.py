"""Streaming package for the adapter layer.

Exposes SSE decoding and ordered chunk delivery under a single namespace.
"""

from .chunk_sink import ChunkCallback, ChunkSink
from .sse import DONE_SENTINEL, SSEDecoder, iter_sse_payloads

__all__ = [
    "ChunkCallback",
    "ChunkSink",
    "DONE_SENTINEL",
    "SSEDecoder",
    "iter_sse_payloads",
]
