"""Ordered, cancellation-guarded chunk delivery.

Adapters never call the caller's ``on_chunk`` directly; they emit through a
``ChunkSink`` owned by the current attempt. The sink:

- drops empty strings,
- checks the cancellation token before every delivery, so nothing reaches
  the caller once cancellation has been observed,
- records whether anything was delivered (the retry policy forfeits retry
  eligibility after partial delivery; adapters only fall back from
  streaming to non-streaming while nothing was delivered).
"""
from __future__ import annotations

from typing import Callable, Optional

from ..cancellation import CancellationToken

ChunkCallback = Callable[[str], None]


class ChunkSink:
    """Per-attempt relay from adapter output to the caller's callback."""

    def __init__(self, on_chunk: ChunkCallback, cancel_token: Optional[CancellationToken] = None) -> None:
        self._on_chunk = on_chunk
        self._cancel_token = cancel_token
        self.chunks_delivered = 0

    @property
    def delivered_any(self) -> bool:
        return self.chunks_delivered > 0

    def emit(self, text: Optional[str]) -> None:
        """Deliver ``text`` synchronously unless empty; raise if cancelled."""
        if not text:
            return
        if self._cancel_token is not None:
            self._cancel_token.raise_if_cancelled()
        self.chunks_delivered += 1
        self._on_chunk(text)


__all__ = ["ChunkSink", "ChunkCallback"]
