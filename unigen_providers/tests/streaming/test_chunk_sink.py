from __future__ import annotations

import pytest

from unigen_providers.base.cancellation import CancellationToken, CancelledError
from unigen_providers.base.streaming import ChunkSink


def test_empty_chunks_are_dropped(collector):
    sink = ChunkSink(collector)
    sink.emit("")
    sink.emit(None)
    assert not sink.delivered_any  # nosec B101
    sink.emit("a")
    sink.emit("b")
    assert collector.chunks == ["a", "b"]  # nosec B101
    assert sink.chunks_delivered == 2  # nosec B101


def test_nothing_is_delivered_after_cancel(collector):
    token = CancellationToken()
    sink = ChunkSink(collector, token)
    sink.emit("first")
    token.cancel("stop")
    with pytest.raises(CancelledError):
        sink.emit("second")
    assert collector.chunks == ["first"]  # nosec B101
    assert sink.chunks_delivered == 1  # nosec B101
