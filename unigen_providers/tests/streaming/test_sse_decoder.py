"""SSE decoding must not depend on where the transport splits the bytes."""
from __future__ import annotations

import pytest

from unigen_providers.base.streaming import SSEDecoder, iter_sse_payloads

RAW = (
    'data: {"choices":[{"delta":{"content":"héllo"}}]}\r\n\r\n'
    ": keep-alive comment\n\n"
    "event: message\ndata: plain text payload\n\n"
    "data:\n\n"
    "data: 世界\n\n"
    "data: [DONE]\n\n"
).encode("utf-8")

EXPECTED = [
    '{"choices":[{"delta":{"content":"héllo"}}]}',
    "plain text payload",
    "世界",
    "[DONE]",
]


def _decode(chunks):
    decoder = SSEDecoder()
    out = []
    for chunk in chunks:
        out.extend(decoder.feed(chunk))
    out.extend(decoder.flush())
    return out


def test_single_chunk():
    assert _decode([RAW]) == EXPECTED  # nosec B101


@pytest.mark.parametrize("size", [1, 2, 3, 5, 7, 64])
def test_fixed_size_splits(size):
    chunks = [RAW[i : i + size] for i in range(0, len(RAW), size)]
    assert _decode(chunks) == EXPECTED  # nosec B101


def test_split_inside_multibyte_and_crlf():
    cut_utf8 = RAW.index("é".encode()) + 1
    cut_crlf = RAW.index(b"\r\n") + 1
    chunks = [RAW[:cut_utf8], RAW[cut_utf8:cut_crlf], RAW[cut_crlf:]]
    assert _decode(chunks) == EXPECTED  # nosec B101


def test_trailing_event_without_blank_line_is_flushed():
    decoder = SSEDecoder()
    assert decoder.feed(b"data: tail") == []  # nosec B101
    assert decoder.flush() == ["tail"]  # nosec B101


@pytest.mark.asyncio
async def test_iter_sse_payloads_yields_as_events_complete():
    async def chunks():
        yield b"data: a\n"
        yield b"\ndata: b"
        yield b"\n\n"

    assert [p async for p in iter_sse_payloads(chunks())] == ["a", "b"]  # nosec B101
