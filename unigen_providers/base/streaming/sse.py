"""Incremental server-sent-events decoding.

``SSEDecoder`` turns arbitrary byte chunks (as delivered by the transport)
into ``data:`` payload strings. Read boundaries may fall anywhere: inside a
multi-byte UTF-8 sequence, inside ``\\r\\n`` or inside an event. Bytes that
do not yet complete an event are carried over to the next ``feed`` call.

Rules:
- UTF-8 is decoded incrementally; CRLF is normalized to LF.
- Events are separated by a blank line.
- Each line of an event starting with ``data:`` yields one payload (stripped).
- Empty payloads are skipped; ``[DONE]`` is reported like any payload and
  left to the caller to interpret.
- At end of stream, a trailing event without the final blank line is still
  decoded.
"""
from __future__ import annotations

import codecs
from typing import AsyncIterable, AsyncIterator, List

DONE_SENTINEL = "[DONE]"


class SSEDecoder:
    """Stateful decoder from raw bytes to ``data:`` payloads."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""

    def feed(self, chunk: bytes) -> List[str]:
        """Consume ``chunk`` and return payloads of every event it completes."""
        self._buffer += self._decoder.decode(chunk)
        self._buffer = self._buffer.replace("\r\n", "\n")
        *events, self._buffer = self._buffer.split("\n\n")
        return [payload for event in events for payload in _event_payloads(event)]

    def flush(self) -> List[str]:
        """Decode whatever remains at end of stream."""
        self._buffer += self._decoder.decode(b"", final=True)
        remainder, self._buffer = self._buffer.replace("\r\n", "\n"), ""
        payloads: List[str] = []
        for event in remainder.split("\n\n"):
            payloads.extend(_event_payloads(event))
        return payloads


def _event_payloads(event: str) -> List[str]:
    payloads: List[str] = []
    for raw_line in event.split("\n"):
        line = raw_line.strip()
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if data:
            payloads.append(data)
    return payloads


async def iter_sse_payloads(chunks: AsyncIterable[bytes]) -> AsyncIterator[str]:
    """Yield ``data:`` payloads from an async byte stream as soon as each event completes."""
    decoder = SSEDecoder()
    async for chunk in chunks:
        for payload in decoder.feed(chunk):
            yield payload
    for payload in decoder.flush():
        yield payload


__all__ = ["SSEDecoder", "iter_sse_payloads", "DONE_SENTINEL"]
