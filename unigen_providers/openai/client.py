"""OpenAI-compatible chat-completions adapter.

Purpose:
    Talk to any endpoint implementing ``POST /v1/chat/completions`` (OpenAI
    itself, relays and proxies, including proxies fronting Gemini models).
    Raw ``httpx`` is used instead of a vendor SDK because proxies stream
    shapes an SDK would reject: plain-text SSE payloads, status/log frames,
    reasoning fields and bodies that need the deep-scan fallback.

Behavior:
    - Non-streaming: exactly one chunk (see ``extract_nonstream_text``).
    - Streaming: every non-empty piece is emitted as soon as its SSE event
      completes; read boundaries never affect the output.

Failure Modes:
    - Non-2xx: ``ProviderError`` from ``http_error`` carrying status and body.
    - Transport failure: ``ProviderError`` (``TRANSIENT`` / ``TIMEOUT``);
      when images were part of the request the message mentions image size
      and proxy image support.
    - Cancellation: ``CancelledError``; the connection is closed.

Timeouts:
    The whole exchange is bounded by ``request.timeout_seconds`` when set.
"""

from __future__ import annotations

import json
import time
from typing import Any, Dict

import httpx

from ..base.errors import ErrorCode, ProviderError, classify_exception, http_error
from ..base.http import create_async_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import GenerationRequest
from ..base.streaming import ChunkSink, iter_sse_payloads
from ..base.timeouts import run_bounded
from ..config.defaults import OPENAI_CHAT_COMPLETIONS_PATH, OPENAI_DEFAULT_BASE_URL
from .extract import extract_nonstream_text, parse_stream_payload
from .messages import build_openai_messages

IMAGE_FAILURE_HINT = (
    "image request failed: {error} (the image may be too large or the relay may not "
    "support images; try compressing the image or switching relay)"
)


def chat_completions_url(base_url: str | None) -> str:
    base = (base_url or "").strip() or OPENAI_DEFAULT_BASE_URL
    return base.rstrip("/") + OPENAI_CHAT_COMPLETIONS_PATH


class OpenAICompatAdapter:
    """Adapter for OpenAI-compatible chat-completions endpoints."""

    provider_name = "openai"
    route = "openai_compat"

    def __init__(self) -> None:
        self._logger = get_logger("providers.openai")

    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        return {
            "model": request.model,
            "stream": bool(request.stream),
            "messages": build_openai_messages(request.history, request.text, request.images),
        }

    def build_headers(self, request: GenerationRequest) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {(request.credential or '').strip()}",
            "Accept": "text/event-stream" if request.stream else "application/json",
        }

    async def generate(self, request: GenerationRequest, sink: ChunkSink) -> None:
        """Run one request/response exchange, emitting output through ``sink``."""
        ctx = LogContext(provider=request.provider, model=request.model, route=self.route, stream=request.stream)
        event = "stream" if request.stream else "chat"
        normalized_log_event(self._logger, f"{event}.start", ctx, phase="start", emitted=False)
        t0 = time.perf_counter()
        try:
            await run_bounded(
                lambda: self._exchange(request, sink),
                seconds=request.timeout_seconds,
                cancel_token=request.cancel_token,
                provider=request.provider,
                model=request.model,
            )
        except ProviderError as exc:
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                error_code=exc.code.value,
                emitted=sink.delivered_any,
                status=exc.status,
                error=exc.message[:500],
            )
            raise
        normalized_log_event(
            self._logger,
            f"{event}.end",
            ctx,
            phase="finalize",
            emitted=sink.delivered_any,
            chunks=sink.chunks_delivered,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 1),
        )

    async def _exchange(self, request: GenerationRequest, sink: ChunkSink) -> None:
        url = chat_completions_url(request.base_url)
        payload = self.build_payload(request)
        headers = self.build_headers(request)
        try:
            async with create_async_client() as client:
                if request.stream:
                    await self._stream(client, url, payload, headers, request, sink)
                else:
                    await self._complete(client, url, payload, headers, request, sink)
        except httpx.TransportError as exc:
            raise self._transport_error(exc, request) from exc

    async def _complete(
        self,
        client: httpx.AsyncClient,
        url: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        request: GenerationRequest,
        sink: ChunkSink,
    ) -> None:
        resp = await client.post(url, json=payload, headers=headers)
        if not resp.is_success:
            raise http_error(provider=request.provider, model=request.model, status=resp.status_code, body=resp.text)
        try:
            body = resp.json()
        except ValueError as exc:
            raise ProviderError(
                code=ErrorCode.UNKNOWN,
                message=f"invalid JSON response: {resp.text[:200]}",
                provider=request.provider,
                model=request.model,
                raw=exc,
                status=resp.status_code,
                body=resp.text,
            ) from exc
        sink.emit(extract_nonstream_text(body))

    async def _stream(
        self,
        client: httpx.AsyncClient,
        url: str,
        payload: Dict[str, Any],
        headers: Dict[str, str],
        request: GenerationRequest,
        sink: ChunkSink,
    ) -> None:
        async with client.stream("POST", url, content=json.dumps(payload), headers=headers) as resp:
            if not resp.is_success:
                body = (await resp.aread()).decode("utf-8", errors="replace")
                raise http_error(provider=request.provider, model=request.model, status=resp.status_code, body=body)
            async for data in iter_sse_payloads(resp.aiter_bytes()):
                piece = parse_stream_payload(data)
                if piece:
                    sink.emit(piece)

    def _transport_error(self, exc: httpx.TransportError, request: GenerationRequest) -> ProviderError:
        detail = str(exc) or type(exc).__name__
        code = classify_exception(exc)
        if request.has_any_images():
            message = IMAGE_FAILURE_HINT.format(error=detail)
        else:
            message = detail
        return ProviderError(
            code=code,
            message=message,
            provider=request.provider,
            model=request.model,
            retryable=code in (ErrorCode.TRANSIENT, ErrorCode.TIMEOUT),
            raw=exc,
        )


__all__ = ["OpenAICompatAdapter", "chat_completions_url", "IMAGE_FAILURE_HINT"]
