"""Shared call flow of the Gemini adapters.

``GeminiAdapterBase.generate`` runs one adapter invocation:

1. decide whether to stream (``should_stream``),
2. streaming pass, bounded by the timeout and the cancellation token,
3. on a streaming failure other than cancellation, and only while nothing
   has reached the caller, one non-streaming pass,
4. emit structured ``stream.*`` / ``chat.*`` events around it.

Subclasses provide the wire exchange (``_stream_pass`` / ``_complete_pass``).
Failures other than ``ProviderError`` and cancellation raised inside a pass
are wrapped into ``ProviderError`` by ``wrap_failure``.
"""
from __future__ import annotations

import time
from typing import Any, Awaitable, Callable

from ..base.cancellation import CancelledError
from ..base.errors import ProviderError, classify_exception, error_message, extract_status
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import GenerationRequest
from ..base.streaming import ChunkSink
from ..base.timeouts import run_bounded
from .extract import GeminiOutput


class GeminiAdapterBase:
    provider_name = "gemini"
    route = "gemini"
    error_prefix = "Gemini request failed"

    def __init__(self) -> None:
        self._logger = get_logger(f"providers.{self.route}")

    def should_stream(self, request: GenerationRequest) -> bool:  # pragma: no cover - abstract
        raise NotImplementedError

    async def _stream_pass(self, request: GenerationRequest, sink: ChunkSink) -> None:  # pragma: no cover
        raise NotImplementedError

    async def _complete_pass(self, request: GenerationRequest, sink: ChunkSink) -> None:  # pragma: no cover
        raise NotImplementedError

    def wrap_failure(self, exc: Exception, request: GenerationRequest) -> ProviderError:
        message = error_message(exc) or type(exc).__name__
        code = classify_exception(exc)
        return ProviderError(
            code=code,
            message=f"{self.error_prefix}: {message}",
            provider=self.provider_name,
            model=request.model,
            raw=exc,
            status=extract_status(exc, message),
        )

    async def _bounded(self, request: GenerationRequest, make: Callable[[], Awaitable[Any]]) -> None:
        async def _guarded() -> None:
            try:
                await make()
            except (ProviderError, CancelledError):
                raise
            except Exception as exc:
                raise self.wrap_failure(exc, request) from exc

        await run_bounded(
            _guarded,
            seconds=request.timeout_seconds,
            cancel_token=request.cancel_token,
            provider=self.provider_name,
            model=request.model,
            label=self.route,
        )

    async def generate(self, request: GenerationRequest, sink: ChunkSink) -> None:
        streaming = self.should_stream(request)
        ctx = LogContext(provider=self.provider_name, model=request.model, route=self.route, stream=streaming)
        t0 = time.perf_counter()
        try:
            if streaming:
                normalized_log_event(self._logger, "stream.start", ctx, phase="start", emitted=False)
                try:
                    await self._bounded(request, lambda: self._stream_pass(request, sink))
                except CancelledError:
                    raise
                except ProviderError as exc:
                    token = request.cancel_token
                    if sink.delivered_any or (token is not None and token.cancelled):
                        raise
                    normalized_log_event(
                        self._logger,
                        "stream.fallback",
                        ctx,
                        phase="fallback",
                        error_code=exc.code.value,
                        emitted=False,
                        error=exc.message[:500],
                    )
                else:
                    normalized_log_event(
                        self._logger,
                        "stream.end",
                        ctx,
                        phase="finalize",
                        emitted=sink.delivered_any,
                        chunks=sink.chunks_delivered,
                        latency_ms=round((time.perf_counter() - t0) * 1000.0, 1),
                    )
                    return
            else:
                normalized_log_event(self._logger, "chat.start", ctx, phase="start", emitted=False)
            await self._bounded(request, lambda: self._complete_pass(request, sink))
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
            "chat.end",
            ctx,
            phase="finalize",
            emitted=sink.delivered_any,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 1),
        )

    @staticmethod
    def emit_trailing_images(sink: ChunkSink, collected: GeminiOutput, emitted_text: bool) -> bool:
        """Emit images found during a streaming pass once, after the text."""
        if not collected.images:
            return False
        sink.emit(("\n\n" if emitted_text else "") + collected.image_markdown())
        return True


__all__ = ["GeminiAdapterBase"]
