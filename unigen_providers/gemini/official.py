"""Gemini official API adapter using the ``google-genai`` SDK.

Purpose:
    Call ``generativelanguage.googleapis.com`` (or an official-host override)
    on the ``v1beta`` surface, authenticated by API key, through
    ``client.aio.models.generate_content`` / ``generate_content_stream``.

Streaming:
    Disabled for image-output models. Text of every streamed chunk is emitted
    as received; images collected over the stream are emitted once at the
    end. A stream that yields nothing is followed by a non-streaming call.

Lifecycle:
    Every pass creates its own ``genai.Client`` and closes its async transport
    (``client.aio.aclose()``) when the pass ends, whatever the outcome.

Failure Modes:
    SDK errors become ``ProviderError`` with the SDK ``code`` kept as
    ``status`` and the SDK message (including any ``retryDelay`` details)
    preserved, so the retry policy can read them.

Test seam:
    ``genai`` is resolved at call time from this module, so tests replace it
    with ``monkeypatch.setattr("unigen_providers.gemini.official.genai", fake)``.
"""
from __future__ import annotations

import base64
import binascii
from typing import Any, Dict, List, Optional

from google import genai
from google.genai import types

from ..base.models import GenerationRequest
from ..base.routing import normalize_base_url
from ..base.streaming import ChunkSink
from ..config.defaults import GEMINI_API_VERSION
from .base import GeminiAdapterBase
from .contents import build_gemini_contents
from .extract import GeminiOutput, empty_response_error, extract_text_and_images, format_output
from .shared import IMAGE_RESPONSE_MODALITIES, effective_image_settings, looks_like_image_output_model


def _decode_b64(value: str) -> bytes:
    try:
        return base64.b64decode(value, validate=False)
    except (binascii.Error, ValueError):
        return value.encode("utf-8")


def to_sdk_part(part: Dict[str, Any]) -> types.Part:
    """Convert one REST-shaped part into ``types.Part``."""
    signature = part.get("thoughtSignature")
    kwargs: Dict[str, Any] = {}
    if signature:
        kwargs["thought_signature"] = _decode_b64(signature)
    inline = part.get("inlineData")
    if inline:
        return types.Part(
            inline_data=types.Blob(mime_type=inline["mimeType"], data=_decode_b64(inline["data"])),
            **kwargs,
        )
    return types.Part(text=part.get("text", ""), **kwargs)


def to_sdk_contents(contents: List[Dict[str, Any]]) -> List[types.Content]:
    return [
        types.Content(role=item["role"], parts=[to_sdk_part(p) for p in item["parts"]])
        for item in contents
    ]


def build_sdk_config(request: GenerationRequest) -> Optional[types.GenerateContentConfig]:
    """``GenerateContentConfig`` for image-output models, else ``None``."""
    if not looks_like_image_output_model(request.model):
        return None
    config = types.GenerateContentConfig(response_modalities=list(IMAGE_RESPONSE_MODALITIES))
    settings = effective_image_settings(request.extras.image_settings)
    if settings is not None:
        image_config = types.ImageConfig(image_size=settings.resolution)
        if settings.aspect_ratio and settings.aspect_ratio != "auto":
            image_config.aspect_ratio = settings.aspect_ratio
        config.image_config = image_config
    return config


class GeminiOfficialAdapter(GeminiAdapterBase):
    """Adapter for the official Gemini API via ``google-genai``."""

    route = "gemini_official"

    def http_options(self, request: GenerationRequest) -> Dict[str, Any]:
        options: Dict[str, Any] = {"api_version": GEMINI_API_VERSION}
        base = normalize_base_url(request.base_url) if request.base_url else ""
        if base:
            options["base_url"] = base
        if request.timeout_seconds:
            options["timeout"] = int(request.timeout_seconds * 1000)
        return options

    def make_client(self, request: GenerationRequest) -> Any:
        return genai.Client(api_key=(request.credential or "").strip(), http_options=self.http_options(request))

    def should_stream(self, request: GenerationRequest) -> bool:
        return bool(request.stream and not looks_like_image_output_model(request.model))

    def _call_args(self, request: GenerationRequest) -> Dict[str, Any]:
        args: Dict[str, Any] = {
            "model": request.model,
            "contents": to_sdk_contents(build_gemini_contents(request.history, request.text, request.images)),
        }
        config = build_sdk_config(request)
        if config is not None:
            args["config"] = config
        return args

    async def _complete_pass(self, request: GenerationRequest, sink: ChunkSink) -> None:
        client = self.make_client(request)
        try:
            response = await client.aio.models.generate_content(**self._call_args(request))
        finally:
            await client.aio.aclose()
        output = format_output(response)
        if not output:
            raise empty_response_error(self.provider_name, request.model)
        sink.emit(output)

    async def _stream_pass(self, request: GenerationRequest, sink: ChunkSink) -> None:
        client = self.make_client(request)
        collected = GeminiOutput()
        emitted_text = False
        try:
            stream = await client.aio.models.generate_content_stream(**self._call_args(request))
            async for chunk in stream:
                out = extract_text_and_images(chunk)
                collected.merge(out)
                if out.text:
                    sink.emit(out.text)
                    emitted_text = True
        finally:
            await client.aio.aclose()
        if self.emit_trailing_images(sink, collected, emitted_text) or emitted_text:
            return
        await self._complete_pass(request, sink)


__all__ = [
    "GeminiOfficialAdapter",
    "build_sdk_config",
    "to_sdk_contents",
    "to_sdk_part",
]
