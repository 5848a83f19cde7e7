"""Gemini enterprise (Vertex AI) adapter over raw REST.

URL:
    ``{base}/v1/projects/{project}/locations/{location}/publishers/google/models/{model}:{method}``
    with ``method`` ``generateContent`` or ``streamGenerateContent?alt=sse``.
    Path segments are percent-encoded. ``base`` is the origin of a non-Google
    endpoint override, else ``https://{location}-aiplatform.googleapis.com``.

Auth:
    ``Authorization: Bearer <OAuth access token>``.

Streaming:
    Only when requested, no image is part of the input (new turn or user
    history) and the model does not produce images. Text of each SSE frame is
    emitted as it arrives; images are emitted once after the stream ends.
"""
from __future__ import annotations

import json
from typing import Any, Dict
from urllib.parse import quote

from ..base.http import create_async_client
from ..base.models import GenerationRequest
from ..base.errors import http_error
from ..base.routing import EndpointKind, classify_endpoint, normalize_base_url
from ..base.streaming import DONE_SENTINEL, ChunkSink, iter_sse_payloads
from ..config.defaults import GEMINI_ENTERPRISE_BASE_URL_TEMPLATE, GEMINI_ENTERPRISE_DEFAULT_LOCATION
from .base import GeminiAdapterBase
from .contents import build_gemini_contents
from .extract import GeminiOutput, empty_response_error, extract_text_and_images, format_output
from .shared import build_generation_config, looks_like_image_output_model

ERROR_PREFIX = "enterprise request failed"


def _segment(value: str) -> str:
    return quote(value, safe="")


class GeminiEnterpriseAdapter(GeminiAdapterBase):
    """Adapter for the Vertex AI ``publishers/google`` model surface."""

    route = "gemini_enterprise"
    error_prefix = ERROR_PREFIX

    @staticmethod
    def location(request: GenerationRequest) -> str:
        return (request.extras.enterprise_location or "").strip() or GEMINI_ENTERPRISE_DEFAULT_LOCATION

    def endpoint_base(self, request: GenerationRequest) -> str:
        override = (request.base_url or "").strip()
        if override and classify_endpoint(override) is EndpointKind.OTHER:
            base = normalize_base_url(override)
            if base:
                return base.rstrip("/")
        return GEMINI_ENTERPRISE_BASE_URL_TEMPLATE.format(location=self.location(request))

    def build_url(self, request: GenerationRequest, *, stream: bool) -> str:
        method = "streamGenerateContent?alt=sse" if stream else "generateContent"
        project = request.extras.enterprise_project_id.strip()
        return (
            f"{self.endpoint_base(request)}/v1/projects/{_segment(project)}"
            f"/locations/{_segment(self.location(request))}"
            f"/publishers/google/models/{_segment(request.model)}:{method}"
        )

    def build_payload(self, request: GenerationRequest) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "contents": build_gemini_contents(request.history, request.text, request.images)
        }
        config = build_generation_config(request.model, request.extras.image_settings)
        if config is not None:
            payload["generationConfig"] = config
        return payload

    def build_headers(self, request: GenerationRequest, *, stream: bool) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {request.extras.enterprise_token.strip()}",
            "Accept": "text/event-stream" if stream else "application/json",
        }

    def should_stream(self, request: GenerationRequest) -> bool:
        return bool(
            request.stream
            and not request.has_any_images()
            and not looks_like_image_output_model(request.model)
        )

    async def _stream_pass(self, request: GenerationRequest, sink: ChunkSink) -> None:
        url = self.build_url(request, stream=True)
        body = json.dumps(self.build_payload(request))
        collected = GeminiOutput()
        emitted_text = False
        async with create_async_client() as client:
            async with client.stream("POST", url, content=body, headers=self.build_headers(request, stream=True)) as resp:
                if not resp.is_success:
                    text = (await resp.aread()).decode("utf-8", errors="replace")
                    raise http_error(
                        provider=self.provider_name,
                        model=request.model,
                        status=resp.status_code,
                        body=text,
                        prefix=ERROR_PREFIX,
                    )
                async for data in iter_sse_payloads(resp.aiter_bytes()):
                    if data == DONE_SENTINEL:
                        continue
                    try:
                        frame = json.loads(data)
                    except ValueError:
                        continue
                    out = extract_text_and_images(frame)
                    collected.merge(out)
                    if out.text:
                        sink.emit(out.text)
                        emitted_text = True
        if not self.emit_trailing_images(sink, collected, emitted_text) and not emitted_text:
            raise empty_response_error(self.provider_name, request.model)

    async def _complete_pass(self, request: GenerationRequest, sink: ChunkSink) -> None:
        url = self.build_url(request, stream=False)
        async with create_async_client() as client:
            resp = await client.post(
                url,
                content=json.dumps(self.build_payload(request)),
                headers=self.build_headers(request, stream=False),
            )
        if not resp.is_success:
            raise http_error(
                provider=self.provider_name,
                model=request.model,
                status=resp.status_code,
                body=resp.text,
                prefix=ERROR_PREFIX,
            )
        output = format_output(resp.json())
        if not output:
            raise empty_response_error(self.provider_name, request.model)
        sink.emit(output)


__all__ = ["GeminiEnterpriseAdapter"]
