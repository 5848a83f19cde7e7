"""Enterprise (Vertex) adapter over a mocked REST surface."""
from __future__ import annotations

import json

import httpx
import pytest

from unigen_providers.base.cancellation import CancellationToken, CancelledError
from unigen_providers.base.errors import ErrorCode, ProviderError
from unigen_providers.base.http import set_default_transport
from unigen_providers.base.models import GenerationExtras, GenerationRequest, Message, Role
from unigen_providers.base.streaming import ChunkSink
from unigen_providers.gemini import GeminiEnterpriseAdapter

IMG = "data:image/png;base64,iVBORw0KGgo" + "E" * 70


def _request(**kw) -> GenerationRequest:
    base = dict(
        model="gemini-2.5-pro",
        history=[],
        text="hi",
        stream=True,
        provider="gemini",
        extras=GenerationExtras(
            enterprise_enabled=True,
            enterprise_project_id="my proj/1",
            enterprise_location="europe-west4",
            enterprise_token="ya29.tok",
        ),
        timeout_seconds=5,
    )
    base.update(kw)
    return GenerationRequest(**base)


def _frame(*parts) -> bytes:
    body = {"candidates": [{"content": {"role": "model", "parts": list(parts)}}]}
    return f"data: {json.dumps(body)}\n\n".encode()


def _install(handler) -> list[httpx.Request]:
    seen: list[httpx.Request] = []

    def _wrapped(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    set_default_transport(httpx.MockTransport(_wrapped))
    return seen


def test_url_encodes_segments_and_honours_override():
    adapter = GeminiEnterpriseAdapter()
    req = _request(model="gemini-2.5-pro")
    assert adapter.build_url(req, stream=True) == (  # nosec B101
        "https://europe-west4-aiplatform.googleapis.com/v1/projects/my%20proj%2F1"
        "/locations/europe-west4/publishers/google/models/gemini-2.5-pro:streamGenerateContent?alt=sse"
    )
    proxied = _request(base_url="https://vertex-proxy.example.com/some/path")
    assert adapter.build_url(proxied, stream=False).startswith(  # nosec B101
        "https://vertex-proxy.example.com/v1/projects/"
    )
    assert adapter.build_url(proxied, stream=False).endswith(":generateContent")  # nosec B101
    assert adapter.build_headers(req, stream=False)["Authorization"] == "Bearer ya29.tok"  # nosec B101


def test_blank_location_defaults():
    req = _request()
    req.extras = req.extras.model_copy(update={"enterprise_location": "  "})
    assert GeminiEnterpriseAdapter.location(req) == "us-central1"  # nosec B101


def test_streaming_is_disabled_for_image_inputs_and_models():
    adapter = GeminiEnterpriseAdapter()
    assert adapter.should_stream(_request())  # nosec B101
    assert not adapter.should_stream(_request(images=[IMG]))  # nosec B101
    assert not adapter.should_stream(_request(history=[Message(id="u", role=Role.USER, text=IMG)]))  # nosec B101
    assert not adapter.should_stream(_request(model="gemini-2.5-flash-image"))  # nosec B101
    # images in earlier model replies do not count as input images
    assert adapter.should_stream(_request(history=[Message(id="m", role=Role.MODEL, text=IMG)]))  # nosec B101


@pytest.mark.asyncio
async def test_streams_text_then_trailing_images(collector):
    def handler(request):
        return httpx.Response(
            200,
            content=_frame({"text": "Hel"})
            + _frame({"text": "lo"}, {"inlineData": {"mimeType": "image/png", "data": "QUJD"}, "thoughtSignature": "U0k="}),
        )

    seen = _install(handler)
    await GeminiEnterpriseAdapter().generate(_request(), ChunkSink(collector))

    assert collector.chunks[:2] == ["Hel", "lo"]  # nosec B101
    assert collector.chunks[2] == '\n\n![image](data:image/png;base64,QUJD "U0k=")'  # nosec B101
    assert len(seen) == 1 and seen[0].url.params["alt"] == "sse"  # nosec B101
    assert json.loads(seen[0].content)["contents"] == [{"role": "user", "parts": [{"text": "hi"}]}]  # nosec B101


@pytest.mark.asyncio
async def test_stream_failure_falls_back_to_single_call(collector):
    def handler(request):
        if "streamGenerateContent" in request.url.path:
            return httpx.Response(500, text="stream broke")
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "full answer"}]}}]})

    seen = _install(handler)
    await GeminiEnterpriseAdapter().generate(_request(), ChunkSink(collector))
    assert collector.chunks == ["full answer"]  # nosec B101
    assert [r.url.path.rsplit(":", 1)[-1] for r in seen] == ["streamGenerateContent", "generateContent"]  # nosec B101


@pytest.mark.asyncio
async def test_empty_stream_falls_back_then_reports_empty(collector):
    def handler(request):
        if "streamGenerateContent" in request.url.path:
            return httpx.Response(200, content=_frame({"text": ""}))
        return httpx.Response(200, json={"candidates": [{"finishReason": "SAFETY"}]})

    _install(handler)
    with pytest.raises(ProviderError) as ei:
        await GeminiEnterpriseAdapter().generate(_request(), ChunkSink(collector))
    assert ei.value.code is ErrorCode.EMPTY_RESPONSE  # nosec B101
    assert collector.chunks == []  # nosec B101


@pytest.mark.asyncio
async def test_non_streaming_error_keeps_status_and_prefix(collector):
    def handler(request):
        return httpx.Response(403, text="permission denied on project")

    _install(handler)
    with pytest.raises(ProviderError) as ei:
        await GeminiEnterpriseAdapter().generate(_request(stream=False), ChunkSink(collector))
    assert ei.value.status == 403  # nosec B101
    assert ei.value.message.startswith("enterprise request failed: 403")  # nosec B101


@pytest.mark.asyncio
async def test_image_model_sends_generation_config(collector):
    def handler(request):
        payload = json.loads(request.content)
        assert payload["generationConfig"]["responseModalities"] == ["TEXT", "IMAGE"]  # nosec B101
        return httpx.Response(
            200,
            json={"candidates": [{"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": "QUJD"}}]}}]},
        )

    seen = _install(handler)
    await GeminiEnterpriseAdapter().generate(_request(model="gemini-2.5-flash-image"), ChunkSink(collector))
    assert collector.chunks == ["![image](data:image/png;base64,QUJD)"]  # nosec B101
    assert seen[0].url.path.endswith(":generateContent")  # nosec B101


@pytest.mark.asyncio
async def test_cancel_mid_stream_skips_fallback():
    token = CancellationToken()
    seen_chunks: list[str] = []

    def on_chunk(chunk: str) -> None:
        seen_chunks.append(chunk)
        token.cancel("user stop")

    seen = _install(lambda request: httpx.Response(200, content=_frame({"text": "one"}) + _frame({"text": "two"})))
    with pytest.raises(CancelledError):
        await GeminiEnterpriseAdapter().generate(_request(cancel_token=token), ChunkSink(on_chunk, token))
    assert seen_chunks == ["one"]  # nosec B101
    assert len(seen) == 1  # nosec B101
