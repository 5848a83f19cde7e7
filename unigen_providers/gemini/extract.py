"""Frame extraction for Gemini responses.

Accepts REST bodies / SSE frames (dicts with camelCase keys, base64 strings)
as well as SDK response objects (dumped via ``model_dump``; snake_case keys,
raw ``bytes``). Only ``candidates[0].content.parts`` is inspected.

A part contributes:
- ``text`` (non-empty strings are concatenated in order),
- an image when ``inlineData``/``inline_data`` has an ``image/*`` mime type
  and non-empty data,
- a continuation signature (``thoughtSignature``/``thought_signature``).
  Signatures stay base64 text in the message model whatever the source.

Images are rendered as markdown whose title carries the escaped signature,
so the text stored in history round-trips the signature on the next turn.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..base.errors import ErrorCode, ProviderError
from ..base.models import ImageRef
from ..base.utils.images import format_image_markdown, to_data_url

EMPTY_RESPONSE_MESSAGE = "empty response (the prompt was likely filtered or the model produced no output)"


def _b64(value: Any) -> Optional[str]:
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii") if value else None
    if isinstance(value, str):
        return value or None
    return None


def _pick(container: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = container.get(key)
        if value is not None:
            return value
    return None


def _as_dict(response: Any) -> Dict[str, Any]:
    if isinstance(response, dict):
        return response
    dump = getattr(response, "model_dump", None)
    if callable(dump):
        data = dump(exclude_none=True)
        return data if isinstance(data, dict) else {}
    return {}


@dataclass
class GeminiOutput:
    """Text and images extracted from one or more Gemini frames.

    ``signature`` is the first signature seen on any part; it is attached to
    the first image when no image part carries its own.
    """

    text: str = ""
    images: List[ImageRef] = field(default_factory=list)
    signature: Optional[str] = None

    def merge(self, other: "GeminiOutput") -> None:
        self.text += other.text
        if not self.signature:
            self.signature = other.signature
        known = {img.url: img for img in self.images}
        for img in other.images:
            existing = known.get(img.url)
            if existing is None:
                copy = ImageRef(url=img.url, signature=img.signature)
                self.images.append(copy)
                known[img.url] = copy
            elif img.signature and not existing.signature:
                existing.signature = img.signature

    def resolved_images(self) -> List[ImageRef]:
        images = [ImageRef(url=img.url, signature=img.signature) for img in self.images]
        if images and self.signature and not any(img.signature for img in images):
            images[0].signature = self.signature
        return images

    def image_markdown(self) -> str:
        return "\n\n".join(format_image_markdown(img.url, img.signature) for img in self.resolved_images())

    def render(self) -> str:
        return "\n\n".join(piece for piece in (self.text, self.image_markdown()) if piece)


def extract_text_and_images(response: Any) -> GeminiOutput:
    """Extract text, images and signature from a response body or frame."""
    body = _as_dict(response)
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return GeminiOutput()
    content = candidates[0].get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    output = GeminiOutput()
    if not isinstance(parts, list):
        return output
    texts: List[str] = []
    for part in parts:
        if not isinstance(part, dict):
            continue
        text = part.get("text")
        if isinstance(text, str) and text:
            texts.append(text)
        signature = _b64(_pick(part, "thoughtSignature", "thought_signature"))
        if signature and not output.signature:
            output.signature = signature
        inline = _pick(part, "inlineData", "inline_data")
        if not isinstance(inline, dict):
            continue
        mime = _pick(inline, "mimeType", "mime_type")
        data = _b64(inline.get("data"))
        if isinstance(mime, str) and mime.startswith("image/") and data:
            output.images.append(ImageRef(url=to_data_url(mime, data), signature=signature))
    output.text = "".join(texts)
    return output


def format_output(response: Any) -> str:
    """Full rendered output of a terminal response ('' when empty)."""
    return extract_text_and_images(response).render()


def empty_response_error(provider: str, model: Optional[str]) -> ProviderError:
    return ProviderError(
        code=ErrorCode.EMPTY_RESPONSE,
        message=EMPTY_RESPONSE_MESSAGE,
        provider=provider,
        model=model,
    )


__all__ = [
    "GeminiOutput",
    "extract_text_and_images",
    "format_output",
    "empty_response_error",
    "EMPTY_RESPONSE_MESSAGE",
]
