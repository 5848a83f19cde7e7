"""Gemini ``contents`` construction from the message model.

Every turn becomes ``{"role": "user" | "model", "parts": [...]}``:

- one text part holding the text with inline image markers removed (only
  when something remains),
- one ``inlineData`` part per discovered image (explicit attachments plus
  markers found in the text), skipping remote URLs that carry no inline
  data,
- ``[{"text": ""}]`` when the turn yields no part at all.

Model turns echo their continuation signature as ``thoughtSignature`` on the
text part and on every image part. Keys use the REST (camelCase) form; the
official adapter converts them to SDK types.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence

from ..base.models import Message, Role
from ..base.utils.images import strip_image_markers

PENDING_MESSAGE_ID = "pending"


def message_parts(message: Message) -> List[Dict[str, Any]]:
    signature = message.resolved_signature() if message.role is Role.MODEL else None
    parts: List[Dict[str, Any]] = []
    text = strip_image_markers(message.text)
    if text:
        part: Dict[str, Any] = {"text": text}
        if signature:
            part["thoughtSignature"] = signature
        parts.append(part)
    for image in message.all_images():
        data = image.base64_data
        if not data:
            continue
        image_part: Dict[str, Any] = {"inlineData": {"mimeType": image.mime_type, "data": data}}
        if signature:
            image_part["thoughtSignature"] = signature
        parts.append(image_part)
    return parts or [{"text": ""}]


def build_gemini_contents(history: Sequence[Message], text: str, images: Sequence[str]) -> List[Dict[str, Any]]:
    """Return ``contents`` for ``history`` followed by the new user turn."""
    contents = [
        {"role": "user" if m.role is Role.USER else "model", "parts": message_parts(m)}
        for m in history
    ]
    pending = Message(id=PENDING_MESSAGE_ID, role=Role.USER, text=text or "", images=[u for u in images if u])
    contents.append({"role": "user", "parts": message_parts(pending)})
    return contents


__all__ = ["build_gemini_contents", "message_parts"]
