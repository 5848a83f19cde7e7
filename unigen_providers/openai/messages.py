"""Chat-completions message construction for OpenAI-compatible endpoints.

History turns map ``Role.USER`` to ``"user"`` and ``Role.MODEL`` to
``"assistant"``. Assistant content is always plain text. User content is plain
text unless images are attached, in which case it becomes the multi-part form
``[{"type": "text", ...}, {"type": "image_url", ...}, ...]``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Sequence, Union

from ..base.models import Message, Role

Content = Union[str, List[Dict[str, Any]]]


def user_image_urls(message: Message) -> List[str]:
    """Explicit image URLs of a user turn (model turns contribute none)."""
    if message.role is not Role.USER:
        return []
    return [img.url for img in message.images if img.url]


def to_user_content(text: str, images: Sequence[str]) -> Content:
    if not images:
        return text or ""
    parts: List[Dict[str, Any]] = [{"type": "text", "text": text or ""}]
    parts.extend({"type": "image_url", "image_url": {"url": url}} for url in images)
    return parts


def build_openai_messages(history: Sequence[Message], text: str, images: Sequence[str]) -> List[Dict[str, Any]]:
    """Return the ``messages`` array for history plus the new user turn."""
    messages: List[Dict[str, Any]] = []
    for m in history:
        if m.role is Role.USER:
            messages.append({"role": "user", "content": to_user_content(m.text, user_image_urls(m))})
        else:
            messages.append({"role": "assistant", "content": m.text or ""})
    messages.append({"role": "user", "content": to_user_content(text, [u for u in images if u])})
    return messages


__all__ = ["build_openai_messages", "to_user_content", "user_image_urls"]
