"""Text extraction from OpenAI-compatible response bodies and stream frames.

Proxies in front of chat-completions disagree on shapes. Recognized, in
order of preference:

- ``content`` as a string, a list of parts (``text`` / ``content`` strings,
  nested ``content`` lists, ``data`` strings or lists) or an object with
  ``text`` / ``content``;
- reasoning carried as ``reasoning_content`` (list) or ``thinking`` (list or
  string);
- status-style strings (``message``, ``status_text``, ``log``, ``thinking``)
  used by log-streaming proxies.

When nothing matches, :func:`collect_deep_text` scans the whole body.
"""
from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..base.utils.deep_text import collect_deep_text

_STATUS_KEYS = ("message", "status_text", "log", "thinking")
# ``thinking`` inside a delta is already reasoning text
_DELTA_STATUS_KEYS = ("message", "status_text", "log")


def _leaf_text(part: Any) -> str:
    if not part:
        return ""
    if isinstance(part, str):
        return part
    if isinstance(part, dict):
        if isinstance(part.get("text"), str):
            return part["text"]
        if isinstance(part.get("content"), str):
            return part["content"]
    return ""


def _part_text(part: Any) -> str:
    if not part:
        return ""
    if isinstance(part, str):
        return part
    if not isinstance(part, dict):
        return ""
    if isinstance(part.get("text"), str):
        return part["text"]
    content = part.get("content")
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(_leaf_text(p) for p in content)
    data = part.get("data")
    if isinstance(data, str):
        return data
    if isinstance(data, list):
        return "".join(
            p if isinstance(p, str) else (p.get("text") if isinstance(p, dict) and isinstance(p.get("text"), str) else "")
            for p in data
            if p
        )
    return ""


def extract_text_from_content(content: Any) -> str:
    """Flatten a ``content`` value of any recognized shape to text."""
    if not content:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(_part_text(p) for p in content)
    if isinstance(content, dict):
        return _leaf_text(content)
    return ""


def extract_reasoning_text(container: Any) -> str:
    """Reasoning text of a message/delta: ``reasoning_content`` then ``thinking``."""
    if not isinstance(container, dict):
        return ""
    if isinstance(container.get("reasoning_content"), list):
        text = extract_text_from_content(container["reasoning_content"])
        if text:
            return text
    thinking = container.get("thinking")
    if isinstance(thinking, list):
        text = extract_text_from_content(thinking)
        if text:
            return text
    if isinstance(thinking, str):
        return thinking
    return ""


def _append(text: str, piece: str) -> str:
    if not piece:
        return text
    return f"{text}\n{piece}" if text else piece


def _first_choice(body: Dict[str, Any]) -> Dict[str, Any]:
    choices = body.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def extract_nonstream_text(body: Any) -> str:
    """Return the single chunk delivered for a non-streaming response.

    Content, reasoning, top-level ``log`` and top-level ``thinking`` are
    joined by newlines. Empty result falls back to the deep scan, then to
    the JSON dump of the body.
    """
    if not isinstance(body, dict):
        return collect_deep_text(body) or json.dumps(body, ensure_ascii=False)
    message = _first_choice(body).get("message") or body.get("message") or {}
    text = ""
    if isinstance(message, dict):
        text = extract_text_from_content(message.get("content"))
        text = _append(text, extract_reasoning_text(message))
    for key in ("log", "thinking"):
        if isinstance(body.get(key), str):
            text = _append(text, body[key])
    if not text:
        text = collect_deep_text(body) or json.dumps(body, ensure_ascii=False)
    return text


def _delta_piece(delta: Dict[str, Any]) -> str:
    piece = extract_reasoning_text(delta)
    content = delta.get("content")
    if isinstance(content, str):
        piece += content
    elif content:
        piece += extract_text_from_content(content)
    for key in _DELTA_STATUS_KEYS:
        if isinstance(delta.get(key), str):
            piece = _append(piece, delta[key])
    return piece


def extract_stream_piece(frame: Any) -> str:
    """Return the text carried by one decoded JSON stream frame ('' if none)."""
    if not isinstance(frame, dict):
        return collect_deep_text(frame)
    choice = _first_choice(frame)
    delta = choice.get("delta") or choice.get("message") or frame.get("delta") or frame.get("message")
    piece = _delta_piece(delta) if isinstance(delta, dict) else ""
    if piece:
        return piece
    for key in _STATUS_KEYS:
        if isinstance(frame.get(key), str):
            return frame[key]
    message = choice.get("message")
    if message:
        if not isinstance(message, dict):
            return ""
        text = extract_text_from_content(message.get("content"))
        return _append(text, extract_reasoning_text(message))
    return collect_deep_text(frame)


def parse_stream_payload(payload: str) -> Optional[str]:
    """Turn one SSE ``data:`` payload into the chunk to emit.

    Returns ``None`` when the payload must be skipped (``[DONE]``, invalid
    JSON, frames carrying no text). Payloads not shaped like JSON are
    passed through verbatim.
    """
    if not payload or payload == "[DONE]":
        return None
    if not payload.startswith(("{", "[")):
        return payload
    try:
        frame = json.loads(payload)
    except ValueError:
        return None
    return extract_stream_piece(frame) or None


__all__: List[str] = [
    "extract_text_from_content",
    "extract_reasoning_text",
    "extract_nonstream_text",
    "extract_stream_piece",
    "parse_stream_payload",
]
