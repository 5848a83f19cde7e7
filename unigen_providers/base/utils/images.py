"""Inline image markers inside message text.

Generated images travel through the conversation history as plain text, in
one of three shapes:

- markdown image syntax ``![alt](data:image/png;base64,... "signature")``,
  where the optional title carries an escaped continuation signature;
- a bare ``data:image/...;base64,...`` URL;
- a raw base64 run of a well-known image format without any prefix.

This module finds all three (deduplicated by URL), strips them from text
and formats the markdown form. Everything here is pure and side-effect free.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ...config.defaults import DEFAULT_IMAGE_MIME_TYPE

_DATA_URL = r"data:image/[a-zA-Z0-9.+-]+;base64,[A-Za-z0-9+/=]+"
DATA_URL_RE = re.compile(_DATA_URL)

# ![alt](url "title") with an optional backslash-escaped title.
MARKDOWN_IMAGE_RE = re.compile(
    r"!\[[^\]]*\]\(\s*<?(?P<url>[^\s)>]+)>?(?:\s+\"(?P<title>(?:[^\"\\]|\\.)*)\")?\s*\)",
    re.DOTALL,
)

# Base64 magic prefixes of common image formats.
_RAW_PREFIXES: Dict[str, str] = {
    "iVBORw0KGgo": "image/png",
    "/9j/": "image/jpeg",
    "R0lGOD": "image/gif",
    "UklGR": "image/webp",
}
RAW_BASE64_RE = re.compile(
    r"(?<![A-Za-z0-9+/=,])(?P<data>(?:iVBORw0KGgo|/9j/|R0lGOD|UklGR)[A-Za-z0-9+/]{64,}={0,2})"
)

_TITLE_ESCAPE_RE = re.compile(r"\\(.)", re.DOTALL)


@dataclass(frozen=True)
class InlineImage:
    """An image marker found in text (URL plus optional signature)."""

    url: str
    signature: Optional[str] = None


def escape_title(value: str) -> str:
    """Escape a string for use inside a double-quoted markdown title."""
    return value.replace("\\", "\\\\").replace('"', '\\"')


def unescape_title(value: str) -> str:
    """Inverse of :func:`escape_title`."""
    return _TITLE_ESCAPE_RE.sub(r"\1", value)


def format_image_markdown(url: str, signature: Optional[str] = None, alt: str = "image") -> str:
    """Return ``![alt](url)`` or, with a signature, ``![alt](url "escaped")``."""
    if signature:
        return f'![{alt}]({url} "{escape_title(signature)}")'
    return f"![{alt}]({url})"


def parse_data_url(url: str) -> Tuple[str, str]:
    """Split a ``data:`` URL into ``(mime_type, base64_payload)``.

    A value without a comma is treated as a bare payload of the default mime
    type. A missing mime type also falls back to the default.
    """
    if "," not in url:
        return DEFAULT_IMAGE_MIME_TYPE, url
    meta, data = url.split(",", 1)
    mime = meta.split(";")[0].replace("data:", "", 1).strip()
    return mime or DEFAULT_IMAGE_MIME_TYPE, data


def to_data_url(mime_type: str, data: str) -> str:
    return f"data:{mime_type};base64,{data}"


def _raw_mime(data: str) -> str:
    for prefix, mime in _RAW_PREFIXES.items():
        if data.startswith(prefix):
            return mime
    return DEFAULT_IMAGE_MIME_TYPE


def find_inline_images(text: str) -> List[InlineImage]:
    """Return every image embedded in ``text``, deduplicated by URL.

    Markdown references come first (in order), then bare data URLs outside
    markdown, then raw base64 runs. A duplicate that carries a signature
    upgrades an earlier entry that does not.
    """
    if not text:
        return []
    found: Dict[str, InlineImage] = {}

    def _add(url: str, signature: Optional[str]) -> None:
        existing = found.get(url)
        if existing is None:
            found[url] = InlineImage(url=url, signature=signature or None)
        elif signature and not existing.signature:
            found[url] = InlineImage(url=url, signature=signature)

    for match in MARKDOWN_IMAGE_RE.finditer(text):
        url = match.group("url")
        if not url.startswith("data:"):
            continue
        title = match.group("title")
        _add(url, unescape_title(title) if title else None)
    for match in DATA_URL_RE.finditer(text):
        _add(match.group(0), None)
    for match in RAW_BASE64_RE.finditer(text):
        data = match.group("data")
        _add(to_data_url(_raw_mime(data), data), None)
    return list(found.values())


def strip_image_markers(text: str) -> str:
    """Remove inline image markers (markdown, data URLs, raw base64) from ``text``."""
    if not text:
        return ""

    def _drop_inline_markdown(match: "re.Match[str]") -> str:
        return "" if match.group("url").startswith("data:") else match.group(0)

    out = MARKDOWN_IMAGE_RE.sub(_drop_inline_markdown, text)
    out = DATA_URL_RE.sub("", out)
    out = RAW_BASE64_RE.sub("", out)
    out = re.sub(r"\n{3,}", "\n\n", out)
    return out.strip()


__all__ = [
    "InlineImage",
    "DATA_URL_RE",
    "MARKDOWN_IMAGE_RE",
    "RAW_BASE64_RE",
    "escape_title",
    "unescape_title",
    "format_image_markdown",
    "parse_data_url",
    "to_data_url",
    "find_inline_images",
    "strip_image_markers",
]
