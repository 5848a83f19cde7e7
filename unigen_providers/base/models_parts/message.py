"""
Message DTOs used across adapters.

Defines the conversation turn (`Message`), its author `Role` and the image
attachment reference (`ImageRef`). Messages are pure data; the helpers only
inspect them (image discovery, continuation-signature resolution).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from ..utils.images import find_inline_images, parse_data_url


class Role(str, Enum):
    """Author of a conversation turn."""

    USER = "user"
    MODEL = "model"


@dataclass
class ImageRef:
    """One image attached to a message.

    Attributes:
        url: A ``data:`` URL (inline, base64) or a remote URL.
        signature: Optional continuation signature emitted by the model
            alongside this image; opaque and of unbounded length.
    """

    url: str
    signature: Optional[str] = None

    @property
    def is_inline(self) -> bool:
        return self.url.startswith("data:")

    @property
    def mime_type(self) -> str:
        return parse_data_url(self.url)[0]

    @property
    def base64_data(self) -> Optional[str]:
        """Base64 payload for inline images, ``None`` for remote URLs."""
        if not self.is_inline:
            return None
        return parse_data_url(self.url)[1] or None


@dataclass
class Message:
    """A single turn in a conversation.

    Summary:
        ``text`` may be empty for image-only turns. ``images`` lists explicit
        attachments; plain strings are coerced to :class:`ImageRef`. Images
        may also live inside ``text`` as inline markers (markdown, data URL
        or raw base64) and are discovered by :meth:`all_images`.

    Attributes:
        id: Opaque identifier, unique within a conversation.
        role: :class:`Role` of the author.
        text: Plain text content.
        images: Ordered explicit image attachments.
        signature: Optional first-class continuation signature.
        timestamp: Optional creation time (epoch milliseconds), carried only.
        generation_duration_ms: Optional latency of a model reply, carried only.
    """

    id: str
    role: Role
    text: str = ""
    images: List[Union[ImageRef, str]] = field(default_factory=list)
    signature: Optional[str] = None
    timestamp: Optional[int] = None
    generation_duration_ms: Optional[int] = None

    def __post_init__(self) -> None:
        self.role = Role(self.role)
        self.text = self.text or ""
        self.images = [
            img if isinstance(img, ImageRef) else ImageRef(url=img)
            for img in (self.images or [])
            if img
        ]

    def all_images(self) -> List[ImageRef]:
        """Return explicit and text-embedded images, deduplicated by URL.

        Explicit attachments come first. When the same URL appears twice, a
        signature found on either occurrence is kept.
        """
        ordered: List[ImageRef] = []
        index = {}
        candidates = list(self.images) + [
            ImageRef(url=found.url, signature=found.signature)
            for found in find_inline_images(self.text)
        ]
        for img in candidates:
            pos = index.get(img.url)
            if pos is None:
                index[img.url] = len(ordered)
                ordered.append(ImageRef(url=img.url, signature=img.signature))
            elif img.signature and not ordered[pos].signature:
                ordered[pos].signature = img.signature
        return ordered

    def resolved_signature(self) -> Optional[str]:
        """Own signature, else that of the first image carrying one."""
        if self.signature:
            return self.signature
        for img in self.all_images():
            if img.signature:
                return img.signature
        return None


__all__ = [
    "Message",
    "Role",
    "ImageRef",
]
