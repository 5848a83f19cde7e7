"""
Request-side DTOs for one generation call.

`ImageSettings` and `GenerationExtras` are pydantic models so that settings
persisted by the consuming application (camelCase keys such as
``enterpriseProjectId``) validate directly, while Python callers use the
snake_case field names. `GenerationRequest` is the ephemeral per-call bundle
built by the router and discarded when the call resolves.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...config.defaults import GEMINI_ENTERPRISE_DEFAULT_LOCATION
from .message import Message, Role

if TYPE_CHECKING:
    from ..cancellation import CancellationToken


Resolution = Literal["1K", "2K", "4K"]
AspectRatio = Literal[
    "auto", "21:9", "16:9", "3:2", "4:3", "5:4", "1:1", "4:5", "3:4", "2:3", "9:16"
]


class ImageSettings(BaseModel):
    """Image-generation settings applied to image-output Gemini models."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enabled: bool = False
    resolution: Resolution = "1K"
    aspect_ratio: AspectRatio = "auto"


class GenerationExtras(BaseModel):
    """Provider-specific extras for a generation call.

    Attributes
    ----------
    enterprise_enabled:
        Route Gemini calls through the enterprise (Vertex) API.
    enterprise_project_id / enterprise_location / enterprise_token:
        Enterprise project, region and OAuth access token. A blank location
        resolves to ``us-central1`` at routing time.
    image_settings:
        Optional image-generation settings (resolution, aspect ratio).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    enterprise_enabled: bool = False
    enterprise_project_id: str = ""
    enterprise_location: str = GEMINI_ENTERPRISE_DEFAULT_LOCATION
    enterprise_token: str = Field(default="", repr=False)
    image_settings: Optional[ImageSettings] = None


@dataclass
class GenerationRequest:
    """Everything one adapter invocation needs. Never persisted.

    Attributes:
        model: Model identifier.
        history: Prior conversation turns, oldest first.
        text: New user text.
        images: New user image URLs (data URLs or remote URLs).
        stream: Caller's streaming preference.
        provider: Provider tag that selected the route.
        credential: API key or bearer token (never logged).
        base_url: Endpoint base chosen by the router.
        cancel_token: Cancellation token for the call.
        extras: Provider-specific extras.
        timeout_seconds: Bound for one adapter attempt (``None`` = unbounded).
    """

    model: str
    history: List[Message]
    text: str
    images: List[str] = field(default_factory=list)
    stream: bool = True
    provider: str = "openai"
    credential: str = field(default="", repr=False)
    base_url: Optional[str] = None
    cancel_token: Optional["CancellationToken"] = None
    extras: GenerationExtras = field(default_factory=GenerationExtras)
    timeout_seconds: Optional[float] = None

    def has_any_images(self, *, user_only: bool = True) -> bool:
        """True when the new turn or (user) history turns carry images.

        History turns count explicit attachments and inline image markers.
        """
        if any(self.images):
            return True
        return any(
            m.all_images()
            for m in self.history
            if not user_only or m.role is Role.USER
        )


__all__ = [
    "ImageSettings",
    "GenerationExtras",
    "GenerationRequest",
    "Resolution",
    "AspectRatio",
]
