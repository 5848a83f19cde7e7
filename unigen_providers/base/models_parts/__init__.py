"""Models parts package public surface.

Re-exports individual DTOs so callers can import from
`unigen_providers.base.models_parts` if needed, while `unigen_providers.base.models`
remains the primary stable import path.
"""

from .message import ImageRef, Message, Role
from .generation_request import (
    AspectRatio,
    GenerationExtras,
    GenerationRequest,
    ImageSettings,
    Resolution,
)

__all__ = [
    "ImageRef",
    "Message",
    "Role",
    "AspectRatio",
    "GenerationExtras",
    "GenerationRequest",
    "ImageSettings",
    "Resolution",
]
