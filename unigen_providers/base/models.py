"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``unigen_providers.base.models_parts`` to keep a single stable import path.
"""

from .models_parts.message import ImageRef, Message, Role
from .models_parts.generation_request import (
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
