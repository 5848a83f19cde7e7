"""Model heuristics and generation config shared by both Gemini adapters."""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..base.models import ImageSettings

IMAGE_RESPONSE_MODALITIES = ("TEXT", "IMAGE")


def looks_like_image_output_model(model: Any) -> bool:
    """True for model ids naming image output (``image`` present, ``vision`` absent)."""
    if isinstance(model, str):
        value = model
    elif model is not None and getattr(model, "id", None) is not None:
        value = str(model.id)
    else:
        value = str(model or "")
    lowered = value.lower()
    if not lowered or "vision" in lowered:
        return False
    return "image" in lowered


def effective_image_settings(settings: Optional[ImageSettings]) -> Optional[ImageSettings]:
    return settings if settings is not None and settings.enabled else None


def build_generation_config(model: str, settings: Optional[ImageSettings]) -> Optional[Dict[str, Any]]:
    """REST ``generationConfig`` for image-output models, else ``None``."""
    if not looks_like_image_output_model(model):
        return None
    config: Dict[str, Any] = {"responseModalities": list(IMAGE_RESPONSE_MODALITIES)}
    active = effective_image_settings(settings)
    if active is not None:
        image_config: Dict[str, Any] = {"imageSize": active.resolution}
        if active.aspect_ratio and active.aspect_ratio != "auto":
            image_config["aspectRatio"] = active.aspect_ratio
        config["imageConfig"] = image_config
    return config


__all__ = [
    "IMAGE_RESPONSE_MODALITIES",
    "looks_like_image_output_model",
    "effective_image_settings",
    "build_generation_config",
]
