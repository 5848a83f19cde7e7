"""
Gemini adapters package.

Exports:
- GeminiOfficialAdapter: official API through the ``google-genai`` SDK
- GeminiEnterpriseAdapter: Vertex AI ``publishers/google`` REST surface
- build_gemini_contents / extract_text_and_images: shared wire helpers
"""

from .contents import build_gemini_contents
from .enterprise import GeminiEnterpriseAdapter
from .extract import GeminiOutput, extract_text_and_images, format_output
from .official import GeminiOfficialAdapter
from .shared import looks_like_image_output_model

__all__ = [
    "GeminiEnterpriseAdapter",
    "GeminiOfficialAdapter",
    "GeminiOutput",
    "build_gemini_contents",
    "extract_text_and_images",
    "format_output",
    "looks_like_image_output_model",
]
