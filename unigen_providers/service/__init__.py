"""Service layer: the generation entry point."""

from .router import generate_response

__all__ = ["generate_response"]
