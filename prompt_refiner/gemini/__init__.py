"""Gemini provider package."""

from .client import GeminiTransport

__all__ = ["GeminiTransport"]
