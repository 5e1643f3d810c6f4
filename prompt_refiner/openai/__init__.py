"""OpenAI provider package."""

from .client import OpenAITransport

__all__ = ["OpenAITransport"]
