"""OpenAI-compatible (custom provider) package."""

from .client import OpenAICompatibleTransport

__all__ = ["OpenAICompatibleTransport"]
