"""Copilot CLI provider package."""

from .client import CopilotTransport

__all__ = ["CopilotTransport"]
