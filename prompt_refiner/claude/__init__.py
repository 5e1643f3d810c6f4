"""Claude Code CLI provider package."""

from .client import ClaudeTransport

__all__ = ["ClaudeTransport"]
