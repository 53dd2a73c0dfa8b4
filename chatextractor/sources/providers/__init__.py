"""Provider payload models."""

from .claude_ai import ChatMessage, Conversation

__all__ = ["ChatMessage", "Conversation"]
