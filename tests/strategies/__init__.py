"""Shared hypothesis strategies for chatextractor tests."""

from .messages import (
    content_block_strategy,
    conversation_strategy,
    link_text_strategy,
    message_forest_strategy,
    page_link_strategy,
)

__all__ = [
    "content_block_strategy",
    "conversation_strategy",
    "link_text_strategy",
    "message_forest_strategy",
    "page_link_strategy",
]
