"""Active-branch resolution for tree-structured conversations.

Edits and regenerations turn a conversation into a forest linked by
``parent_message_uuid``. The claude.ai UI shows exactly one root-to-leaf path,
named by the conversation's ``current_leaf_message_uuid``.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from chatextractor.lib.log import get_logger
from chatextractor.sources.providers.claude_ai import ChatMessage, Conversation

logger = get_logger(__name__)


def resolve_branch(
    messages: Sequence[ChatMessage],
    current_leaf_id: Optional[str],
) -> List[ChatMessage]:
    """Return the messages on the root-to-leaf path ending at ``current_leaf_id``.

    Without a usable leaf (legacy data with no branch metadata, or a leaf id
    that names no message) the messages are returned in insertion order.
    Dangling parents end the walk; cycles stop at the first repeated message.
    """
    if not messages:
        return []

    node_map: Dict[str, ChatMessage] = {}
    for message in messages:
        node_map.setdefault(message.uuid, message)

    if not current_leaf_id or current_leaf_id not in node_map:
        logger.debug("no usable leaf, keeping insertion order", leaf=current_leaf_id, messages=len(messages))
        return list(messages)

    branch: List[ChatMessage] = []
    visited: set[str] = set()
    current: Optional[ChatMessage] = node_map[current_leaf_id]
    while current is not None and current.uuid not in visited:
        visited.add(current.uuid)
        branch.append(current)
        parent_id = current.parent_message_uuid
        current = node_map.get(parent_id) if parent_id else None
    branch.reverse()

    if not branch:
        logger.debug("empty branch walk, keeping insertion order", leaf=current_leaf_id)
        return list(messages)
    return branch


def conversation_branch(conversation: Conversation) -> List[ChatMessage]:
    """Resolve the branch currently displayed for ``conversation``."""
    return resolve_branch(conversation.chat_messages, conversation.current_leaf_message_uuid)


__all__ = ["conversation_branch", "resolve_branch"]
