"""Message and document assembly.

``render_message`` turns one chat message into a Markdown section;
``conversation_to_markdown`` resolves the active branch and stitches the
sections under a header block.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from chatextractor.branching import conversation_branch
from chatextractor.sources.providers.claude_ai import Attachment, ChatMessage, Conversation

from .blocks import RenderContext, render_block

SEPARATOR = "---"


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def render_attachments(attachments: Sequence[Attachment]) -> str:
    parts: List[str] = ["### Attachments", ""]
    for attachment in attachments:
        name = attachment.file_name or "file"
        size = f" ({format_bytes(attachment.file_size)})" if attachment.file_size else ""
        kind = f" — `{attachment.file_type}`" if attachment.file_type else ""
        parts.append(f"- **{name}**{size}{kind}")

        if attachment.extracted_content:
            parts.extend(
                [
                    "",
                    "<details>",
                    f"<summary>{name} content</summary>",
                    "",
                    attachment.extracted_content,
                    "",
                    "</details>",
                    "",
                ]
            )
    return "\n".join(parts)


def render_message(message: ChatMessage) -> str:
    """Render one message: heading, attachments, body, artifacts, sources."""
    sender = "Human" if message.is_human else "Assistant"
    parts: List[str] = [f"## {sender}", ""]

    if message.attachments:
        parts.append(render_attachments(message.attachments))

    ctx = RenderContext()
    for block in message.content:
        rendered = render_block(block, ctx)
        if rendered:
            parts.append(rendered)

    # Older conversations carry the body only in the flat text field.
    if not message.content and message.text:
        parts.append(message.text)

    if ctx.artifacts:
        parts.extend(["", "### Artifacts", "", "\n\n".join(ctx.artifacts)])

    if ctx.sources:
        parts.extend(["", "### Sources", ""])
        parts.extend(f"- [{source.title}]({source.url})" for source in ctx.sources)

    return "\n".join(parts)


def render_header(
    conversation: Conversation,
    message_count: int,
    *,
    exported_on: date,
    origin_url: Optional[str],
) -> List[str]:
    lines = [
        f"# {conversation.title}",
        "",
        f"> Exported on {exported_on.isoformat()} from Claude.ai",
        f"> Model: {conversation.model or 'unknown'} | Messages: {message_count}",
    ]
    if origin_url:
        lines.append(f"> URL: {origin_url}")
    lines.extend(["", SEPARATOR, ""])
    return lines


def conversation_to_markdown(
    conversation: Conversation,
    *,
    exported_on: Optional[date] = None,
    origin_url: Optional[str] = None,
) -> str:
    """Render the conversation's active branch as one Markdown document.

    Args:
        conversation: Parsed conversation payload
        exported_on: Date shown in the header (defaults to today, UTC)
        origin_url: Page the conversation was exported from, if known

    Returns:
        The Markdown document body, before reference reconciliation
    """
    messages = conversation_branch(conversation)
    if exported_on is None:
        exported_on = datetime.now(timezone.utc).date()

    lines = render_header(conversation, len(messages), exported_on=exported_on, origin_url=origin_url)
    for message in messages:
        lines.extend([render_message(message), "", SEPARATOR, ""])
    return "\n".join(lines)


__all__ = [
    "conversation_to_markdown",
    "format_bytes",
    "render_attachments",
    "render_message",
]
