"""Export orchestration: identifiers, retrieval, rendering, reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from chatextractor.config import ExtractorSettings
from chatextractor.lib.log import get_logger, log_context
from chatextractor.rendering.core import conversation_to_markdown
from chatextractor.rendering.references import reconcile_references
from chatextractor.sources.client import ClaudeClient
from chatextractor.sources.context import conversation_url, resolve_conversation_id, resolve_organization_id
from chatextractor.sources.page_links import PageLink
from chatextractor.sources.providers.claude_ai import Conversation

logger = get_logger(__name__)


@dataclass
class ExportResult:
    conversation: Conversation
    markdown: str
    path: Optional[Path] = None

    @property
    def summary(self) -> str:
        return f'Exported "{self.conversation.name}" ({len(self.conversation.chat_messages)} messages)'


def render_export(
    conversation: Conversation,
    *,
    page_links: Iterable[PageLink] = (),
    exported_on: Optional[date] = None,
    origin_url: Optional[str] = None,
) -> str:
    """Render ``conversation`` and merge in links observed on the page."""
    markdown = conversation_to_markdown(conversation, exported_on=exported_on, origin_url=origin_url)
    return reconcile_references(markdown, page_links)


def _origin_url(target: str, base_url: str, conversation_id: str) -> str:
    if target.startswith(("http://", "https://")):
        return target
    return conversation_url(base_url, conversation_id)


async def export_conversation(
    target: str,
    *,
    settings: ExtractorSettings,
    cookie_header: Optional[str] = None,
    next_data: Optional[Mapping[str, Any]] = None,
    page_links: Iterable[PageLink] = (),
    client: Optional[ClaudeClient] = None,
    exported_on: Optional[date] = None,
) -> ExportResult:
    """Fetch the conversation named by ``target`` and render it.

    Args:
        target: Chat URL, ``/chat/<uuid>`` path or bare conversation id
        settings: Effective settings (base URL, org id, session, retries)
        cookie_header: Browser cookie header, used for the org id and session
        next_data: Decoded ``__NEXT_DATA__`` payload, a fallback org id source
        page_links: Links observed on the rendered page
        client: Client to use instead of one built from ``settings``
        exported_on: Date for the header (defaults to today, UTC)

    Raises:
        MissingContextError: if an identifier cannot be found
        UpstreamError: if the API request fails
        TranscriptError: if the response is not a conversation
    """
    org_id = resolve_organization_id(
        explicit=settings.organization_id,
        cookie_header=cookie_header,
        next_data=next_data,
    )
    conversation_id = resolve_conversation_id(target)
    with log_context(org_id=org_id, conversation_id=conversation_id):
        logger.info("exporting conversation")
        if client is None:
            session_key = settings.session_key.get_secret_value() if settings.session_key else None
            async with ClaudeClient(
                base_url=settings.base_url,
                session_key=session_key,
                cookie_header=cookie_header,
                timeout=settings.request_timeout,
                retries=settings.retries,
            ) as owned:
                conversation = await owned.fetch_conversation(org_id, conversation_id)
        else:
            conversation = await client.fetch_conversation(org_id, conversation_id)

        markdown = render_export(
            conversation,
            page_links=page_links,
            exported_on=exported_on,
            origin_url=_origin_url(target, settings.base_url, conversation_id),
        )
    return ExportResult(conversation=conversation, markdown=markdown)


__all__ = ["ExportResult", "export_conversation", "render_export"]
