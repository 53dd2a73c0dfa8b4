"""Async client for the claude.ai conversation API."""

from __future__ import annotations

from types import TracebackType
from typing import Any, Optional

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from chatextractor.config import DEFAULT_BASE_URL
from chatextractor.errors import TranscriptError, UpstreamError
from chatextractor.lib.log import get_logger

from .providers.claude_ai import Conversation, parse_conversation

logger = get_logger(__name__)

CONVERSATION_PATH = "/api/organizations/{org_id}/chat_conversations/{conversation_id}"
CONVERSATION_PARAMS = {
    "tree": "True",
    "rendering_mode": "messages",
    "render_all_tools": "true",
}
SESSION_COOKIE = "sessionKey"
DEFAULT_RETRY_BASE = 0.5


class ClaudeClient:
    """Fetches conversation trees with the caller's browser session.

    ``retries`` counts extra attempts after a transport failure (connection
    reset, DNS, timeout). HTTP error statuses are never retried. With the
    default ``timeout=None`` a stalled request waits indefinitely.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        session_key: Optional[str] = None,
        cookie_header: Optional[str] = None,
        timeout: Optional[float] = None,
        retries: int = 0,
        retry_base: float = DEFAULT_RETRY_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if cookie_header:
            headers["Cookie"] = cookie_header
        cookies = {SESSION_COOKIE: session_key} if session_key and not cookie_header else None
        self._retries = max(retries, 0)
        self._retry_base = retry_base
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            cookies=cookies,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self) -> ClaudeClient:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, path: str, params: dict[str, str]) -> httpx.Response:
        retryer = AsyncRetrying(
            stop=stop_after_attempt(self._retries + 1),
            wait=wait_exponential(multiplier=self._retry_base, min=self._retry_base, max=10),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        )
        try:
            async for attempt in retryer:
                with attempt:
                    return await self._client.get(path, params=params)
        except httpx.TransportError as exc:
            raise UpstreamError(f"API request failed: {exc.__class__.__name__}: {exc}") from exc
        raise UpstreamError("API request failed: no attempt was made")

    async def fetch_payload(self, org_id: str, conversation_id: str) -> Any:
        """Return the decoded JSON body of the conversation endpoint.

        Raises:
            UpstreamError: on transport failure or a non-success status
            TranscriptError: if the body is not JSON
        """
        path = CONVERSATION_PATH.format(org_id=org_id, conversation_id=conversation_id)
        logger.debug("fetching conversation", org_id=org_id, conversation_id=conversation_id)
        response = await self._get(path, CONVERSATION_PARAMS)
        if not response.is_success:
            logger.warning("conversation request failed", status=response.status_code, conversation_id=conversation_id)
            raise UpstreamError(
                f"API request failed: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TranscriptError(f"API response is not JSON: {exc}") from exc

    async def fetch_conversation(self, org_id: str, conversation_id: str) -> Conversation:
        payload = await self.fetch_payload(org_id, conversation_id)
        conversation = parse_conversation(payload)
        logger.info(
            "fetched conversation",
            conversation_id=conversation_id,
            name=conversation.name,
            messages=len(conversation.chat_messages),
        )
        return conversation


__all__ = ["CONVERSATION_PARAMS", "CONVERSATION_PATH", "ClaudeClient"]
