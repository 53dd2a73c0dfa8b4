"""Locate the identifiers a conversation request needs.

The organization id lives in the ``lastActiveOrg`` cookie, or failing that in
the page's Next.js hydration payload. The conversation id is the UUID in a
``/chat/<uuid>`` URL.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional
from urllib.parse import urlparse

from chatextractor.errors import MissingContextError
from chatextractor.lib.json import loads

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)
CHAT_PATH_RE = re.compile(r"/chat/([a-f0-9-]{36})")
NEXT_DATA_RE = re.compile(
    r"<script[^>]*\bid=[\"']__NEXT_DATA__[\"'][^>]*>(.*?)</script>",
    re.IGNORECASE | re.DOTALL,
)
ORG_COOKIE = "lastActiveOrg"


def is_uuid(value: Optional[str]) -> bool:
    return bool(value) and UUID_RE.match(value or "") is not None


def parse_cookie_header(header: Optional[str]) -> dict[str, str]:
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for part in header.split(";"):
        name, sep, value = part.strip().partition("=")
        if sep and name:
            cookies[name] = value
    return cookies


def organization_id_from_cookies(header: Optional[str]) -> Optional[str]:
    value = parse_cookie_header(header).get(ORG_COOKIE)
    return value if is_uuid(value) else None


def extract_next_data(html: str) -> Optional[dict[str, Any]]:
    """Pull the ``__NEXT_DATA__`` JSON object out of a page's HTML."""
    match = NEXT_DATA_RE.search(html)
    if not match:
        return None
    try:
        payload = loads(match.group(1))
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


def organization_id_from_next_data(next_data: Optional[Mapping[str, Any]]) -> Optional[str]:
    node: Any = next_data
    for key in ("props", "pageProps", "organization", "uuid"):
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    return node if isinstance(node, str) and is_uuid(node) else None


def resolve_organization_id(
    *,
    explicit: Optional[str] = None,
    cookie_header: Optional[str] = None,
    next_data: Optional[Mapping[str, Any]] = None,
) -> str:
    """Return the organization id from the first source that has a valid one.

    Raises:
        MissingContextError: if no source yields a UUID
    """
    if explicit:
        if not is_uuid(explicit):
            raise MissingContextError(f"Organization ID is not a UUID: {explicit}")
        return explicit
    org_id = organization_id_from_cookies(cookie_header) or organization_id_from_next_data(next_data)
    if org_id:
        return org_id
    raise MissingContextError(
        "Could not find organization ID. Pass --org-id or a claude.ai cookie header with lastActiveOrg."
    )


def resolve_conversation_id(target: str) -> str:
    """Return the conversation UUID named by a chat URL, path or bare id.

    Raises:
        MissingContextError: if ``target`` names no conversation
    """
    target = target.strip()
    if is_uuid(target):
        return target
    path = urlparse(target).path or target
    match = CHAT_PATH_RE.search(path)
    if not match or not is_uuid(match.group(1)):
        raise MissingContextError(f"Could not find conversation ID in {target!r}. Pass a claude.ai chat URL.")
    return match.group(1)


def conversation_url(base_url: str, conversation_id: str) -> str:
    return f"{base_url.rstrip('/')}/chat/{conversation_id}"


__all__ = [
    "conversation_url",
    "extract_next_data",
    "is_uuid",
    "organization_id_from_cookies",
    "organization_id_from_next_data",
    "parse_cookie_header",
    "resolve_conversation_id",
    "resolve_organization_id",
]
