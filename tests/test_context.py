from __future__ import annotations

import pytest

from chatextractor.errors import MissingContextError
from chatextractor.sources.context import (
    conversation_url,
    extract_next_data,
    organization_id_from_cookies,
    organization_id_from_next_data,
    parse_cookie_header,
    resolve_conversation_id,
    resolve_organization_id,
)

ORG_ID = "11111111-2222-3333-4444-555555555555"
OTHER_ORG = "99999999-8888-7777-6666-555555555555"
CONVERSATION_ID = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"


def test_parse_cookie_header() -> None:
    assert parse_cookie_header("a=1; lastActiveOrg=x;  b=2=3; junk") == {"a": "1", "lastActiveOrg": "x", "b": "2=3"}
    assert parse_cookie_header(None) == {}


def test_organization_id_from_cookies_requires_uuid() -> None:
    assert organization_id_from_cookies(f"sessionKey=s; lastActiveOrg={ORG_ID}") == ORG_ID
    assert organization_id_from_cookies("lastActiveOrg=not-a-uuid") is None


def test_next_data_extraction() -> None:
    html = (
        '<html><script id="__NEXT_DATA__" type="application/json">'
        f'{{"props": {{"pageProps": {{"organization": {{"uuid": "{ORG_ID}"}}}}}}}}'
        "</script></html>"
    )
    next_data = extract_next_data(html)
    assert organization_id_from_next_data(next_data) == ORG_ID


def test_next_data_missing_or_broken() -> None:
    assert extract_next_data("<html></html>") is None
    assert extract_next_data('<script id="__NEXT_DATA__">{broken</script>') is None
    assert organization_id_from_next_data({"props": []}) is None
    assert organization_id_from_next_data(None) is None


def test_resolve_organization_id_precedence() -> None:
    cookie = f"lastActiveOrg={ORG_ID}"
    next_data = {"props": {"pageProps": {"organization": {"uuid": OTHER_ORG}}}}

    assert resolve_organization_id(explicit=OTHER_ORG, cookie_header=cookie) == OTHER_ORG
    assert resolve_organization_id(cookie_header=cookie, next_data=next_data) == ORG_ID
    assert resolve_organization_id(cookie_header="a=b", next_data=next_data) == OTHER_ORG


def test_resolve_organization_id_missing() -> None:
    with pytest.raises(MissingContextError, match="organization ID"):
        resolve_organization_id()


def test_resolve_organization_id_rejects_malformed_explicit_value() -> None:
    with pytest.raises(MissingContextError, match="not a UUID"):
        resolve_organization_id(explicit="org-123")


@pytest.mark.parametrize(
    "target",
    [
        f"https://claude.ai/chat/{CONVERSATION_ID}",
        f"https://claude.ai/chat/{CONVERSATION_ID}?foo=bar#frag",
        f"/chat/{CONVERSATION_ID}",
        CONVERSATION_ID,
        f"  {CONVERSATION_ID}\n",
    ],
)
def test_resolve_conversation_id(target: str) -> None:
    assert resolve_conversation_id(target) == CONVERSATION_ID


@pytest.mark.parametrize("target", ["https://claude.ai/new", "https://claude.ai/chat/short", ""])
def test_resolve_conversation_id_missing(target: str) -> None:
    with pytest.raises(MissingContextError):
        resolve_conversation_id(target)


def test_conversation_url() -> None:
    assert conversation_url("https://claude.ai/", CONVERSATION_ID) == f"https://claude.ai/chat/{CONVERSATION_ID}"
