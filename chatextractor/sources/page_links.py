"""Links observed on the rendered chat page.

Some links only exist in the page the user sees (for example inline citation
chips), not in the conversation payload. An external DOM inspector collects
them as ``{title, url, contextBefore}`` records; this module loads them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from chatextractor.errors import TranscriptError
from chatextractor.lib.json import loads


class PageLink(BaseModel):
    """A candidate link with the text that preceded it on the page."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    title: str = ""
    url: str
    context_before: str = Field(default="", alias="contextBefore")

    @field_validator("title", "context_before", mode="before")
    @classmethod
    def _none_text(cls, v: Any) -> Any:
        return "" if v is None else v


_PAGE_LINKS = TypeAdapter(List[PageLink])


def parse_page_links(payload: Any) -> List[PageLink]:
    """Validate page links from a decoded JSON payload.

    Accepts either a list of link objects or an object with a ``links`` list.
    """
    if isinstance(payload, dict):
        payload = payload.get("links", [])
    try:
        return _PAGE_LINKS.validate_python(payload)
    except ValidationError as exc:
        raise TranscriptError(f"Invalid page links: {exc.error_count()} error(s)") from exc


def load_page_links(path: Path) -> List[PageLink]:
    try:
        payload = loads(path.read_bytes())
    except ValueError as exc:
        raise TranscriptError(f"Invalid JSON in {path}: {exc}") from exc
    return parse_page_links(payload)


__all__ = ["PageLink", "load_page_links", "parse_page_links"]
