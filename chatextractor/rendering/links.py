"""Hyperlink harvesting for rendered message text.

Links reach a message's source list three ways: citations on text blocks,
web search results, and links written into the text itself. This module
handles the last one and owns the shared ``SourceMap``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set, Tuple

MARKDOWN_LINK_RE = re.compile(r"\[([^\]\n]*)\]\((https?://(?:[^\s()]|\([^\s()]*\))+)\)")
ANCHOR_RE = re.compile(
    r"<a\s[^>]*?href\s*=\s*[\"'](https?://[^\"']+)[\"'][^>]*>(.*?)</a\s*>",
    re.IGNORECASE | re.DOTALL,
)
RESOURCE_RE = re.compile(r"\bsrc\s*=\s*[\"'](https?://[^\"']+)[\"']", re.IGNORECASE)
BARE_URL_RE = re.compile(r"https?://(?:[^\s<>\"'`\[\]()]|\([^\s<>\"'`\[\]()]*\))+")
_TAG_RE = re.compile(r"<[^>]+>")
_TRAILING_PUNCTUATION = ".,;:!?"


@dataclass(frozen=True)
class Source:
    url: str
    title: str

    @property
    def is_placeholder(self) -> bool:
        """True when no real title is known and the URL stands in for it."""
        return self.title == self.url


class SourceMap:
    """Insertion-ordered, URL-keyed collection of sources for one message."""

    def __init__(self) -> None:
        self._sources: Dict[str, Source] = {}

    def cite(self, url: Optional[str], title: Optional[str]) -> None:
        """Record an author-asserted source; its title replaces any earlier one.

        Incomplete pairs are ignored. A replaced entry keeps its position.
        """
        if not url or not title:
            return
        self._sources[url] = Source(url=url, title=title)

    def add(self, url: str, title: Optional[str] = None) -> bool:
        """Record a discovered link without overwriting a known title.

        An entry whose title is only the URL placeholder is upgraded when a
        real title arrives. Returns True when the map changed.
        """
        if not url:
            return False
        title = title or url
        existing = self._sources.get(url)
        if existing is None or (existing.is_placeholder and title != url):
            self._sources[url] = Source(url=url, title=title)
            return True
        return False

    def get(self, url: str) -> Optional[Source]:
        return self._sources.get(url)

    def __contains__(self, url: object) -> bool:
        return url in self._sources

    def __iter__(self) -> Iterator[Source]:
        return iter(list(self._sources.values()))

    def __len__(self) -> int:
        return len(self._sources)

    def __bool__(self) -> bool:
        return bool(self._sources)

    def __repr__(self) -> str:
        return f"SourceMap({list(self._sources.values())!r})"


def _inner_text(markup: str) -> str:
    return " ".join(_TAG_RE.sub("", markup).split())


def _trim_url(url: str) -> str:
    return url.rstrip(_TRAILING_PUNCTUATION)


def extract_links(text: str, sources: SourceMap) -> None:
    """Harvest every hyperlink in ``text`` into ``sources``.

    Passes run in a fixed order, highest confidence first: Markdown links,
    HTML anchors, ``src=`` resource references, then bare URLs. A bare URL
    is skipped outright when it lies inside a URL an earlier pass of this
    call matched, or when an earlier pass already saw the same URL.
    """
    if not text:
        return
    found: Set[str] = set()
    claimed: List[Tuple[int, int]] = []

    def claim(match: re.Match[str], group: int) -> str:
        found.add(match.group(group))
        claimed.append(match.span(group))
        return match.group(group)

    for match in MARKDOWN_LINK_RE.finditer(text):
        url = claim(match, 2)
        sources.add(url, match.group(1).strip() or url)

    for match in ANCHOR_RE.finditer(text):
        url = claim(match, 1)
        sources.add(url, _inner_text(match.group(2)) or url)

    for match in RESOURCE_RE.finditer(text):
        url = claim(match, 1)
        sources.add(url, url)

    for match in BARE_URL_RE.finditer(text):
        if any(start <= match.start() < end for start, end in claimed):
            continue
        url = _trim_url(match.group(0))
        if url in found:
            continue
        found.add(url)
        sources.add(url, url)


__all__ = ["Source", "SourceMap", "extract_links"]
