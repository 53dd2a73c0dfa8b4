"""Merge page-observed links into a rendered document.

The conversation payload does not carry every link the user sees on the
page. Links collected from the page come with a title and the text that
preceded them; this module decides which of them are missing from the
document, finds a spot for each one, and appends a numbered reference list.

Placement tries, in order:

1. the link title, found case-insensitively in the document; a bare
   reference mark goes right after it;
2. the last 40 characters of the preceding page text; the title and the
   mark go right after it, since the title is not otherwise visible;
3. nowhere; the link only appears in the reference list.

Title matching runs first even when a short, common title could match
earlier in the text than the link's real position. That is a known
precision/recall tradeoff.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Sequence

from chatextractor.lib.log import get_logger
from chatextractor.sources.page_links import PageLink

logger = get_logger(__name__)

MIN_TITLE_LENGTH = 3
MIN_CONTEXT_LENGTH = 10
CONTEXT_WINDOW = 40
REFERENCES_HEADING = "### References"

Strategy = Literal["title", "context", "none"]


@dataclass(frozen=True)
class Insertion:
    """Text to splice in at ``position`` of the base text.

    ``order`` breaks ties between insertions at the same position: lower
    orders end up first in the result.
    """

    position: int
    text: str
    order: int = 0


@dataclass(frozen=True)
class Reference:
    number: int
    link: PageLink
    strategy: Strategy
    insertion: Optional[Insertion] = None

    @property
    def placed(self) -> bool:
        return self.insertion is not None


def apply_insertions(text: str, insertions: Iterable[Insertion]) -> str:
    """Splice every insertion into ``text`` at its position in the base text.

    Edits are applied from the highest position down, so applying one never
    shifts the offsets of those still pending.
    """
    result = text
    for insertion in sorted(insertions, key=lambda item: (item.position, item.order), reverse=True):
        if not 0 <= insertion.position <= len(text):
            raise ValueError(f"Insertion position {insertion.position} outside text of length {len(text)}")
        result = result[: insertion.position] + insertion.text + result[insertion.position :]
    return result


def reference_mark(number: int) -> str:
    return f'<sup id="cite-{number}">[{number}](#ref-{number})</sup>'


def _find_end(document: str, needle: str) -> Optional[int]:
    match = re.search(re.escape(needle), document, re.IGNORECASE)
    return match.end() if match else None


def locate_reference(document: str, link: PageLink, number: int) -> Reference:
    """Work out where, if anywhere, reference ``number`` goes in ``document``."""
    title = link.title
    if len(title) >= MIN_TITLE_LENGTH:
        end = _find_end(document, title)
        if end is not None:
            return Reference(number, link, "title", Insertion(end, reference_mark(number), number))

    context = link.context_before
    if len(context) >= MIN_CONTEXT_LENGTH:
        end = _find_end(document, context[-CONTEXT_WINDOW:])
        if end is not None:
            label = title or link.url
            return Reference(number, link, "context", Insertion(end, f" ({label}){reference_mark(number)}", number))

    return Reference(number, link, "none")


def missing_links(document: str, candidates: Iterable[PageLink]) -> List[PageLink]:
    """Candidates whose URL is not already written into the document, deduplicated."""
    seen: set[str] = set()
    missing: List[PageLink] = []
    for link in candidates:
        if not link.url or link.url in seen or link.url in document:
            continue
        seen.add(link.url)
        missing.append(link)
    return missing


def render_reference_list(references: Sequence[Reference]) -> str:
    lines = [REFERENCES_HEADING, ""]
    for ref in sorted(references, key=lambda item: item.number):
        line = f'{ref.number}. <a id="ref-{ref.number}"></a>[{ref.link.title or ref.link.url}]({ref.link.url})'
        if ref.placed:
            line += f" [↩](#cite-{ref.number})"
        lines.append(line)
    return "\n".join(lines)


def plan_references(document: str, candidates: Iterable[PageLink]) -> List[Reference]:
    return [
        locate_reference(document, link, number)
        for number, link in enumerate(missing_links(document, candidates), start=1)
    ]


def reconcile_references(document: str, candidates: Iterable[PageLink]) -> str:
    """Return ``document`` with missing page links marked inline and listed at the end."""
    references = plan_references(document, candidates)
    if not references:
        return document

    body = apply_insertions(document, [ref.insertion for ref in references if ref.insertion is not None])
    placed = sum(1 for ref in references if ref.placed)
    logger.info(
        "reconciled page links",
        references=len(references),
        placed=placed,
        unplaced=len(references) - placed,
    )
    separator = "\n" if body.endswith("\n") else "\n\n"
    return f"{body}{separator}{render_reference_list(references)}\n"


__all__ = [
    "Insertion",
    "Reference",
    "apply_insertions",
    "locate_reference",
    "missing_links",
    "plan_references",
    "reconcile_references",
    "reference_mark",
    "render_reference_list",
]
