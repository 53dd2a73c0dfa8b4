"""Save rendered documents to disk."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from chatextractor.lib.log import get_logger

logger = get_logger(__name__)

_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9\s-]")
_WHITESPACE_RE = re.compile(r"\s+")
MAX_NAME_LENGTH = 80


def sanitize_filename(name: Optional[str]) -> str:
    """Reduce a conversation name to a lowercase, dash-separated file stem."""
    cleaned = _UNSAFE_RE.sub("", name or "untitled")
    cleaned = _WHITESPACE_RE.sub("-", cleaned).lower()[:MAX_NAME_LENGTH]
    return cleaned or "untitled"


def export_filename(title: Optional[str], exported_on: Optional[date] = None) -> str:
    exported_on = exported_on or datetime.now(timezone.utc).date()
    return f"{sanitize_filename(title)}_{exported_on.isoformat()}.md"


def save_markdown(
    markdown: str,
    title: Optional[str],
    output_dir: Path,
    *,
    exported_on: Optional[date] = None,
) -> Path:
    """Write ``markdown`` into ``output_dir`` under a dated, sanitized name."""
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / export_filename(title, exported_on)
    target.write_text(markdown, encoding="utf-8")
    logger.info("saved export", path=str(target), chars=len(markdown))
    return target


__all__ = ["export_filename", "sanitize_filename", "save_markdown"]
