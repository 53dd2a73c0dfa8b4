"""Rendering package: transcript to Markdown, plus reference reconciliation."""

from .blocks import RenderContext, render_block
from .core import conversation_to_markdown, render_message
from .links import Source, SourceMap, extract_links
from .references import Insertion, apply_insertions, reconcile_references

__all__ = [
    "Insertion",
    "RenderContext",
    "Source",
    "SourceMap",
    "apply_insertions",
    "conversation_to_markdown",
    "extract_links",
    "reconcile_references",
    "render_block",
    "render_message",
]
