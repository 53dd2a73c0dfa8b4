"""Export claude.ai conversations to self-contained Markdown documents."""

from .errors import ChatExtractorError, ConfigError, MissingContextError, TranscriptError, UpstreamError
from .export import ExportResult, export_conversation, render_export
from .rendering import conversation_to_markdown, reconcile_references

__version__ = "0.1.0"

__all__ = [
    "ChatExtractorError",
    "ConfigError",
    "ExportResult",
    "MissingContextError",
    "TranscriptError",
    "UpstreamError",
    "conversation_to_markdown",
    "export_conversation",
    "reconcile_references",
    "render_export",
]
