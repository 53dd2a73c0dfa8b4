"""chatextractor error hierarchy.

All project exceptions inherit from ChatExtractorError, enabling:
- ``except ChatExtractorError`` at the CLI boundary
- Fine-grained catches deeper in the stack (``except UpstreamError``)

Hierarchy:
    ChatExtractorError
    ├── MissingContextError     # identifiers could not be located
    ├── UpstreamError           # retrieval reported a non-success outcome
    ├── TranscriptError         # payload is not a conversation at all
    └── ConfigError             # config.py
"""

from __future__ import annotations


class ChatExtractorError(Exception):
    """Base class for all chatextractor errors."""


class MissingContextError(ChatExtractorError):
    """An organization or conversation identifier could not be found."""


class UpstreamError(ChatExtractorError):
    """The conversation API request failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class TranscriptError(ChatExtractorError):
    """The retrieved payload cannot be read as a conversation."""


class ConfigError(ChatExtractorError):
    """Invalid configuration file or value."""
