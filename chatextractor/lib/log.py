"""structlog setup for chatextractor.

Every event goes to stderr so ``--stdout`` output stays a clean document.
Export-scoped values (command, organization, conversation) are bound once
with ``log_context`` and merged into every event logged inside it.
"""

from __future__ import annotations

import logging
import sys
from contextlib import AbstractContextManager
from typing import Any

import structlog
from structlog.types import Processor


class _CurrentStderr:
    """Writes to whatever ``sys.stderr`` is at write time.

    Test runners and click's CliRunner swap ``sys.stderr`` after logging
    has been configured.
    """

    def write(self, message: str) -> int:
        return sys.stderr.write(message)

    def flush(self) -> None:
        sys.stderr.flush()


def _renderer(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]


def configure_logging(verbose: bool = False, json_logs: bool = False) -> None:
    """Route events to stderr, at debug level with ``verbose``."""
    structlog.contextvars.clear_contextvars()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            *_renderer(json_logs),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG if verbose else logging.INFO),
        logger_factory=structlog.PrintLoggerFactory(file=_CurrentStderr()),  # type: ignore[arg-type]
        # Reconfigured per CLI invocation.
        cache_logger_on_first_use=False,
    )


def log_context(**values: Any) -> AbstractContextManager[None]:
    """Bind ``values`` to every event logged inside the block; ``None`` values are skipped."""
    bound = {key: value for key, value in values.items() if value is not None}
    return structlog.contextvars.bound_contextvars(**bound)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


__all__ = ["configure_logging", "get_logger", "log_context"]
