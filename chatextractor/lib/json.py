"""Central JSON utilities using orjson."""

from __future__ import annotations

from typing import Any

import orjson

JSONEncodeError = orjson.JSONEncodeError


def dumps(obj: Any, *, indent: bool = False) -> str:
    """Dump object to a JSON string.

    With ``indent`` the output uses two-space indentation, matching what the
    browser's ``JSON.stringify(value, null, 2)`` shows for tool inputs.
    """
    option = orjson.OPT_INDENT_2 if indent else None
    return orjson.dumps(obj, default=str, option=option).decode("utf-8")


def loads(obj: str | bytes) -> Any:
    """Load object from JSON string or bytes."""
    return orjson.loads(obj)
