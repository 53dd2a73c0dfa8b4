"""Shared filesystem paths for chatextractor."""

from __future__ import annotations

import os
from pathlib import Path


def _xdg_path(env_var: str, fallback: Path) -> Path:
    raw = os.environ.get(env_var)
    if raw:
        return Path(raw).expanduser()
    return fallback


CONFIG_ROOT = _xdg_path("XDG_CONFIG_HOME", Path.home() / ".config")

CONFIG_HOME = CONFIG_ROOT / "chatextractor"
DEFAULT_CONFIG_PATH = CONFIG_HOME / "config.json"


__all__ = [
    "CONFIG_HOME",
    "CONFIG_ROOT",
    "DEFAULT_CONFIG_PATH",
]
