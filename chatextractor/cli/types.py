"""CLI types."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from rich.console import Console


@dataclass
class AppEnv:
    console: Console
    config_path: Path | None = None
