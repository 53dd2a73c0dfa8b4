"""CLI helper functions."""

from __future__ import annotations

from pathlib import Path
from typing import Any, NoReturn

from chatextractor.cli.types import AppEnv
from chatextractor.config import ExtractorSettings, load_settings
from chatextractor.download import save_markdown
from chatextractor.errors import ConfigError
from chatextractor.sources.page_links import PageLink, load_page_links


def fail(command: str, message: str) -> NoReturn:
    raise SystemExit(f"{command}: {message}")


def load_effective_settings(env: AppEnv, command: str, **overrides: Any) -> ExtractorSettings:
    try:
        return load_settings(env.config_path, **overrides)
    except ConfigError as exc:
        fail(command, str(exc))


def read_page_links(command: str, path: Path | None) -> list[PageLink]:
    if path is None:
        return []
    try:
        return load_page_links(path)
    except OSError as exc:
        fail(command, f"Could not read page links {path}: {exc}")


def emit(
    env: AppEnv,
    command: str,
    markdown: str,
    title: str,
    summary: str,
    *,
    output_dir: Path,
    to_stdout: bool,
) -> None:
    """Print the document or save it, then report where it went."""
    if to_stdout:
        # Raw write so rich markup never touches the document.
        env.console.file.write(markdown)
        env.console.file.flush()
        return
    try:
        target = save_markdown(markdown, title, output_dir)
    except OSError as exc:
        fail(command, f"Could not save export to {output_dir}: {exc}")
    env.console.print(f"{summary} -> {target}", markup=False, highlight=False, soft_wrap=True)
