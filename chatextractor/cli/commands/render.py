"""Render command."""

from __future__ import annotations

from pathlib import Path

import click

from chatextractor.cli.helpers import emit, fail, load_effective_settings, read_page_links
from chatextractor.cli.types import AppEnv
from chatextractor.errors import ChatExtractorError
from chatextractor.export import ExportResult, render_export
from chatextractor.lib.log import log_context
from chatextractor.sources.providers.claude_ai import load_conversation_file


@click.command("render")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--page-links",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of links collected from the chat page",
)
@click.option("--origin-url", help="Chat URL to show in the header")
@click.option("--out", type=click.Path(file_okay=False, path_type=Path), help="Directory to save the Markdown file in")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the Markdown instead of saving it")
@click.pass_obj
def render_command(
    env: AppEnv,
    path: Path,
    page_links: Path | None,
    origin_url: str | None,
    out: Path | None,
    to_stdout: bool,
) -> None:
    """Render a saved conversation JSON file without network access."""
    settings = load_effective_settings(env, "render", output_dir=out)
    with log_context(command="render", source=str(path)):
        try:
            conversation = load_conversation_file(path)
            links = read_page_links("render", page_links)
            markdown = render_export(conversation, page_links=links, origin_url=origin_url)
        except ChatExtractorError as exc:
            fail("render", str(exc))
        except OSError as exc:
            fail("render", f"Could not read {path}: {exc}")
        result = ExportResult(conversation=conversation, markdown=markdown)
        emit(env, "render", markdown, conversation.name, result.summary, output_dir=settings.output_dir, to_stdout=to_stdout)
