"""Export command."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import click

from chatextractor.cli.helpers import emit, fail, load_effective_settings, read_page_links
from chatextractor.cli.types import AppEnv
from chatextractor.errors import ChatExtractorError
from chatextractor.export import export_conversation
from chatextractor.lib.log import log_context
from chatextractor.sources.context import extract_next_data


def _read_next_data(page_html: Path | None) -> dict[str, Any] | None:
    if page_html is None:
        return None
    try:
        return extract_next_data(page_html.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as exc:
        fail("export", f"Could not read page HTML {page_html}: {exc}")


@click.command("export")
@click.argument("target")
@click.option("--org-id", help="Organization UUID (defaults to the lastActiveOrg cookie)")
@click.option("--cookie", "cookie_header", envvar="CHATEXTRACTOR_COOKIE", help="Browser Cookie header for claude.ai")
@click.option("--session-key", help="claude.ai sessionKey cookie value")
@click.option(
    "--page-html",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Saved chat page HTML, searched for the organization id",
)
@click.option(
    "--page-links",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON file of links collected from the chat page",
)
@click.option("--out", type=click.Path(file_okay=False, path_type=Path), help="Directory to save the Markdown file in")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the Markdown instead of saving it")
@click.pass_obj
def export_command(
    env: AppEnv,
    target: str,
    org_id: str | None,
    cookie_header: str | None,
    session_key: str | None,
    page_html: Path | None,
    page_links: Path | None,
    out: Path | None,
    to_stdout: bool,
) -> None:
    """Fetch a claude.ai conversation and export it as Markdown."""
    settings = load_effective_settings(
        env,
        "export",
        organization_id=org_id,
        session_key=session_key,
        output_dir=out,
    )
    with log_context(command="export"):
        next_data = _read_next_data(page_html)
        try:
            links = read_page_links("export", page_links)
            result = asyncio.run(
                export_conversation(
                    target,
                    settings=settings,
                    cookie_header=cookie_header,
                    next_data=next_data,
                    page_links=links,
                )
            )
        except ChatExtractorError as exc:
            fail("export", str(exc))
        emit(
            env,
            "export",
            result.markdown,
            result.conversation.name,
            result.summary,
            output_dir=settings.output_dir,
            to_stdout=to_stdout,
        )
