"""CLI entrypoint."""

from __future__ import annotations

from pathlib import Path

import click
from rich.console import Console

from chatextractor.cli.commands import export_command, render_command
from chatextractor.cli.types import AppEnv
from chatextractor.lib.log import configure_logging


@click.group()
@click.option("--verbose", is_flag=True, envvar="CHATEXTRACTOR_VERBOSE", help="Enable debug logging")
@click.option("--json-logs", is_flag=True, envvar="CHATEXTRACTOR_JSON_LOGS", help="Emit logs as JSON lines on stderr")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to a JSON config file",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, json_logs: bool, config_path: Path | None) -> None:
    """Export claude.ai conversations as Markdown."""
    configure_logging(verbose=verbose, json_logs=json_logs)
    ctx.obj = AppEnv(console=Console(), config_path=config_path)


cli.add_command(export_command)
cli.add_command(render_command)


def main() -> None:
    cli()


__all__ = ["cli", "main"]
