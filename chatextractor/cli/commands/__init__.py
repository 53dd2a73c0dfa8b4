"""CLI commands."""

from .export import export_command
from .render import render_command

__all__ = ["export_command", "render_command"]
