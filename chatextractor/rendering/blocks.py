"""Per-block Markdown rendering.

Each content block renders to a Markdown fragment (possibly empty). Artifacts
and sources are not rendered inline: they are collected on the
``RenderContext`` and emitted by the message renderer after the body.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, assert_never

from chatextractor.lib.json import JSONEncodeError, dumps
from chatextractor.lib.log import get_logger
from chatextractor.sources.providers.claude_ai import (
    ContentBlock,
    ServerToolUseBlock,
    TextBlock,
    ThinkingBlock,
    ToolResultBlock,
    ToolUseBlock,
    UnknownBlock,
    WebSearchToolResultBlock,
)

from .links import SourceMap, extract_links

logger = get_logger(__name__)

LANGUAGE_BY_TYPE = {
    "application/vnd.ant.code": "",
    "application/vnd.ant.react": "tsx",
    "application/vnd.ant.mermaid": "mermaid",
    "text/html": "html",
    "text/css": "css",
    "text/markdown": "markdown",
    "image/svg+xml": "svg",
}

CODE_TYPES = frozenset({"text/html", "text/css", "image/svg+xml"})
ANT_TYPE_PREFIX = "application/vnd.ant."

_SUMMARY_KEYS = ("query", "title", "command")


@dataclass
class RenderContext:
    """Accumulators shared by every block of one message."""

    artifacts: List[str] = field(default_factory=list)
    sources: SourceMap = field(default_factory=SourceMap)


def infer_language(artifact_type: Optional[str]) -> str:
    if not artifact_type:
        return ""
    return LANGUAGE_BY_TYPE.get(artifact_type, "")


def is_code_type(artifact_type: Optional[str]) -> bool:
    if not artifact_type:
        return False
    return artifact_type.startswith(ANT_TYPE_PREFIX) or artifact_type in CODE_TYPES


def _details(summary: str, body: str) -> str:
    return "\n".join(["<details>", f"<summary>{summary}</summary>", "", body, "", "</details>", ""])


def render_text(block: TextBlock, ctx: RenderContext) -> str:
    for citation in block.citations:
        ctx.sources.cite(citation.url, citation.title)
    extract_links(block.text, ctx.sources)
    return block.text


def render_thinking(block: ThinkingBlock) -> str:
    if not block.thinking:
        return ""
    return _details("Thinking", block.thinking)


def render_artifact(block: ToolUseBlock, ctx: RenderContext) -> str:
    artifact = block.artifact_input
    display = block.display_content

    title = artifact.title or "Artifact"
    content = (display.code if display else None) or artifact.content or ""
    language = (display.language if display else None) or artifact.language or infer_language(artifact.type)
    filename = (display.filename if display else None) or ""

    if not content:
        return ""
    extract_links(content, ctx.sources)

    header = f"**{title}** (`{filename}`)" if filename else f"**{title}**"
    if is_code_type(artifact.type):
        ctx.artifacts.append(f"{header}\n\n```{language}\n{content}\n```")
    else:
        ctx.artifacts.append(f"{header}\n\n{content}")
    return ""


def _pretty_input(data: dict) -> str:
    try:
        return dumps(data, indent=True)
    except JSONEncodeError as exc:
        logger.debug("tool input is not JSON serializable", error=str(exc))
        return str(data)


def render_tool_use(block: ToolUseBlock, ctx: RenderContext) -> str:
    if block.is_artifact:
        return render_artifact(block, ctx)

    summary = next((block.input[key] for key in _SUMMARY_KEYS if block.input.get(key)), None)
    if not summary:
        return ""
    name = block.name or "tool"
    return _details(f"Tool: {name}", f"```json\n{_pretty_input(block.input)}\n```")


def render_tool_result(block: ToolResultBlock, ctx: RenderContext) -> str:
    texts = block.texts
    if not texts:
        return ""
    joined = "\n".join(texts)
    extract_links(joined, ctx.sources)
    if block.is_error:
        return f"> **Error**: {joined}"
    return joined


def render_web_search(block: WebSearchToolResultBlock, ctx: RenderContext) -> str:
    for result in block.results:
        ctx.sources.cite(result.url, result.title)
    return ""


def render_block(block: ContentBlock, ctx: RenderContext) -> str:
    """Render one content block, recording artifacts and sources on ``ctx``."""
    match block:
        case TextBlock():
            return render_text(block, ctx)
        case ThinkingBlock():
            return render_thinking(block)
        case ToolUseBlock():
            return render_tool_use(block, ctx)
        case ToolResultBlock():
            return render_tool_result(block, ctx)
        case ServerToolUseBlock():
            # Search initiation; the results block carries what matters.
            return ""
        case WebSearchToolResultBlock():
            return render_web_search(block, ctx)
        case UnknownBlock():
            logger.debug("skipping unsupported content block", block_type=block.type)
            return ""
        case _:
            assert_never(block)


__all__ = [
    "RenderContext",
    "infer_language",
    "is_code_type",
    "render_block",
]
