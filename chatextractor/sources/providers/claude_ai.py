"""Claude AI (web) conversation models.

These models follow the shape returned by the claude.ai conversation API
(``?tree=True&rendering_mode=messages``). Only the fields rendering needs are
declared; everything else is kept through ``extra="allow"``.

Content blocks form a closed tagged union on ``type``. Tags this module does
not know, and known tags whose payload does not validate, become
``UnknownBlock`` instead of failing the whole conversation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
    model_validator,
)

from chatextractor.errors import TranscriptError
from chatextractor.lib.json import loads
from chatextractor.lib.log import get_logger

logger = get_logger(__name__)

ARTIFACT_TOOL_NAMES = frozenset({"artifacts"})


def _valid_items(model: type[BaseModel], items: list[Any], kind: str) -> list[Any]:
    """Validate ``items`` one by one, dropping any that are not ``model`` shaped."""
    valid: list[Any] = []
    for item in items:
        if isinstance(item, model):
            valid.append(item)
            continue
        if not isinstance(item, dict):
            logger.debug("dropping non-object item", kind=kind, item_type=type(item).__name__)
            continue
        try:
            valid.append(model.model_validate(item))
        except ValidationError as exc:
            logger.debug("dropping invalid item", kind=kind, errors=exc.error_count())
    return valid


class Citation(BaseModel):
    """Author-asserted source attached to a text block."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    url: str | None = None
    title: str | None = None
    cited_text: str | None = None


class TextBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["text"] = "text"
    text: str = ""
    citations: list[Citation] = Field(default_factory=list)

    @field_validator("text", mode="before")
    @classmethod
    def _none_text(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("citations", mode="before")
    @classmethod
    def _valid_citations(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return _valid_items(Citation, v, "citation")


class ThinkingBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["thinking"] = "thinking"
    thinking: str = ""

    @field_validator("thinking", mode="before")
    @classmethod
    def _none_thinking(cls, v: Any) -> Any:
        return "" if v is None else v


class ArtifactInput(BaseModel):
    """``input`` payload of an artifact tool call."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    type: str | None = None
    title: str | None = None
    command: str | None = None
    content: str | None = None
    language: str | None = None


class DisplayContent(BaseModel):
    """Pre-rendered view of a tool call, preferred over the raw input."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    code: str | None = None
    language: str | None = None
    filename: str | None = None


class ToolUseBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["tool_use"] = "tool_use"
    id: str | None = None
    name: str = ""
    input: dict[str, Any] = Field(default_factory=dict)
    display_content: DisplayContent | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _none_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("input", mode="before")
    @classmethod
    def _coerce_input(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else {}

    @field_validator("display_content", mode="before")
    @classmethod
    def _coerce_display(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    @property
    def is_artifact(self) -> bool:
        return self.name in ARTIFACT_TOOL_NAMES

    @property
    def artifact_input(self) -> ArtifactInput:
        try:
            return ArtifactInput.model_validate(self.input)
        except ValidationError:
            logger.debug("artifact input did not validate", tool=self.name, tool_id=self.id)
            return ArtifactInput()


class ToolResultFragment(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None
    text: str | None = None


class ToolResultBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["tool_result"] = "tool_result"
    name: str | None = None
    content: list[ToolResultFragment] = Field(default_factory=list)
    is_error: bool = False

    @field_validator("content", mode="before")
    @classmethod
    def _coerce_content(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [{"type": "text", "text": v}]
        if isinstance(v, list):
            return [item if isinstance(item, dict) else {"text": item} for item in v if isinstance(item, (dict, str))]
        return []

    @field_validator("is_error", mode="before")
    @classmethod
    def _none_error(cls, v: Any) -> Any:
        return bool(v)

    @property
    def texts(self) -> list[str]:
        return [fragment.text for fragment in self.content if fragment.text]


class ServerToolUseBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["server_tool_use"] = "server_tool_use"
    id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None


class WebSearchResult(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None
    url: str | None = None
    title: str | None = None
    page_age: str | None = None


class WebSearchError(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str | None = None
    error_code: str | None = None


class WebSearchToolResultBlock(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["web_search_tool_result", "web_search_result"] = "web_search_tool_result"
    tool_use_id: str | None = None
    content: list[WebSearchResult] | WebSearchError | None = None

    @field_validator("content", mode="before")
    @classmethod
    def _valid_results(cls, v: Any) -> Any:
        if isinstance(v, list):
            return _valid_items(WebSearchResult, v, "web search result")
        return v if isinstance(v, dict) else None

    @property
    def results(self) -> list[WebSearchResult]:
        return self.content if isinstance(self.content, list) else []


class UnknownBlock(BaseModel):
    """Any block this version cannot render. Kept so nothing is silently lost."""

    model_config = ConfigDict(extra="allow")

    type: str = "unknown"
    raw: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _keep_raw(cls, data: Any) -> Any:
        if isinstance(data, UnknownBlock):
            return data
        if isinstance(data, BaseModel):
            data = data.model_dump()
        if isinstance(data, dict) and "raw" not in data:
            return {"type": str(data.get("type") or "unknown"), "raw": data}
        if not isinstance(data, dict):
            return {"type": "unknown", "raw": {"value": data}}
        return data


_BLOCK_TAGS = {
    "text": "text",
    "thinking": "thinking",
    "tool_use": "tool_use",
    "tool_result": "tool_result",
    "server_tool_use": "server_tool_use",
    "web_search_tool_result": "web_search_tool_result",
    "web_search_result": "web_search_tool_result",
}


def _block_tag(value: Any) -> str:
    if isinstance(value, dict):
        raw_type = value.get("type")
    else:
        raw_type = getattr(value, "type", None)
    if isinstance(raw_type, str):
        return _BLOCK_TAGS.get(raw_type, "unknown")
    return "unknown"


def _tolerate_block(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError as exc:
        logger.debug("content block did not validate", block_type=_block_tag(value), errors=exc.error_count())
        if isinstance(value, BaseModel):
            value = value.model_dump()
        if isinstance(value, dict):
            return UnknownBlock(type=str(value.get("type") or "unknown"), raw=value)
        return UnknownBlock(raw={"value": value})


ContentBlock = Annotated[
    Union[
        Annotated[TextBlock, Tag("text")],
        Annotated[ThinkingBlock, Tag("thinking")],
        Annotated[ToolUseBlock, Tag("tool_use")],
        Annotated[ToolResultBlock, Tag("tool_result")],
        Annotated[ServerToolUseBlock, Tag("server_tool_use")],
        Annotated[WebSearchToolResultBlock, Tag("web_search_tool_result")],
        Annotated[UnknownBlock, Tag("unknown")],
    ],
    Discriminator(_block_tag),
    WrapValidator(_tolerate_block),
]
"""A single content unit of a message."""


class Attachment(BaseModel):
    """User-supplied file whose extracted text may be inlined."""

    model_config = ConfigDict(extra="allow")

    id: str | None = None
    file_name: str | None = None
    file_size: int | None = None
    file_type: str | None = None
    extracted_content: str | None = None

    @field_validator("file_size", mode="before")
    @classmethod
    def _coerce_size(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return int(v)
        if isinstance(v, str) and v.isdigit():
            return int(v)
        return None


class ChatMessage(BaseModel):
    """A single message in a Claude AI conversation."""

    model_config = ConfigDict(extra="allow")

    uuid: str = ""
    parent_message_uuid: str | None = None
    index: int | None = None
    sender: str = "assistant"
    text: str | None = None
    content: list[ContentBlock] = Field(default_factory=list)
    attachments: list[Attachment] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None

    @field_validator("uuid", mode="before")
    @classmethod
    def _none_uuid(cls, v: Any) -> Any:
        return "" if v is None else str(v)

    @field_validator("parent_message_uuid", mode="before")
    @classmethod
    def _coerce_parent(cls, v: Any) -> Any:
        return None if v is None else str(v)

    @field_validator("index", mode="before")
    @classmethod
    def _coerce_index(cls, v: Any) -> Any:
        return v if isinstance(v, int) and not isinstance(v, bool) else None

    @field_validator("content", mode="before")
    @classmethod
    def _none_content(cls, v: Any) -> Any:
        return v if isinstance(v, list) else []

    @field_validator("attachments", mode="before")
    @classmethod
    def _valid_attachments(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return _valid_items(Attachment, v, "attachment")

    @field_validator("sender", mode="before")
    @classmethod
    def _none_sender(cls, v: Any) -> Any:
        return v if isinstance(v, str) else "assistant"

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, v: Any) -> Any:
        return v if isinstance(v, str) else None

    @property
    def is_human(self) -> bool:
        return self.sender == "human"


class Conversation(BaseModel):
    """A complete Claude AI conversation as returned by the API."""

    model_config = ConfigDict(extra="allow")

    uuid: str = ""
    name: str = ""
    summary: str | None = None
    model: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    current_leaf_message_uuid: str | None = None
    chat_messages: list[ChatMessage] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _none_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("chat_messages", mode="before")
    @classmethod
    def _valid_messages(cls, v: Any) -> Any:
        if not isinstance(v, list):
            return []
        return _valid_items(ChatMessage, v, "message")

    @property
    def title(self) -> str:
        return self.name or "Untitled Conversation"


def parse_conversation(payload: Any) -> Conversation:
    """Validate a decoded API payload as a conversation.

    Raises:
        TranscriptError: if the payload is not a conversation object
    """
    if not isinstance(payload, dict):
        raise TranscriptError(f"Expected a conversation object, got {type(payload).__name__}")
    try:
        return Conversation.model_validate(payload)
    except ValidationError as exc:
        raise TranscriptError(f"Unexpected conversation format: {exc.error_count()} error(s)") from exc


def load_conversation_file(path: Path) -> Conversation:
    try:
        payload = loads(path.read_bytes())
    except ValueError as exc:
        raise TranscriptError(f"Invalid JSON in {path}: {exc}") from exc
    return parse_conversation(payload)


__all__ = [
    "ARTIFACT_TOOL_NAMES",
    "ArtifactInput",
    "Attachment",
    "ChatMessage",
    "Citation",
    "ContentBlock",
    "Conversation",
    "DisplayContent",
    "ServerToolUseBlock",
    "TextBlock",
    "ThinkingBlock",
    "ToolResultBlock",
    "ToolResultFragment",
    "ToolUseBlock",
    "UnknownBlock",
    "WebSearchError",
    "WebSearchResult",
    "WebSearchToolResultBlock",
    "load_conversation_file",
    "parse_conversation",
]
