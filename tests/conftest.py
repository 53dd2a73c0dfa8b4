from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from chatextractor.lib.json import dumps
from chatextractor.lib.log import configure_logging

ORG_ID = "11111111-2222-3333-4444-555555555555"
CONVERSATION_ID = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep user config and CHATEXTRACTOR_* variables out of every test."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("CHATEXTRACTOR_CONFIG", str(tmp_path / "config" / "chatextractor" / "config.json"))
    for name in (
        "ORGANIZATION_ID",
        "SESSION_KEY",
        "OUTPUT_DIR",
        "BASE_URL",
        "RETRIES",
        "REQUEST_TIMEOUT",
        "COOKIE",
        "VERBOSE",
        "JSON_LOGS",
    ):
        monkeypatch.delenv(f"CHATEXTRACTOR_{name}", raising=False)
    configure_logging()


@pytest.fixture
def paris_payload() -> dict[str, Any]:
    return {
        "uuid": CONVERSATION_ID,
        "name": "Capital of France",
        "model": "claude-sonnet-4",
        "current_leaf_message_uuid": "m2",
        "chat_messages": [
            {
                "uuid": "m1",
                "parent_message_uuid": None,
                "sender": "human",
                "content": [{"type": "text", "text": "What's the capital of France?"}],
            },
            {
                "uuid": "m2",
                "parent_message_uuid": "m1",
                "sender": "assistant",
                "content": [
                    {
                        "type": "text",
                        "text": "Paris is the capital.",
                        "citations": [{"url": "https://a.example/paris", "title": "Paris - Encyclopedia"}],
                    }
                ],
            },
        ],
    }


@pytest.fixture
def paris_file(tmp_path: Path, paris_payload: dict[str, Any]) -> Path:
    path = tmp_path / "conversation.json"
    path.write_text(dumps(paris_payload), encoding="utf-8")
    return path
