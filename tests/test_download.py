from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from chatextractor.download import export_filename, sanitize_filename, save_markdown


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("Capital of France", "capital-of-france"),
        ("What's   new?  2024/25", "whats-new-202425"),
        ("Émigré café", "migr-caf"),
        ("!!!", "untitled"),
        ("", "untitled"),
        (None, "untitled"),
    ],
)
def test_sanitize_filename(name: str | None, expected: str) -> None:
    assert sanitize_filename(name) == expected


def test_sanitize_filename_truncates() -> None:
    assert len(sanitize_filename("a" * 200)) == 80


def test_export_filename_is_dated() -> None:
    assert export_filename("Capital of France", date(2025, 3, 1)) == "capital-of-france_2025-03-01.md"


def test_save_markdown_creates_directory(tmp_path: Path) -> None:
    target = save_markdown("# Doc\n", "My Chat", tmp_path / "out" / "nested", exported_on=date(2025, 3, 1))
    assert target == tmp_path / "out" / "nested" / "my-chat_2025-03-01.md"
    assert target.read_text(encoding="utf-8") == "# Doc\n"
