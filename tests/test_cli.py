from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from chatextractor.cli import cli
from chatextractor.export import ExportResult
from chatextractor.lib.json import dumps
from chatextractor.sources.providers.claude_ai import parse_conversation


def test_render_to_stdout(paris_file: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(paris_file), "--stdout"])

    assert result.exit_code == 0, result.output
    assert "# Capital of France" in result.stdout
    assert "- [Paris - Encyclopedia](https://a.example/paris)" in result.stdout


def test_render_saves_file(paris_file: Path, tmp_path: Path) -> None:
    out = tmp_path / "exports"
    runner = CliRunner()
    result = runner.invoke(cli, ["render", str(paris_file), "--out", str(out)])

    assert result.exit_code == 0, result.output
    (saved,) = out.glob("capital-of-france_*.md")
    assert saved.read_text(encoding="utf-8").startswith("# Capital of France")
    assert 'Exported "Capital of France" (2 messages) ->' in result.stdout


def test_render_with_page_links_and_origin(paris_file: Path, tmp_path: Path) -> None:
    links = tmp_path / "links.json"
    links.write_text(dumps([{"title": "Paris", "url": "https://c.example/p", "contextBefore": ""}]), encoding="utf-8")
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["render", str(paris_file), "--page-links", str(links), "--origin-url", "https://claude.ai/chat/x", "--stdout"],
    )

    assert result.exit_code == 0, result.output
    assert "> URL: https://claude.ai/chat/x" in result.stdout
    assert "### References" in result.stdout


def test_render_rejects_non_conversation(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    result = CliRunner().invoke(cli, ["render", str(path), "--stdout"])

    assert result.exit_code != 0
    assert "render: Expected a conversation object" in result.output


def test_invalid_config_fails_cleanly(paris_file: Path, tmp_path: Path) -> None:
    config = tmp_path / "bad.json"
    config.write_text('{"colour": "blue"}', encoding="utf-8")
    result = CliRunner().invoke(cli, ["--config", str(config), "render", str(paris_file), "--stdout"])

    assert result.exit_code != 0
    assert "render: Unknown config key(s)" in result.output


def test_export_without_org_reports_missing_context() -> None:
    result = CliRunner().invoke(cli, ["export", "https://claude.ai/chat/aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"])

    assert result.exit_code != 0
    assert "export: Could not find organization ID" in result.output


def test_export_passes_options_through(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, paris_payload: dict[str, Any]
) -> None:
    captured: dict[str, Any] = {}

    async def fake_export(target: str, **kwargs: Any) -> ExportResult:
        captured["target"] = target
        captured.update(kwargs)
        return ExportResult(conversation=parse_conversation(paris_payload), markdown="# Capital of France\n")

    monkeypatch.setattr("chatextractor.cli.commands.export.export_conversation", fake_export)
    result = CliRunner().invoke(
        cli,
        [
            "export",
            "https://claude.ai/chat/aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee",
            "--org-id",
            "11111111-2222-3333-4444-555555555555",
            "--cookie",
            "sessionKey=abc",
            "--out",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert captured["settings"].organization_id == "11111111-2222-3333-4444-555555555555"
    assert captured["settings"].output_dir == tmp_path
    assert captured["cookie_header"] == "sessionKey=abc"
    assert captured["page_links"] == []
    assert list(tmp_path.glob("capital-of-france_*.md"))


def test_environment_enables_json_logs(paris_file: Path, tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["render", str(paris_file), "--out", str(tmp_path / "out")],
        env={"CHATEXTRACTOR_JSON_LOGS": "1"},
    )

    assert result.exit_code == 0, result.output
    assert '"event": "saved export"' in result.output
    assert '"command": "render"' in result.output


def test_unwritable_output_directory_fails_cleanly(paris_file: Path, tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    result = CliRunner().invoke(cli, ["render", str(paris_file), "--out", str(blocker / "exports")])

    assert result.exit_code == 1
    assert "render: Could not save export to" in result.output
    assert "Traceback" not in result.output


def test_undecodable_page_html_fails_cleanly(tmp_path: Path) -> None:
    page = tmp_path / "page.html"
    page.write_bytes(b"\xff\xfe\xfa not utf-8")
    result = CliRunner().invoke(
        cli,
        ["export", "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee", "--page-html", str(page)],
    )

    assert result.exit_code == 1
    assert "export: Could not read page HTML" in result.output
