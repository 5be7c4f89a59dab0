"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from learningpacer.cli import main


@pytest.fixture
def runner(monkeypatch):
    """CLI runner that leaves logging unconfigured."""
    monkeypatch.setattr("learningpacer.cli.configure_logging", lambda: None)
    return CliRunner()


def _write(tmp_path, data) -> str:
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return str(path)


def test_parse_command(runner, textbook_citation_line):
    result = runner.invoke(main, ["parse", "--", textbook_citation_line])

    assert result.exit_code == 0
    assert "textbook" in result.output
    assert "199" in result.output


def test_sources_command(runner, payload_file):
    result = runner.invoke(main, ["sources", str(payload_file)])

    assert result.exit_code == 0
    assert "reliable" in result.output
    assert "SOURCES (2)" in result.output
    assert "Why this source?" in result.output
    assert "87% match" in result.output


def test_sources_general_knowledge(runner, tmp_path):
    path = _write(tmp_path, {"answer": "IP is best effort.", "citations": ["general knowledge"]})

    result = runner.invoke(main, ["sources", path])

    assert result.exit_code == 0
    assert "General Knowledge" in result.output


def test_sources_legacy_source(runner, tmp_path):
    path = _write(tmp_path, {"answer": "x", "source": "Based on knowledge base (vector store)"})

    result = runner.invoke(main, ["sources", path])

    assert result.exit_code == 0
    assert "Course Materials" in result.output


def test_sources_invalid_json(runner, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{broken", encoding="utf-8")

    result = runner.invoke(main, ["sources", str(path)])

    assert result.exit_code == 1


def test_label_command(runner):
    result = runner.invoke(main, ["label", "Course Material", "--source-url", "10-IP.pdf"])

    assert result.exit_code == 0
    assert "Lecture 10: IP" in result.output
