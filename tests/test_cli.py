"""Tests for the Lumina CLI."""

from click.testing import CliRunner

from lumina.cli import main
from lumina.journal.store import EntryStore


def test_check_accepts_reflective_entry():
    result = CliRunner().invoke(
        main, ["check", "Today I felt really grateful for my friends and family"]
    )
    assert result.exit_code == 0
    assert "Accepted" in result.output


def test_check_rejects_spam():
    result = CliRunner().invoke(main, ["check", "test"])
    assert result.exit_code == 1
    assert "Rejected" in result.output
    assert "spam" in result.output


def test_rules_lists_tables():
    result = CliRunner().invoke(main, ["rules"])
    assert result.exit_code == 0
    assert "lumina-default" in result.output
    assert "harmful (7 rules)" in result.output


def test_create_user_prints_token(monkeypatch, tmp_path):
    monkeypatch.setenv("LUMINA_DATA_DIR", str(tmp_path))
    runner = CliRunner()

    result = runner.invoke(main, ["create-user", "robin"])
    assert result.exit_code == 0
    assert "Created user" in result.output

    again = runner.invoke(main, ["create-user", "robin"])
    assert again.exit_code == 1
    assert "already exists" in again.output


def test_insights(monkeypatch, tmp_path):
    monkeypatch.setenv("LUMINA_DATA_DIR", str(tmp_path))
    runner = CliRunner()

    empty = runner.invoke(main, ["insights", "u1"])
    assert empty.exit_code == 0
    assert "No entries yet" in empty.output

    EntryStore().add_entry(
        "u1", "Long day", {"sentiment": {"score": 0.2, "label": "positive"}, "themes": ["work"]}
    )
    result = runner.invoke(main, ["insights", "u1"])
    assert result.exit_code == 0
    assert "work" in result.output
