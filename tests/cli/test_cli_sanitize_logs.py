"""Test the sanitize and logs CLI commands."""

import json
from datetime import UTC, datetime, timedelta

from click.testing import CliRunner

from sqlgate.auditlog import _log_dir
from sqlgate.cli import main


def test_sanitize_masks_password() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["sanitize", "SELECT * FROM users WHERE password = 'secret123'"])
    assert result.exit_code == 0
    assert result.output.strip() == "SELECT * FROM users WHERE password = '***'"


def test_sanitize_uses_configured_fields(isolated_gate) -> None:
    isolated_gate.write_text('[sanitize]\nsensitive_fields = ["ssn"]\n')
    runner = CliRunner()
    result = runner.invoke(main, ["sanitize", "WHERE ssn = '123-45-6789'"])
    assert "6789" not in result.output


def test_sanitize_from_stdin_caps_length() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["sanitize", "--from-stdin"], input="x" * 2000)
    assert result.exit_code == 0
    assert len(result.output.rstrip("\n")) <= 500


def test_logs_lists_entries() -> None:
    runner = CliRunner()
    runner.invoke(main, ["validate", "DROP TABLE orders"])
    result = runner.invoke(main, ["logs"])
    assert result.exit_code == 0
    assert "blocked [G0301]: DROP TABLE orders" in result.output
    assert "(1 entries)" in result.output


def test_logs_json() -> None:
    runner = CliRunner()
    runner.invoke(main, ["validate", "SELECT 1"])
    result = runner.invoke(main, ["logs", "--format", "json"])
    entries = json.loads(result.output)
    assert entries[0]["sql"] == "SELECT 1"


def test_logs_cleanup() -> None:
    log_dir = _log_dir()
    log_dir.mkdir(parents=True)
    old = (datetime.now(UTC) - timedelta(days=10)).strftime("%Y-%m-%d")
    (log_dir / f"{old}.jsonl").write_text("{}\n")

    runner = CliRunner()
    result = runner.invoke(main, ["logs", "--cleanup", "--retention-days", "5"])
    assert result.exit_code == 0
    assert "deleted 1 log file(s)" in result.output


def test_logs_cleanup_rejects_non_positive() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["logs", "--cleanup", "--retention-days", "0"])
    assert result.exit_code == 2
