"""Test the validate and approve CLI commands end-to-end."""

import json

from click.testing import CliRunner

from sqlgate.auditlog import read_entries
from sqlgate.cli import main


def test_validate_safe_select() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "SELECT id FROM users"])
    assert result.exit_code == 0
    assert "decision: success" in result.output


def test_validate_drop_blocked() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "DROP TABLE users"])
    assert result.exit_code == 1
    assert "decision: blocked" in result.output
    assert "DROP" in result.output
    assert "= help:" in result.output


def test_validate_multiple_statements_blocked() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "SELECT 1; DROP TABLE x"])
    assert result.exit_code == 1
    assert "multiple statements" in result.output


def test_validate_json_output() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "--format", "json", "SELECT 1"])
    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["isValid"] is True
    assert data["decision"] == "success"
    assert data["classification"] == "safe_read"


def test_validate_file_operation_json() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["validate", "--format", "json", "SELECT * FROM t INTO OUTFILE '/tmp/x'"],
    )
    assert result.exit_code == 1
    data = json.loads(result.output)
    assert "File operations" in data["error"]
    assert data["code"] == "G0203"


def test_validate_admin_override_asks() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["validate", "--format", "json", "--admin-override", "DELETE FROM orders WHERE id = 1"],
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["decision"] == "approval_required"


def test_validate_not_read_only() -> None:
    runner = CliRunner()
    result = runner.invoke(
        main,
        ["validate", "--no-read-only", "UPDATE customers SET name = 'Test' WHERE id = 1"],
    )
    assert result.exit_code == 0
    assert "decision: success" in result.output


def test_validate_env_override(monkeypatch) -> None:
    monkeypatch.setenv("ADMIN_OVERRIDE", "true")
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "DELETE FROM orders WHERE id = 1"])
    assert result.exit_code == 0
    assert "approval_required" in result.output


def test_flag_beats_env(monkeypatch) -> None:
    monkeypatch.setenv("ADMIN_OVERRIDE", "true")
    runner = CliRunner()
    result = runner.invoke(
        main, ["validate", "--no-admin-override", "DELETE FROM orders WHERE id = 1"]
    )
    assert result.exit_code == 1


def test_validate_from_stdin() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "--from-stdin"], input="SELECT 1\n")
    assert result.exit_code == 0


def test_validate_requires_sql() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate"])
    assert result.exit_code == 2
    assert "Missing argument" in result.output


def test_validate_empty_string_blocked() -> None:
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "   "])
    assert result.exit_code == 1
    assert "empty query" in result.output


def test_validate_writes_sanitized_audit_entry() -> None:
    runner = CliRunner()
    runner.invoke(main, ["validate", "SELECT * FROM users WHERE password = 'secret123'"])
    [entry] = read_entries()
    assert "secret123" not in entry["sql"]
    assert entry["decision"] == "success"


def test_validate_no_log() -> None:
    runner = CliRunner()
    runner.invoke(main, ["validate", "--no-log", "SELECT 1"])
    assert read_entries() == []


def test_log_disabled_in_config(isolated_gate) -> None:
    isolated_gate.write_text("[log]\nenabled = false\n")
    runner = CliRunner()
    runner.invoke(main, ["validate", "SELECT 1"])
    assert read_entries() == []


def test_invalid_config_is_usage_error(isolated_gate) -> None:
    isolated_gate.write_text("[policy\n")
    runner = CliRunner()
    result = runner.invoke(main, ["validate", "SELECT 1"])
    assert result.exit_code == 2
    assert "invalid config" in result.output


class TestApprove:
    def test_still_permitted(self, monkeypatch) -> None:
        monkeypatch.setenv("ADMIN_OVERRIDE", "true")
        runner = CliRunner()
        result = runner.invoke(main, ["approve", "DELETE FROM orders WHERE id = 1"])
        assert result.exit_code == 0
        assert "decision: success" in result.output

    def test_override_revoked(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["approve", "DELETE FROM orders WHERE id = 1"])
        assert result.exit_code == 1
        assert "decision: blocked" in result.output
        [entry] = read_entries()
        assert entry["stage"] == "approve"
        assert entry["decision"] == "blocked"

    def test_multiple_statements_never_approved(self, monkeypatch) -> None:
        monkeypatch.setenv("READ_ONLY", "false")
        runner = CliRunner()
        result = runner.invoke(main, ["approve", "--format", "json", "SELECT 1; SELECT 2"])
        assert result.exit_code == 1
        assert json.loads(result.output)["decision"] == "blocked"
