"""Root conftest — isolate every test from ambient gate configuration."""

from __future__ import annotations

import pytest

_POLICY_ENV = ("READ_ONLY", "ADMIN_OVERRIDE", "REQUIRE_APPROVAL")


@pytest.fixture(autouse=True)
def isolated_gate(tmp_path, monkeypatch):
    """No policy env vars, a config path that doesn't exist yet, logs under tmp_path."""
    for name in _POLICY_ENV:
        monkeypatch.delenv(name, raising=False)
    config_file = tmp_path / "config.toml"
    monkeypatch.setenv("SQLGATE_CONFIG", str(config_file))
    monkeypatch.setattr("sqlgate.auditlog._LOG_ROOT", tmp_path / "logs")
    return config_file
