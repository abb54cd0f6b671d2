"""Gate configuration — ~/.sqlgate/config.toml plus environment overrides.

Nothing here is cached: every call reads the file and the environment again,
so a flag flipped at runtime applies to the very next validation.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_CONFIG_FILE = Path.home() / ".sqlgate" / "config.toml"
CONFIG_ENV_VAR = "SQLGATE_CONFIG"

MAX_LOG_LENGTH = 500
DEFAULT_RETENTION_DAYS = 30

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


class ConfigError(ValueError):
    """Raised when the config file exists but cannot be used."""


@dataclass(frozen=True)
class GateConfig:
    """Raw settings from the config file. Policy flags stay unparsed."""

    policy: dict[str, object] = field(default_factory=dict)
    sensitive_fields: tuple[str, ...] = ()
    max_length: int = MAX_LOG_LENGTH
    log_enabled: bool = True
    retention_days: int = DEFAULT_RETENTION_DAYS


def parse_flag(value: object, *, default: bool) -> bool:
    """Interpret a boolean-like value, falling back to ``default`` when unparseable."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE:
            return True
        if token in _FALSE:
            return False
    return default


def config_path(environ: Mapping[str, str] | None = None) -> Path:
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_ENV_VAR)
    return Path(override).expanduser() if override else DEFAULT_CONFIG_FILE


def load_config(path: Path | None = None) -> GateConfig:
    """Load the config file. A missing file yields defaults."""
    path = config_path() if path is None else path
    if not path.exists():
        return GateConfig()

    try:
        data = tomllib.loads(path.read_text())
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"{path}: {e}") from e

    policy = data.get("policy", {})
    sanitize = data.get("sanitize", {})
    log = data.get("log", {})
    if not all(isinstance(t, dict) for t in (policy, sanitize, log)):
        raise ConfigError(f"{path}: [policy], [sanitize] and [log] must be tables")

    fields = sanitize.get("sensitive_fields", [])
    if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
        raise ConfigError(f"{path}: sanitize.sensitive_fields must be a list of strings")

    max_length = sanitize.get("max_length", MAX_LOG_LENGTH)
    retention = log.get("retention_days", DEFAULT_RETENTION_DAYS)
    if not isinstance(max_length, int) or max_length <= 0:
        raise ConfigError(f"{path}: sanitize.max_length must be a positive integer")
    if not isinstance(retention, int) or retention <= 0:
        raise ConfigError(f"{path}: log.retention_days must be a positive integer")

    return GateConfig(
        policy=dict(policy),
        sensitive_fields=tuple(f for f in fields if f.strip()),
        max_length=min(max_length, MAX_LOG_LENGTH),
        log_enabled=parse_flag(log.get("enabled", True), default=True),
        retention_days=retention,
    )
