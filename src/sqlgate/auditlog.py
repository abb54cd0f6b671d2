"""Audit logging — daily JSONL files per project, with automatic retention cleanup.

Only sanitized SQL is ever written: every entry goes through
``sanitize_for_logging`` before it touches disk.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from pathlib import Path

from sqlgate.config import DEFAULT_RETENTION_DAYS, MAX_LOG_LENGTH
from sqlgate.diagnostics import Verdict
from sqlgate.sanitize import sanitize_for_logging

logger = logging.getLogger(__name__)

_LOG_ROOT = Path.home() / ".sqlgate" / "logs"


def _project_slug() -> str:
    """Encode cwd into a directory-safe slug."""
    cwd = os.getcwd()
    return cwd.replace("/", "-").lstrip("-")


def _log_dir() -> Path:
    """Return the log directory for the current project."""
    return _LOG_ROOT / _project_slug()


def _day_file(day: str | None = None) -> Path:
    """Return the log file path for ``day`` (YYYY-MM-DD), today by default."""
    day = day or datetime.now(UTC).strftime("%Y-%m-%d")
    return _log_dir() / f"{day}.jsonl"


def log_decision(
    *,
    sql: str,
    verdict: Verdict,
    decision: str,
    stage: str = "validate",
    extra_fields: Iterable[str] = (),
    max_length: int = MAX_LOG_LENGTH,
    labels: dict[str, str] | None = None,
) -> None:
    """Append an audit entry for one gate decision to today's JSONL file."""
    entry = {
        "ts": datetime.now(UTC).isoformat(),
        "stage": stage,
        "sql": sanitize_for_logging(sql, extra_fields=extra_fields, max_length=max_length),
        "decision": decision,
        "allowed": verdict.is_valid,
        "classification": verdict.classification,
        "code": str(verdict.code) if verdict.code is not None else None,
        "error": verdict.error,
        "labels": labels,
    }

    log_file = _day_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    with open(log_file, "a") as f:
        f.write(json.dumps(entry, default=str) + "\n")
    logger.debug("audit entry written to %s", log_file)


def read_entries(day: str | None = None) -> list[dict]:
    """Read back the entries for ``day`` (today by default). Corrupt lines are skipped."""
    log_file = _day_file(day)
    if not log_file.exists():
        return []

    entries: list[dict] = []
    for lineno, line in enumerate(log_file.read_text().splitlines(), start=1):
        if not line.strip():
            continue
        try:
            entries.append(json.loads(line))
        except json.JSONDecodeError:
            logger.warning("skipping corrupt audit line %s:%d", log_file, lineno)
    return entries


def cleanup_old_logs(*, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Delete log files older than retention_days. Returns count of deleted files."""
    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0

    log_dir = _log_dir()
    if not log_dir.exists():
        return 0

    for log_file in log_dir.glob("*.jsonl"):
        # Parse date from filename (YYYY-MM-DD.jsonl)
        try:
            file_date = datetime.strptime(log_file.stem, "%Y-%m-%d").replace(tzinfo=UTC)
        except ValueError:
            continue
        if file_date < cutoff:
            log_file.unlink()
            deleted += 1

    # Remove empty project directories
    with contextlib.suppress(OSError):
        log_dir.rmdir()

    return deleted
