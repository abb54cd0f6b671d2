"""The `logs` command: inspect or prune the local audit log."""

from __future__ import annotations

import json

import click

from sqlgate.auditlog import cleanup_old_logs, read_entries
from sqlgate.cli._shared import load_config_or_fail


@click.command()
@click.option("--day", default=None, help="Day to show (YYYY-MM-DD, default today).")
@click.option("--cleanup", is_flag=True, help="Delete log files past the retention window.")
@click.option("--retention-days", type=int, default=None, help="Override log.retention_days.")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
def logs(day: str | None, cleanup: bool, retention_days: int | None, output_format: str) -> None:
    """Show audit entries for a day, or delete expired log files."""
    if cleanup:
        days = retention_days
        if days is None:
            days = load_config_or_fail().retention_days
        if days <= 0:
            raise click.BadParameter("must be positive", param_hint="'--retention-days'")
        deleted = cleanup_old_logs(retention_days=days)
        click.echo(f"deleted {deleted} log file(s)")
        return

    entries = read_entries(day)
    if output_format == "json":
        click.echo(json.dumps(entries, indent=2))
        return
    for entry in entries:
        code = f" [{entry['code']}]" if entry.get("code") else ""
        ts = entry.get("ts", "?")
        click.echo(f"{ts} {entry.get('decision', '?')}{code}: {entry.get('sql', '')}")
    click.echo(f"({len(entries)} entries)")
