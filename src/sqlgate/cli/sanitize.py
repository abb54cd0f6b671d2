"""The `sanitize` command: print SQL the way it would be written to the audit log."""

from __future__ import annotations

import click

from sqlgate.cli._shared import load_config_or_fail, resolve_sql_stdin
from sqlgate.sanitize import sanitize_for_logging


@click.command()
@click.argument("sql", required=False)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin.")
def sanitize(sql: str | None, from_stdin: bool) -> None:
    """Mask credential-shaped values and cap the length for logging."""
    text = resolve_sql_stdin(sql, from_stdin)
    config = load_config_or_fail()
    click.echo(
        sanitize_for_logging(
            text, extra_fields=config.sensitive_fields, max_length=config.max_length
        )
    )
