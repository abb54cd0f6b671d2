"""Shared helpers for CLI commands."""

from __future__ import annotations

import json
import sys

import click

from sqlgate.config import ConfigError, GateConfig, load_config
from sqlgate.diagnostics import Verdict
from sqlgate.diagnostics.render import render_json, render_text


def resolve_sql_stdin(sql: str | None, from_stdin: bool) -> str:
    """Resolve SQL from positional argument or stdin. Exactly one source required."""
    if sql and from_stdin:
        raise click.UsageError("Provide SQL as an argument or --from-stdin, not both.")
    if from_stdin:
        if sys.stdin.isatty():
            raise click.UsageError("--from-stdin requires piped input (stdin is a terminal).")
        return sys.stdin.read()
    if sql is None:
        raise click.UsageError("Missing argument 'SQL'. Provide SQL or use --from-stdin.")
    return sql


def load_config_or_fail() -> GateConfig:
    """Load the config file, turning problems into a usage error."""
    try:
        return load_config()
    except ConfigError as e:
        raise click.UsageError(f"invalid config: {e}") from e


def emit_verdict(verdict: Verdict, *, decision: str, output_format: str) -> None:
    """Emit a single output document (JSON or text)."""
    if output_format == "json":
        click.echo(json.dumps(render_json(verdict, decision=decision), indent=2))
    else:
        click.echo(render_text(verdict, decision=decision))
