"""The `validate` and `approve` commands: run SQL through the gate without executing."""

from __future__ import annotations

import dataclasses

import click

from sqlgate.auditlog import log_decision
from sqlgate.cli._shared import emit_verdict, load_config_or_fail, resolve_sql_stdin
from sqlgate.config import GateConfig
from sqlgate.diagnostics import Verdict
from sqlgate.policy import Decision, decide, recheck, resolve_policy, validate as run_validate

_format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)


def _audit(
    config: GateConfig,
    no_log: bool,
    *,
    sql: str,
    verdict: Verdict,
    decision: Decision,
    stage: str,
) -> None:
    if no_log or not config.log_enabled:
        return
    log_decision(
        sql=sql,
        verdict=verdict,
        decision=decision.value,
        stage=stage,
        extra_fields=config.sensitive_fields,
        max_length=config.max_length,
    )


@click.command()
@click.argument("sql", required=False)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin.")
@click.option(
    "--read-only/--no-read-only",
    default=None,
    help="Enforce read-only mode (default: READ_ONLY, then config, then on).",
)
@click.option(
    "--admin-override/--no-admin-override",
    default=None,
    help="Permit destructive statements in read-only mode.",
)
@click.option(
    "--require-approval/--no-require-approval",
    default=None,
    help="Ask for human confirmation before any valid query runs.",
)
@_format_option
@click.option("--no-log", is_flag=True, help="Do not write an audit log entry.")
def validate(
    sql: str | None,
    from_stdin: bool,
    read_only: bool | None,
    admin_override: bool | None,
    require_approval: bool | None,
    output_format: str,
    no_log: bool,
) -> None:
    """Validate SQL through the gate without executing.

    Exits 0 for success or approval_required, 1 when blocked.
    """
    text = resolve_sql_stdin(sql, from_stdin)
    config = load_config_or_fail()

    policy = resolve_policy(config=config)
    overrides = {
        "read_only": read_only,
        "admin_override": admin_override,
        "require_approval": require_approval,
    }
    policy = dataclasses.replace(policy, **{k: v for k, v in overrides.items() if v is not None})

    verdict = run_validate(text, policy)
    decision = decide(verdict, policy)
    emit_verdict(verdict, decision=decision.value, output_format=output_format)
    _audit(config, no_log, sql=text, verdict=verdict, decision=decision, stage="validate")
    if decision == Decision.BLOCKED:
        raise SystemExit(1)


@click.command()
@click.argument("sql", required=False)
@click.option("--from-stdin", is_flag=True, help="Read SQL from stdin.")
@_format_option
@click.option("--no-log", is_flag=True, help="Do not write an audit log entry.")
def approve(sql: str | None, from_stdin: bool, output_format: str, no_log: bool) -> None:
    """Re-validate human-approved SQL right before it executes.

    The policy is read again from the environment and config file, so an
    override revoked after approval blocks the query. Exits 1 when blocked.
    """
    text = resolve_sql_stdin(sql, from_stdin)
    config = load_config_or_fail()

    verdict = recheck(text, resolve_policy(config=config))
    decision = Decision.SUCCESS if verdict.is_valid else Decision.BLOCKED
    emit_verdict(verdict, decision=decision.value, output_format=output_format)
    _audit(config, no_log, sql=text, verdict=verdict, decision=decision, stage="approve")
    if decision == Decision.BLOCKED:
        raise SystemExit(1)
