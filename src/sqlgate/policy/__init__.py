"""Policy engine: normalize, split, classify, apply policy, return a Verdict."""

from __future__ import annotations

import enum
import logging
import re
from collections.abc import Mapping

from sqlgate.config import ConfigError, load_config
from sqlgate.diagnostics import Diagnostic, Span, Verdict, codes
from sqlgate.policy._types import Classification, DestructiveKind, OperationClass
from sqlgate.policy.classify import classify
from sqlgate.policy.context import PolicyContext, resolve_policy
from sqlgate.policy.lexer import Fragment, normalize, split_statements

logger = logging.getLogger(__name__)

__all__ = [
    "Classification",
    "Decision",
    "OperationClass",
    "PolicyContext",
    "analyze",
    "current_policy",
    "decide",
    "recheck",
    "resolve_policy",
    "validate",
    "validate_sql",
]

_SUGGESTIONS: dict[DestructiveKind, str] = {
    DestructiveKind.DROP: (
        "use a SELECT to inspect the object first; dropping it requires an admin override"
    ),
    DestructiveKind.DELETE: (
        "use a SELECT with the same WHERE clause to inspect the rows, or request admin override"
    ),
    DestructiveKind.TRUNCATE: (
        "use a SELECT COUNT(*) to inspect the table; clearing it requires an admin override"
    ),
    DestructiveKind.ALTER: (
        "use a SELECT on the catalog to inspect the schema, or request admin override"
    ),
    DestructiveKind.INSERT: "use a SELECT to check for existing rows, or request admin override",
    DestructiveKind.UPDATE: (
        "use a SELECT with the same WHERE clause to preview the rows, or request admin override"
    ),
    DestructiveKind.CREATE: "use a WITH clause for temporary results, or request admin override",
    DestructiveKind.GRANT: "permission changes require an administrator; request admin override",
    DestructiveKind.REVOKE: "permission changes require an administrator; request admin override",
}


# Allowed, but logged: the database returns the real error for bad set operations.
_SELECT_STAR_RE = re.compile(r"\bSELECT\s+\*", re.IGNORECASE)
_NARROWING_RE = re.compile(r"\b(?:WHERE|LIMIT)\b", re.IGNORECASE)
_SET_OPERATION_RE = re.compile(r"\b(?:UNION|INTERSECT|EXCEPT)\b", re.IGNORECASE)


class Decision(enum.Enum):
    SUCCESS = "success"
    APPROVAL_REQUIRED = "approval_required"
    BLOCKED = "blocked"


def _multiple_statements(fragments: list[Fragment]) -> Diagnostic:
    return (
        Diagnostic.error(
            codes.MULTIPLE_STATEMENTS,
            f"multiple statements are not allowed ({len(fragments)} found)",
        )
        .span(fragments[1].span, "second statement starts here")
        .note("only single statements are allowed (possible SQL injection)")
        .suggest("submit one statement at a time")
    )


def _ambiguous_quoting(sql: str, skeleton: str) -> Diagnostic | None:
    """Compare the standard scan with a backslash-escape scan of the same input.

    MySQL reads ``\\'`` inside a literal as an escaped quote, standard SQL as
    the end of the literal. Any input the two readings split or mask
    differently is rejected.
    """
    if "\\" not in sql:
        return None
    alternate = normalize(sql, backslash_escapes=True)
    if alternate == skeleton:
        return None
    fragments = split_statements(alternate)
    if len(fragments) > 1:
        return _multiple_statements(fragments)
    first = next((i for i, (a, b) in enumerate(zip(skeleton, alternate)) if a != b), 0)
    return (
        Diagnostic.error(
            codes.AMBIGUOUS_QUOTING,
            "ambiguous string literal: backslash escapes change where it ends",
        )
        .span(Span(first, len(sql)), "read differently with backslash escapes")
        .note("some databases treat \\ as an escape character inside literals")
        .suggest("double the quote ('') instead of escaping it with a backslash")
    )


def _warn_on_broad_read(text: str) -> None:
    if _SELECT_STAR_RE.search(text) and not _NARROWING_RE.search(text):
        logger.warning("SELECT * without WHERE or LIMIT - query might return too much data")
    if _SET_OPERATION_RE.search(text):
        logger.warning("set operation detected - database will validate column counts")


def analyze(sql: str) -> tuple[Classification, Diagnostic | None]:
    """Classify the whole input, returning a structural diagnostic if it has one.

    Policy-independent: empty input, multiple statements, ambiguous quoting
    and file operations are rejected here for every policy.
    """
    if not sql.strip():
        return Classification(OperationClass.EMPTY), (
            Diagnostic.error(codes.EMPTY_INPUT, "empty query")
            .suggest("ask the question again so a single SELECT statement can be generated")
        )

    skeleton = normalize(sql)
    fragments = split_statements(skeleton)
    if not fragments:
        # Only comments or semicolons.
        return Classification(OperationClass.EMPTY), (
            Diagnostic.error(codes.EMPTY_INPUT, "empty query: no statement after removing comments")
            .suggest("ask the question again so a single SELECT statement can be generated")
        )

    if len(fragments) > 1:
        return Classification(OperationClass.MULTIPLE_STATEMENTS), _multiple_statements(fragments)

    diag = _ambiguous_quoting(sql, skeleton)
    if diag is not None:
        op = (
            OperationClass.MULTIPLE_STATEMENTS
            if diag.code == codes.MULTIPLE_STATEMENTS
            else OperationClass.UNCLASSIFIED
        )
        return Classification(op), diag

    fragment = fragments[0]
    result = classify(fragment.text)
    if result.op == OperationClass.FILE_OPERATION:
        return result, (
            Diagnostic.error(codes.FILE_OPERATION, "File operations are not allowed")
            .span(fragment.span, "reads or writes server files")
            .suggest("use the export/download functionality to save query results instead")
        )
    if result.op == OperationClass.SAFE_READ:
        _warn_on_broad_read(fragment.text)
    return result, None


def validate(sql: str, policy: PolicyContext) -> Verdict:
    """Validate one untrusted SQL string against an explicit policy.

    Pure function of its two inputs; returns a Verdict for every string.
    """
    result, diag = analyze(sql)
    label = result.op.value

    if diag is None and result.op == OperationClass.DESTRUCTIVE_WRITE:
        assert result.kind is not None
        keyword = result.kind.value
        if not policy.read_only:
            return Verdict.accept(label)
        if policy.admin_override:
            logger.warning("admin override enabled - allowing %s", keyword)
            return Verdict.accept(label)
        diag = (
            Diagnostic.error(
                codes.DESTRUCTIVE_OPERATION,
                f"{keyword} operation is not allowed in read-only mode",
            )
            .note("this statement would modify schema, data or permissions")
            .suggest(_SUGGESTIONS[result.kind])
        )
    elif diag is None and result.op == OperationClass.UNCLASSIFIED:
        diag = (
            Diagnostic.error(
                codes.UNCLASSIFIED_OPERATION,
                f"unrecognized statement type: {result.keyword}",
            )
            .note("only SELECT and WITH statements are recognized as safe")
            .suggest("rephrase the query as a SELECT statement")
        )

    if diag is None:
        return Verdict.accept(label)

    logger.warning("blocked [%s] %s: %s", diag.code, label, result.keyword or "-")
    return Verdict.reject(diag, label)


def validate_sql(sql: str, *, environ: Mapping[str, str] | None = None) -> Verdict:
    """Validate with a policy resolved from ambient configuration right now."""
    return validate(sql, current_policy(environ))


def current_policy(environ: Mapping[str, str] | None = None) -> PolicyContext:
    """Resolve the policy fresh from environment and config file."""
    try:
        config = load_config()
    except ConfigError as e:
        logger.warning("ignoring unreadable config, using environment only: %s", e)
        config = None
    return resolve_policy(environ, config)


def decide(verdict: Verdict, policy: PolicyContext) -> Decision:
    """Map a verdict onto the caller's execute / confirm / block branches."""
    if not verdict.is_valid:
        return Decision.BLOCKED
    overridden = (
        verdict.classification == OperationClass.DESTRUCTIVE_WRITE.value
        and policy.read_only
    )
    if overridden or policy.require_approval:
        return Decision.APPROVAL_REQUIRED
    return Decision.SUCCESS


def recheck(
    sql: str,
    policy: PolicyContext | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> Verdict:
    """Validate approved SQL once more immediately before it executes.

    The policy is resolved again unless given, so an override switched off
    between approval and execution blocks the query.
    """
    if policy is None:
        policy = current_policy(environ)
    verdict = validate(sql, policy)
    if not verdict.is_valid:
        logger.warning("approved query failed re-validation [%s]", verdict.code)
    return verdict
