"""sqlgate: decide whether untrusted, model-generated SQL may run, and what may be logged."""

from sqlgate.diagnostics import Verdict
from sqlgate.policy import (
    Decision,
    PolicyContext,
    decide,
    recheck,
    resolve_policy,
    validate,
    validate_sql,
)
from sqlgate.sanitize import sanitize_for_logging

__all__ = [
    "Decision",
    "PolicyContext",
    "Verdict",
    "decide",
    "recheck",
    "resolve_policy",
    "sanitize_for_logging",
    "validate",
    "validate_sql",
]
