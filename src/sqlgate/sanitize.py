"""Redact credential-shaped literals from SQL before it is written to logs.

Operates on raw text and knows nothing about statement structure, so it is
safe to run on input the validator rejects.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from sqlgate.policy.lexer import scan_quoted

MASK = "***"
MAX_LENGTH = 500
TRUNCATION_MARKER = "...[truncated]"

DEFAULT_SENSITIVE_FIELDS: tuple[str, ...] = (
    "password",
    "passwd",
    "pwd",
    "secret",
    "token",
    "api_key",
    "access_key",
    "private_key",
    "credential",
)

# user:password@ inside connection strings (dblink, FDW options, COPY ... PROGRAM).
_DSN_PASSWORD_RE = re.compile(r"(://[^:/@\s'\"]{1,256}:)[^@\s'\"]{1,256}(@)")

_WORD_RE = re.compile(r"[\w.]+")
# Optional closing quote of a quoted identifier, then the comparison operator.
_OPERATOR_RE = re.compile(r"[`\"\]]?\s*(?:!=|<>|=)\s*")
_BARE_VALUE_RE = re.compile(r"[^\s,;()'\"]+")
_NUMBER_RE = re.compile(r"\d[\w.]*")


def _fragment_pattern(fragment: str) -> str:
    # api_key also matches api-key and apikey
    parts = re.split(r"[_-]", fragment.strip())
    return r"[_-]?".join(re.escape(p) for p in parts if p)


def _field_re(fields: Iterable[str]) -> re.Pattern[str]:
    alternatives = sorted(
        {_fragment_pattern(f) for f in fields if f.strip()}, key=len, reverse=True
    )
    return re.compile("|".join(alternatives), re.IGNORECASE)


_DEFAULT_FIELD_RE = _field_re(DEFAULT_SENSITIVE_FIELDS)


def _literal_end(sql: str, start: int) -> int:
    # Whichever reading keeps the literal open longer, so an escaped quote
    # never ends the mask early.
    standard, _ = scan_quoted(sql, start)
    escaped, _ = scan_quoted(sql, start, backslash_escapes=True)
    return max(standard, escaped)


def _mask_group(sql: str, start: int, out: list[str]) -> int:
    """Copy the parenthesized group at ``start``, masking literals inside it.

    Returns the index just past the matching ``)``, or the end of input.
    """
    depth = 0
    i = start
    n = len(sql)
    while i < n:
        ch = sql[i]
        if ch in ("'", '"'):
            end = _literal_end(sql, i)
            out.append(f"{ch}{MASK}{ch}")
            i = end
            continue
        if ch.isdigit() and (i == start or not (sql[i - 1].isalnum() or sql[i - 1] == "_")):
            number = _NUMBER_RE.match(sql, i)
            out.append(MASK)
            i = number.end()
            continue
        out.append(ch)
        i += 1
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                break
    return i


def _mask_value(sql: str, start: int, out: list[str]) -> int:
    """Append the masked value found at ``start``; return where it ends."""
    if start >= len(sql):
        return start
    ch = sql[start]
    if ch in ("'", '"'):
        out.append(f"{ch}{MASK}{ch}")
        return _literal_end(sql, start)
    if ch == "(":
        return _mask_group(sql, start, out)
    bare = _BARE_VALUE_RE.match(sql, start)
    if bare is None:
        return start
    if bare.end() < len(sql) and sql[bare.end()] == "(":
        # Function call: keep the name, mask its arguments.
        out.append(bare.group(0))
        return _mask_group(sql, bare.end(), out)
    out.append(MASK)
    return bare.end()


def _redact_assignments(sql: str, field_re: re.Pattern[str]) -> str:
    out: list[str] = []
    pos = 0
    for word in _WORD_RE.finditer(sql):
        if word.start() < pos or not field_re.search(word.group(0)):
            continue
        op = _OPERATOR_RE.match(sql, word.end())
        if op is None:
            continue
        out.append(sql[pos : op.end()])
        pos = _mask_value(sql, op.end(), out)
    out.append(sql[pos:])
    return "".join(out)


def truncate(text: str, max_length: int = MAX_LENGTH) -> str:
    """Cap ``text`` at ``max_length`` characters, marking the cut."""
    if len(text) <= max_length:
        return text
    if max_length <= len(TRUNCATION_MARKER):
        return text[:max_length]
    return text[: max_length - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


def sanitize_for_logging(
    sql: str,
    *,
    extra_fields: Iterable[str] = (),
    max_length: int = MAX_LENGTH,
) -> str:
    """Mask sensitive values and cap the length for persisted logs.

    ``field = value`` comparisons and assignments whose field name contains
    a sensitive fragment keep the field name and operator; only the value
    becomes ``***``. For a function call or parenthesized value the literals
    inside are masked and the call itself is kept. The result is never longer than ``max_length`` (itself
    capped at 500).
    """
    extra = tuple(extra_fields)
    field_re = _field_re(DEFAULT_SENSITIVE_FIELDS + extra) if extra else _DEFAULT_FIELD_RE
    redacted = _redact_assignments(sql, field_re)
    redacted = _DSN_PASSWORD_RE.sub(rf"\1{MASK}\2", redacted)
    return truncate(redacted, min(max_length, MAX_LENGTH))
