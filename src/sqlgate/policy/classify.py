"""Classify a single statement fragment by its leading keyword."""

from __future__ import annotations

import re

from sqlgate.policy._types import Classification, DestructiveKind, OperationClass

_READ_KEYWORDS = frozenset({"SELECT", "WITH"})
_DESTRUCTIVE = {kind.value: kind for kind in DestructiveKind}

# Data movement to or from the server filesystem, caught regardless of the
# leading keyword (SELECT ... INTO OUTFILE starts like a read).
_FILE_ANYWHERE_RE = re.compile(
    r"\bINTO\s+(?:OUTFILE|DUMPFILE)\b|\bLOAD_FILE\s*\(",
    re.IGNORECASE,
)
_FILE_LEADING_RE = re.compile(r"LOAD\s+DATA\b", re.IGNORECASE)

_LEADING_TOKEN_RE = re.compile(r"[A-Za-z_]+")


def leading_keyword(fragment: str) -> str:
    """Return the first whitespace-delimited token of a fragment, uppercased.

    A token that starts with a word (``SELECT(1)``, ``WITH(...)``) is cut at
    the first non-word character; anything else is returned as written.
    """
    parts = fragment.split(None, 1)
    if not parts:
        return ""
    token = parts[0]
    word = _LEADING_TOKEN_RE.match(token)
    return (word.group(0) if word else token).upper()


def classify(fragment: str) -> Classification:
    """Classify one normalized statement fragment.

    Security-critical: anything we can't positively identify as a safe read
    is classified as a destructive write, a file operation or UNCLASSIFIED
    (all blocked by default). Fragments must come from the lexer, so literal
    contents and comments can no longer affect the result.
    """
    text = fragment.strip()
    if not text:
        return Classification(OperationClass.EMPTY)

    keyword = leading_keyword(text)
    if _FILE_ANYWHERE_RE.search(text) or _FILE_LEADING_RE.match(text):
        return Classification(OperationClass.FILE_OPERATION, keyword=keyword)

    if keyword in _READ_KEYWORDS:
        return Classification(OperationClass.SAFE_READ, keyword=keyword)
    kind = _DESTRUCTIVE.get(keyword)
    if kind is not None:
        return Classification(OperationClass.DESTRUCTIVE_WRITE, kind=kind, keyword=keyword)
    return Classification(OperationClass.UNCLASSIFIED, keyword=keyword)
