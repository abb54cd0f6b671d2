"""Lexical normalization: neutralize literals and comments, split on semicolons.

There is no SQL parser behind this module. A single left-to-right scan
replaces the body of every quoted literal with ``_`` and every comment with
spaces, so the skeleton has exactly the same length as the input and every
offset maps back to the original text. Keywords and semicolons that survive
the scan are real top-level structure.

Only the lexical forms shared by the common dialects are recognized. Anything
dialect-specific (``#`` comments, dollar quoting) is left visible, so a
semicolon hidden that way still splits the input and the query is rejected
rather than let through. Backslash escapes are the one dialect form that can
hide text rather than reveal it, so callers scan with and without them and
compare the results.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlgate.diagnostics import Span

PLACEHOLDER = "_"


@dataclass(frozen=True)
class Fragment:
    """One top-level statement of the skeleton, trimmed."""

    text: str
    span: Span


def _blank(segment: str) -> str:
    """Replace a comment with spaces, keeping its line breaks."""
    return "".join(ch if ch in "\r\n" else " " for ch in segment)


def scan_quoted(sql: str, start: int, *, backslash_escapes: bool = False) -> tuple[int, bool]:
    """Return ``(end, closed)`` for the literal opened at ``start``.

    A doubled delimiter (``''`` or ``""``) stays inside the literal. With
    ``backslash_escapes`` a backslash also escapes the next character, as
    MySQL reads it by default. An unterminated literal runs to the end of
    input.
    """
    quote = sql[start]
    i = start + 1
    n = len(sql)
    while i < n:
        ch = sql[i]
        if backslash_escapes and ch == "\\":
            i += 2
            continue
        if ch == quote:
            if i + 1 < n and sql[i + 1] == quote:
                i += 2
                continue
            return i + 1, True
        i += 1
    return n, False


def _starts_line_comment(sql: str, i: int) -> bool:
    # MySQL needs whitespace or a control character after "--"; 1--1 is arithmetic.
    if not sql.startswith("--", i):
        return False
    if i + 2 >= len(sql):
        return True
    nxt = sql[i + 2]
    return nxt.isspace() or ord(nxt) < 32


def normalize(sql: str, *, backslash_escapes: bool = False) -> str:
    """Neutralize string literals and comments, preserving length and semicolons.

    ``--`` not followed by whitespace is left visible, so input that one
    dialect reads as a comment and another as code is never hidden.
    """
    out: list[str] = []
    i = 0
    n = len(sql)
    while i < n:
        ch = sql[i]

        if ch in ("'", '"'):
            end, closed = scan_quoted(sql, i, backslash_escapes=backslash_escapes)
            if closed:
                out.append(ch + PLACEHOLDER * (end - i - 2) + ch)
            else:
                out.append(ch + PLACEHOLDER * (end - i - 1))
            i = end
            continue

        if _starts_line_comment(sql, i):
            end = sql.find("\n", i)
            end = n if end == -1 else end
            out.append(_blank(sql[i:end]))
            i = end
            continue

        if sql.startswith("/*", i):
            close = sql.find("*/", i + 2)
            end = n if close == -1 else close + 2
            if sql.startswith("/*!", i):
                # MySQL executes the body of /*! ... */, so it stays visible.
                out.append("   " + sql[i + 3 : close if close != -1 else n])
                if close != -1:
                    out.append("  ")
            else:
                out.append(_blank(sql[i:end]))
            i = end
            continue

        out.append(ch)
        i += 1

    return "".join(out)


def split_statements(skeleton: str) -> list[Fragment]:
    """Split a normalized skeleton on semicolons, dropping empty fragments."""
    fragments: list[Fragment] = []
    start = 0
    n = len(skeleton)
    while start <= n:
        pos = skeleton.find(";", start)
        if pos == -1:
            pos = n
        raw = skeleton[start:pos]
        text = raw.strip()
        if text:
            lead = start + len(raw) - len(raw.lstrip())
            fragments.append(Fragment(text=text, span=Span(lead, lead + len(text))))
        start = pos + 1
    return fragments
