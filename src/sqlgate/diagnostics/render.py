"""Render verdicts for terminal (text) and agent (JSON) output."""

from __future__ import annotations

from sqlgate.diagnostics.types import Verdict


def render_json(verdict: Verdict, *, decision: str | None = None) -> dict:
    """Render a Verdict as a JSON-serializable dict."""
    d: dict = verdict.to_dict()
    d["code"] = str(verdict.code) if verdict.code is not None else None
    d["classification"] = verdict.classification
    if verdict.span is not None:
        d["span"] = [verdict.span.start, verdict.span.end]
    if verdict.notes:
        d["notes"] = list(verdict.notes)
    if decision is not None:
        d["decision"] = decision
    return d


def render_text(verdict: Verdict, *, decision: str | None = None) -> str:
    """Render a Verdict as human-readable text."""
    lines: list[str] = []
    if decision is not None:
        lines.append(f"decision: {decision}")
    if verdict.is_valid:
        lines.append(f"ok: {verdict.classification or 'valid'}")
        return "\n".join(lines)

    lines.append(f"error[{verdict.code}]: {verdict.error}")
    for note in verdict.notes:
        lines.append(f"  = note: {note}")
    if verdict.suggestion:
        lines.append(f"  = help: {verdict.suggestion}")
    return "\n".join(lines)
