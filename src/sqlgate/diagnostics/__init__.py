"""Diagnostic system: codes, verdict types and rendering."""

from sqlgate.diagnostics.codes import DiagnosticCode
from sqlgate.diagnostics.types import (
    Diagnostic,
    Level,
    Span,
    SpanLabel,
    Verdict,
)

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "Level",
    "Span",
    "SpanLabel",
    "Verdict",
]
