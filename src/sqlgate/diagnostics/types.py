"""Diagnostic values produced by the gate, and the Verdict handed to callers.

Every check builds a Diagnostic with the same chained-builder style; the
orchestrator turns the first blocking one into a Verdict. A Verdict is a
value object created fresh per call and never persisted.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from sqlgate.diagnostics.codes import DiagnosticCode


class Level(enum.IntEnum):
    INFO = 0
    WARNING = 1
    ERROR = 2


@dataclass(frozen=True)
class Span:
    start: int
    end: int

    def slice(self, sql: str) -> str:
        return sql[self.start : self.end]

    def __len__(self) -> int:
        return self.end - self.start

    @property
    def is_empty(self) -> bool:
        return self.start == self.end


@dataclass
class SpanLabel:
    span: Span
    label: str | None = None


@dataclass
class Diagnostic:
    level: Level
    code: DiagnosticCode
    message: str
    spans: list[SpanLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    # -- Builder classmethods ---------------------------------------------------

    @classmethod
    def error(cls, code: DiagnosticCode, message: str) -> Diagnostic:
        return cls(level=Level.ERROR, code=code, message=message)

    # -- Builder chain methods --------------------------------------------------

    def span(self, span: Span, label: str) -> Diagnostic:
        self.spans.append(SpanLabel(span=span, label=label))
        return self

    def note(self, note: str) -> Diagnostic:
        self.notes.append(note)
        return self

    def suggest(self, message: str) -> Diagnostic:
        self.suggestions.append(message)
        return self

    # -- Query methods ----------------------------------------------------------

    @property
    def is_blocking(self) -> bool:
        return self.level == Level.ERROR

    @property
    def primary_span(self) -> Span | None:
        return self.spans[0].span if self.spans else None


@dataclass(frozen=True)
class Verdict:
    """Accept/reject result for one SQL input."""

    is_valid: bool
    error: str | None = None
    suggestion: str | None = None
    code: DiagnosticCode | None = None
    classification: str | None = None
    span: Span | None = None
    notes: tuple[str, ...] = ()

    @classmethod
    def accept(cls, classification: str | None = None) -> Verdict:
        return cls(is_valid=True, classification=classification)

    @classmethod
    def reject(cls, diag: Diagnostic, classification: str | None = None) -> Verdict:
        return cls(
            is_valid=False,
            error=diag.message,
            suggestion=diag.suggestions[0] if diag.suggestions else None,
            code=diag.code,
            classification=classification,
            span=diag.primary_span,
            notes=tuple(diag.notes),
        )

    def to_dict(self) -> dict:
        """External shape: ``{isValid, error?, suggestion?}``."""
        d: dict = {"isValid": self.is_valid}
        if self.error is not None:
            d["error"] = self.error
        if self.suggestion is not None:
            d["suggestion"] = self.suggestion
        return d
