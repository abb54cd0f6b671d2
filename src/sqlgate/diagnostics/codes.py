"""Stable, searchable error code registry.

Ranges:
- G0001      — General (empty input)
- G02xx      — Safety checks (statement structure, file access, quoting)
- G03xx      — Classification / access control
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiagnosticCode:
    value: int

    def __str__(self) -> str:
        return f"G{self.value:04d}"


# General
EMPTY_INPUT = DiagnosticCode(1)

# Safety checks (G02xx)
MULTIPLE_STATEMENTS = DiagnosticCode(202)
FILE_OPERATION = DiagnosticCode(203)
AMBIGUOUS_QUOTING = DiagnosticCode(204)

# Classification / access control (G03xx)
DESTRUCTIVE_OPERATION = DiagnosticCode(301)
UNCLASSIFIED_OPERATION = DiagnosticCode(302)
