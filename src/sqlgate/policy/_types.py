"""Internal types for the policy engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class OperationClass(enum.Enum):
    SAFE_READ = "safe_read"
    DESTRUCTIVE_WRITE = "destructive_write"
    FILE_OPERATION = "file_operation"
    MULTIPLE_STATEMENTS = "multiple_statements"
    EMPTY = "empty"
    UNCLASSIFIED = "unclassified"  # Anything we can't identify → blocked


class DestructiveKind(enum.Enum):
    DROP = "DROP"
    DELETE = "DELETE"
    TRUNCATE = "TRUNCATE"
    ALTER = "ALTER"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    CREATE = "CREATE"
    GRANT = "GRANT"
    REVOKE = "REVOKE"


@dataclass(frozen=True)
class Classification:
    op: OperationClass
    kind: DestructiveKind | None = None
    keyword: str | None = None  # leading token, uppercased

    @property
    def is_destructive(self) -> bool:
        return self.op == OperationClass.DESTRUCTIVE_WRITE
