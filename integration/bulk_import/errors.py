"""
Nawiri Integration - Bulk Import Errors
========================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class RowError:
    """One problem in one candidate row. `row` is 1-based."""

    row: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"Row {self.row}: {self.field} - {self.message}"


class BulkImportError(Exception):
    """Base error for bulk import."""
    pass


class ImportValidationError(BulkImportError):
    """Raised by ImportResult.raise_for_errors() when rows were rejected."""

    def __init__(self, kind: str, errors: Sequence[RowError]):
        self.kind = kind
        self.errors = tuple(errors)
        preview = "; ".join(str(e) for e in self.errors[:3])
        more = f" (+{len(self.errors) - 3} more)" if len(self.errors) > 3 else ""
        super().__init__(
            f"{kind} import rejected: {len(self.errors)} error(s): {preview}{more}"
        )
