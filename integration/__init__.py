"""
Nawiri Integration Layer - Public API
======================================
Collaborators that feed external data into the ledger.
External data NEVER writes tables directly: every row goes
through a LedgerStore operation.
"""

from integration.bulk_import import (
    BulkImporter,
    ImportResult,
    ImportValidationError,
    RowError,
)

__all__ = [
    "BulkImporter",
    "ImportResult",
    "ImportValidationError",
    "RowError",
]
