"""
Nawiri Integration - Bulk Import
=================================
Spreadsheet rows in, ledger operations out. Reading the file
itself (xlsx, csv) is the caller's job; this package receives
the parsed rows as dicts.
"""

from integration.bulk_import.errors import (
    BulkImportError,
    ImportValidationError,
    RowError,
)
from integration.bulk_import.importer import DEFAULT_ACTOR, BulkImporter, ImportResult
from integration.bulk_import.schemas import ProductRowSchema, RowSchema, StockRowSchema

__all__ = [
    "BulkImporter",
    "ImportResult",
    "RowError",
    "BulkImportError",
    "ImportValidationError",
    "RowSchema",
    "ProductRowSchema",
    "StockRowSchema",
    "DEFAULT_ACTOR",
]
