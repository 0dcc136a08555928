"""
Nawiri Integration - Bulk Importer
===================================
Feeds spreadsheet rows into the ledger through its normal
operations, so every row gets the usual side effects.

Flow: validate every row -> resolve references -> apply.
A batch with any error applies nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from engines.ledger.commands import AddStockTransactionRequest
from engines.ledger.outcomes import MutationOutcome
from engines.ledger.services import LedgerStore
from integration.bulk_import.errors import ImportValidationError, RowError
from integration.bulk_import.schemas import ProductRowSchema, RowSchema, StockRowSchema

logger = logging.getLogger("nawiri.import")

DEFAULT_ACTOR = "system"


# ══════════════════════════════════════════════════════════════
# RESULT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ImportResult:
    kind: str
    outcomes: Tuple[MutationOutcome, ...] = ()
    errors: Tuple[RowError, ...] = ()

    @property
    def success(self) -> bool:
        return not self.errors

    @property
    def applied_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.applied)

    def messages(self) -> List[str]:
        return [str(error) for error in self.errors]

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ImportValidationError(self.kind, self.errors)


def _collect_errors(schema: RowSchema, rows: Sequence[Mapping[str, Any]]) -> List[RowError]:
    errors: List[RowError] = []
    for number, row in enumerate(rows, start=1):
        if not isinstance(row, Mapping):
            errors.append(RowError(number, "row", "Expected object"))
            continue
        errors.extend(
            RowError(number, name, message) for name, message in schema.validate(row)
        )
    return errors


# ══════════════════════════════════════════════════════════════
# IMPORTER
# ══════════════════════════════════════════════════════════════

class BulkImporter:
    """Validates candidate rows and applies them to a LedgerStore."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store
        self._products = ProductRowSchema()
        self._stock = StockRowSchema()

    def product_template(self) -> List[Dict[str, Any]]:
        return [self._products.template()]

    def stock_template(self) -> List[Dict[str, Any]]:
        return [self._stock.template()]

    def import_products(self, rows: Iterable[Mapping[str, Any]]) -> ImportResult:
        rows = list(rows)
        errors = _collect_errors(self._products, rows)
        if errors:
            return self._rejected(self._products.kind, rows, errors)

        outcomes = tuple(
            self._store.add_product(self._products.to_request(row)) for row in rows
        )
        logger.info(f"Imported {len(outcomes)} product row(s)")
        return ImportResult(kind=self._products.kind, outcomes=outcomes)

    def import_stock(
        self, rows: Iterable[Mapping[str, Any]], created_by: str = DEFAULT_ACTOR
    ) -> ImportResult:
        rows = list(rows)
        errors = _collect_errors(self._stock, rows)

        snapshot = self._store.snapshot()
        requests: List[AddStockTransactionRequest] = []
        if not errors:
            for number, row in enumerate(rows, start=1):
                product = snapshot.product_by_name(row["product_name"].strip())
                if product is None:
                    errors.append(RowError(
                        number, "product_name",
                        f"No product named '{row['product_name']}'",
                    ))
                    continue
                requests.append(AddStockTransactionRequest(
                    product_id=product.id,
                    transaction_type=row["transaction_type"],
                    quantity=row["quantity"],
                    created_by=created_by,
                    unit_price=row.get("unit_price"),
                    notes=row.get("notes"),
                ))

        if errors:
            return self._rejected(self._stock.kind, rows, errors)

        outcomes = tuple(self._store.add_stock_transaction(r) for r in requests)
        logger.info(f"Imported {len(outcomes)} stock row(s)")
        return ImportResult(kind=self._stock.kind, outcomes=outcomes)

    @staticmethod
    def _rejected(kind: str, rows: Sequence[Any], errors: List[RowError]) -> ImportResult:
        logger.warning(
            f"{kind} import rejected: {len(errors)} error(s) in {len(rows)} row(s)"
        )
        return ImportResult(kind=kind, errors=tuple(errors))
