"""
Nawiri Ledger Engine - Event Types
===================================
One event per committed mutation, dispatched to subscribers
after the tables are updated and persisted. Events carry the
outcome, not the data: subscribers re-read the snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from engines.ledger.outcomes import MutationOutcome


# ══════════════════════════════════════════════════════════════
# EVENT TYPE CONSTANTS
# ══════════════════════════════════════════════════════════════

LEDGER_PRODUCT_ADDED_V1 = "ledger.product.added.v1"
LEDGER_PRODUCT_UPDATED_V1 = "ledger.product.updated.v1"
LEDGER_PRODUCT_DELETED_V1 = "ledger.product.deleted.v1"
LEDGER_CUSTOMER_ADDED_V1 = "ledger.customer.added.v1"
LEDGER_CUSTOMER_UPDATED_V1 = "ledger.customer.updated.v1"
LEDGER_CUSTOMER_DELETED_V1 = "ledger.customer.deleted.v1"
LEDGER_STOCK_TRANSACTION_ADDED_V1 = "ledger.stock_transaction.added.v1"
LEDGER_EXPENSE_ADDED_V1 = "ledger.expense.added.v1"
LEDGER_EXPENSE_UPDATED_V1 = "ledger.expense.updated.v1"
LEDGER_EXPENSE_DELETED_V1 = "ledger.expense.deleted.v1"
LEDGER_SALE_ADDED_V1 = "ledger.sale.added.v1"
LEDGER_SALE_UPDATED_V1 = "ledger.sale.updated.v1"
LEDGER_SALE_DELETED_V1 = "ledger.sale.deleted.v1"

LEDGER_EVENT_TYPES = (
    LEDGER_PRODUCT_ADDED_V1,
    LEDGER_PRODUCT_UPDATED_V1,
    LEDGER_PRODUCT_DELETED_V1,
    LEDGER_CUSTOMER_ADDED_V1,
    LEDGER_CUSTOMER_UPDATED_V1,
    LEDGER_CUSTOMER_DELETED_V1,
    LEDGER_STOCK_TRANSACTION_ADDED_V1,
    LEDGER_EXPENSE_ADDED_V1,
    LEDGER_EXPENSE_UPDATED_V1,
    LEDGER_EXPENSE_DELETED_V1,
    LEDGER_SALE_ADDED_V1,
    LEDGER_SALE_UPDATED_V1,
    LEDGER_SALE_DELETED_V1,
)


# ══════════════════════════════════════════════════════════════
# EVENT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerEvent:
    event_id: str
    event_type: str
    entity_id: Optional[str]
    occurred_at: str
    outcome: MutationOutcome
