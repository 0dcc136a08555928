"""
Nawiri Ledger Engine - Snapshot
================================
Read-only view of all six tables at one point in time, and the
persisted blob layout.

Blob layout (one key per table, rows as dicts):

    customers, products, stockTransactions,
    expenses, sales, saleItems
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type

from engines.ledger.models import (
    Customer,
    Expense,
    LedgerRow,
    Product,
    Sale,
    SaleItem,
    StockTransaction,
)


# ══════════════════════════════════════════════════════════════
# TABLES
# ══════════════════════════════════════════════════════════════

CUSTOMERS = "customers"
PRODUCTS = "products"
STOCK_TRANSACTIONS = "stockTransactions"
EXPENSES = "expenses"
SALES = "sales"
SALE_ITEMS = "saleItems"

# blob key -> (snapshot attribute, row type)
TABLES: Dict[str, Tuple[str, Type[LedgerRow]]] = {
    CUSTOMERS: ("customers", Customer),
    PRODUCTS: ("products", Product),
    STOCK_TRANSACTIONS: ("stock_transactions", StockTransaction),
    EXPENSES: ("expenses", Expense),
    SALES: ("sales", Sale),
    SALE_ITEMS: ("sale_items", SaleItem),
}


def _find(rows: Iterable[Any], row_id: str) -> Optional[Any]:
    for row in rows:
        if row.id == row_id:
            return row
    return None


# ══════════════════════════════════════════════════════════════
# SNAPSHOT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class LedgerSnapshot:
    """
    Immutable copy of the ledger tables.

    Rows are deep copies; mutating them never reaches the store.
    Two snapshots compare equal when every row is equal.
    """

    customers: Tuple[Customer, ...] = ()
    products: Tuple[Product, ...] = ()
    stock_transactions: Tuple[StockTransaction, ...] = ()
    expenses: Tuple[Expense, ...] = ()
    sales: Tuple[Sale, ...] = ()
    sale_items: Tuple[SaleItem, ...] = ()
    taken_at: Optional[str] = field(default=None, compare=False)

    @classmethod
    def from_tables(
        cls, tables: Mapping[str, Iterable[LedgerRow]], taken_at: Optional[str] = None
    ) -> LedgerSnapshot:
        kwargs = {
            attr: tuple(copy.deepcopy(list(tables.get(key, ()))))
            for key, (attr, _) in TABLES.items()
        }
        return cls(taken_at=taken_at, **kwargs)

    # ── Lookups ────────────────────────────────────────────────

    def product(self, product_id: str) -> Optional[Product]:
        return _find(self.products, product_id)

    def customer(self, customer_id: str) -> Optional[Customer]:
        return _find(self.customers, customer_id)

    def sale(self, sale_id: str) -> Optional[Sale]:
        return _find(self.sales, sale_id)

    def expense(self, expense_id: str) -> Optional[Expense]:
        return _find(self.expenses, expense_id)

    def stock_transaction(self, transaction_id: str) -> Optional[StockTransaction]:
        return _find(self.stock_transactions, transaction_id)

    def product_by_name(self, name: str) -> Optional[Product]:
        for product in self.products:
            if product.name == name:
                return product
        return None

    def items_for_sale(self, sale_id: str) -> Tuple[SaleItem, ...]:
        return tuple(item for item in self.sale_items if item.sale_id == sale_id)

    def sales_for_customer(self, customer_id: str) -> Tuple[Sale, ...]:
        return tuple(sale for sale in self.sales if sale.customer_id == customer_id)

    def transactions_for_product(self, product_id: str) -> Tuple[StockTransaction, ...]:
        return tuple(
            tx for tx in self.stock_transactions if tx.product_id == product_id
        )

    # ── Blob layout ────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            key: [row.to_dict() for row in getattr(self, attr)]
            for key, (attr, _) in TABLES.items()
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LedgerSnapshot:
        """
        Rebuild from a persisted blob. Missing tables load empty.
        Raises KeyError / TypeError / ValueError on malformed rows.
        """
        kwargs = {}
        for key, (attr, row_type) in TABLES.items():
            rows = data.get(key) or []
            if not isinstance(rows, list):
                raise TypeError(f"table '{key}' must be a list")
            kwargs[attr] = tuple(row_type.from_dict(row) for row in rows)
        return cls(**kwargs)

    def tables(self) -> Dict[str, list]:
        """Mutable per-table lists of deep-copied rows, keyed like the blob."""
        return {
            key: copy.deepcopy(list(getattr(self, attr)))
            for key, (attr, _) in TABLES.items()
        }
