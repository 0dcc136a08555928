"""
Nawiri Ledger Engine - Request Inputs
======================================
Typed inputs for the add-operations. Each carries exactly the
caller-supplied fields of a row; the store adds id and
timestamps.

Inputs are assumed well-formed. Shape checking belongs to the
caller (see integration.bulk_import for spreadsheet rows);
here enum-typed fields are only normalized from their wire
values.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Optional

from engines.ledger.models import (
    Amount,
    ExpenseCategory,
    PaymentStatus,
    ProductCategory,
    TransactionType,
    WeightCategory,
    coerce_enum,
)


def _normalize(request: Any, field_name: str, enum_type) -> None:
    object.__setattr__(
        request, field_name, coerce_enum(enum_type, getattr(request, field_name))
    )


class _RequestFields:
    def as_fields(self) -> Dict[str, Any]:
        """Shallow field mapping, enum members preserved."""
        return {f.name: getattr(self, f.name) for f in fields(self)}


# ══════════════════════════════════════════════════════════════
# REQUESTS
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AddProductRequest(_RequestFields):
    """New product; stock_quantity is the opening stock."""
    name: str
    category: ProductCategory
    price: Amount
    stock_quantity: Amount = 0
    reorder_level: Amount = 0
    weight: Optional[WeightCategory] = None
    description: Optional[str] = None

    def __post_init__(self):
        _normalize(self, "category", ProductCategory)
        _normalize(self, "weight", WeightCategory)


@dataclass(frozen=True)
class AddCustomerRequest(_RequestFields):
    """Contact details only; purchase totals start at zero and move with sales."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class AddStockTransactionRequest(_RequestFields):
    """
    Stock movement. quantity is positive for stock_in/stock_out;
    for adjustment its sign is the direction.
    """
    product_id: str
    transaction_type: TransactionType
    quantity: Amount
    created_by: str = ""
    unit_price: Optional[Amount] = None
    notes: Optional[str] = None

    def __post_init__(self):
        _normalize(self, "transaction_type", TransactionType)


@dataclass(frozen=True)
class AddExpenseRequest(_RequestFields):
    category: ExpenseCategory
    amount: Amount
    description: str
    date: str
    created_by: str = ""

    def __post_init__(self):
        _normalize(self, "category", ExpenseCategory)


@dataclass(frozen=True)
class AddSaleRequest(_RequestFields):
    """Sale header. total_amount is caller-computed, not summed from items."""
    customer_id: str
    total_amount: Amount
    payment_status: PaymentStatus = PaymentStatus.PENDING
    paid_amount: Amount = 0
    created_by: str = ""
    notes: Optional[str] = None

    def __post_init__(self):
        _normalize(self, "payment_status", PaymentStatus)
        if self.paid_amount is None:
            object.__setattr__(self, "paid_amount", 0)


@dataclass(frozen=True)
class SaleItemRequest(_RequestFields):
    product_id: str
    quantity: Amount
    unit_price: Amount

    @property
    def total_price(self) -> Amount:
        return self.quantity * self.unit_price
