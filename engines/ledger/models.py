"""
Nawiri Ledger Engine - Entity Models
=====================================
The six ledger tables and their enums.

Rows are plain dataclasses. The store never mutates a row in
place: every change produces a new row via `with_changes`, so a
staged operation can be discarded without touching live tables.

Wire format (to_dict / from_dict) is the persisted blob layout:
enum members serialize to their values, timestamps are ISO
strings, amounts are plain JSON numbers.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, TypeVar, Union

Amount = Union[int, float]

R = TypeVar("R", bound="LedgerRow")


# ══════════════════════════════════════════════════════════════
# ENUMS
# ══════════════════════════════════════════════════════════════

class ProductCategory(Enum):
    """Product line. Legacy Swahili values are accepted on load."""
    FLOUR_SEMBE = "flour-sembe"
    FLOUR_DONA = "flour-dona"
    BRAN = "bran"

    @classmethod
    def _missing_(cls, value):
        return _LEGACY_CATEGORIES.get(value)


_LEGACY_CATEGORIES = {
    "unga_sembe": ProductCategory.FLOUR_SEMBE,
    "unga_dona": ProductCategory.FLOUR_DONA,
    "pumba": ProductCategory.BRAN,
}


class WeightCategory(Enum):
    KG_5 = "5kg"
    KG_10 = "10kg"
    KG_25 = "25kg"


class TransactionType(Enum):
    STOCK_IN = "stock_in"
    STOCK_OUT = "stock_out"
    ADJUSTMENT = "adjustment"   # signed quantity, caller-controlled


class ExpenseCategory(Enum):
    CAPITAL = "capital"
    OPERATING = "operating"


class PaymentStatus(Enum):
    """Informational only; never checked against paid_amount."""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


def coerce_enum(enum_type: Type[Enum], value: Any) -> Any:
    """Turn a wire value into an enum member; None and members pass through."""
    if value is None or isinstance(value, enum_type):
        return value
    return enum_type(value)


# ══════════════════════════════════════════════════════════════
# ROW BASE
# ══════════════════════════════════════════════════════════════

class LedgerRow:
    """
    Shared serialization for ledger rows.

    Subclasses declare ENUM_FIELDS (field name -> enum type) and
    IMMUTABLE_FIELDS (never replaced by partial updates).
    """

    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {}
    IMMUTABLE_FIELDS: ClassVar[frozenset] = frozenset({"id", "created_at"})

    @classmethod
    def field_names(cls) -> frozenset:
        return frozenset(f.name for f in dataclasses.fields(cls))

    @classmethod
    def coerce(cls, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Convert enum-typed wire values to members."""
        out = dict(values)
        for name, enum_type in cls.ENUM_FIELDS.items():
            if name in out:
                out[name] = coerce_enum(enum_type, out[name])
        return out

    def with_changes(self: R, changes: Mapping[str, Any], **stamps: Any) -> R:
        """
        Return a copy with `changes` applied.

        Unknown keys and IMMUTABLE_FIELDS are ignored. `stamps`
        (e.g. updated_at) are applied last and always win.
        """
        allowed = self.field_names() - self.IMMUTABLE_FIELDS
        accepted = {k: v for k, v in changes.items() if k in allowed}
        accepted.update(stamps)
        return dataclasses.replace(self, **self.coerce(accepted))

    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            data[f.name] = value.value if isinstance(value, Enum) else value
        return data

    @classmethod
    def from_dict(cls: Type[R], data: Mapping[str, Any]) -> R:
        names = cls.field_names()
        return cls(**cls.coerce({k: v for k, v in data.items() if k in names}))


# ══════════════════════════════════════════════════════════════
# TABLE ROWS
# ══════════════════════════════════════════════════════════════

@dataclass
class Product(LedgerRow):
    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {
        "category": ProductCategory,
        "weight": WeightCategory,
    }

    id: str
    name: str
    category: ProductCategory
    price: Amount
    stock_quantity: Amount
    reorder_level: Amount
    created_at: str
    updated_at: str
    weight: Optional[WeightCategory] = None
    description: Optional[str] = None

    @property
    def is_low_stock(self) -> bool:
        return self.stock_quantity <= self.reorder_level


@dataclass
class Customer(LedgerRow):
    id: str
    name: str
    created_at: str
    updated_at: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None
    total_purchases: Amount = 0
    outstanding_balance: Amount = 0


@dataclass
class StockTransaction(LedgerRow):
    """Append-only. Corrections are new compensating rows."""

    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {
        "transaction_type": TransactionType,
    }

    id: str
    product_id: str
    transaction_type: TransactionType
    quantity: Amount
    created_by: str
    created_at: str
    unit_price: Optional[Amount] = None
    notes: Optional[str] = None


@dataclass
class Expense(LedgerRow):
    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {
        "category": ExpenseCategory,
    }

    id: str
    category: ExpenseCategory
    amount: Amount
    description: str
    date: str
    created_by: str
    created_at: str


@dataclass
class Sale(LedgerRow):
    ENUM_FIELDS: ClassVar[Dict[str, Type[Enum]]] = {
        "payment_status": PaymentStatus,
    }

    id: str
    customer_id: str
    total_amount: Amount
    payment_status: PaymentStatus
    created_by: str
    created_at: str
    paid_amount: Amount = 0
    notes: Optional[str] = None

    @property
    def outstanding(self) -> Amount:
        return self.total_amount - (self.paid_amount or 0)


@dataclass
class SaleItem(LedgerRow):
    """Owned by its Sale; total_price is fixed at creation."""

    IMMUTABLE_FIELDS: ClassVar[frozenset] = frozenset({"id", "sale_id"})

    id: str
    sale_id: str
    product_id: str
    quantity: Amount
    unit_price: Amount
    total_price: Amount
