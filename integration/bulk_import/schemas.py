"""
Nawiri Integration - Bulk Import Row Schemas
=============================================
Shape checks for spreadsheet rows before they reach the ledger.
The ledger itself trusts its inputs; everything a user can get
wrong in a spreadsheet is caught here.

Each schema:
- validate(row)   -> list of (field, message), empty when valid
- template()      -> one example row for a download template
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

from engines.ledger.commands import AddProductRequest
from engines.ledger.models import ProductCategory, TransactionType, WeightCategory

FieldProblem = Tuple[str, str]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _describe(value: Any) -> str:
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, str):
        return "string"
    if _is_number(value):
        return "number"
    return type(value).__name__


def _enum_values(enum_type: Type[Enum]) -> str:
    return " | ".join(f"'{member.value}'" for member in enum_type)


# ══════════════════════════════════════════════════════════════
# FIELD CHECKS
# ══════════════════════════════════════════════════════════════

def check_string(
    row: Mapping[str, Any], name: str, *, required: bool, empty_message: str = ""
) -> Optional[FieldProblem]:
    value = row.get(name)
    if value is None:
        return (name, "Required") if required else None
    if not isinstance(value, str):
        return name, f"Expected string, received {_describe(value)}"
    if required and not value.strip():
        return name, empty_message or "Required"
    return None


def check_number(
    row: Mapping[str, Any], name: str, *, minimum: float, required: bool
) -> Optional[FieldProblem]:
    value = row.get(name)
    if value is None:
        return (name, "Required") if required else None
    if not _is_number(value):
        return name, f"Expected number, received {_describe(value)}"
    if value < minimum:
        return name, f"Number must be greater than or equal to {minimum:g}"
    return None


def check_enum(
    row: Mapping[str, Any], name: str, enum_type: Type[Enum], *, required: bool
) -> Optional[FieldProblem]:
    value = row.get(name)
    if value is None:
        return (name, "Required") if required else None
    try:
        enum_type(value)
    except ValueError:
        return (
            name,
            f"Invalid enum value. Expected {_enum_values(enum_type)}, "
            f"received '{value}'",
        )
    return None


# ══════════════════════════════════════════════════════════════
# SCHEMAS
# ══════════════════════════════════════════════════════════════

class RowSchema(ABC):
    kind: str = ""

    @abstractmethod
    def validate(self, row: Mapping[str, Any]) -> List[FieldProblem]:
        ...

    @abstractmethod
    def template(self) -> Dict[str, Any]:
        ...


class ProductRowSchema(RowSchema):
    """
    Required: name, category, price, stock_quantity, reorder_level.
    Optional: weight, description.
    """

    kind = "products"

    def validate(self, row: Mapping[str, Any]) -> List[FieldProblem]:
        checks = (
            check_string(row, "name", required=True, empty_message="Name is required"),
            check_enum(row, "category", ProductCategory, required=True),
            check_enum(row, "weight", WeightCategory, required=False),
            check_number(row, "price", minimum=0, required=True),
            check_number(row, "stock_quantity", minimum=0, required=True),
            check_number(row, "reorder_level", minimum=0, required=True),
            check_string(row, "description", required=False),
        )
        return [problem for problem in checks if problem is not None]

    def to_request(self, row: Mapping[str, Any]) -> AddProductRequest:
        return AddProductRequest(
            name=row["name"].strip(),
            category=row["category"],
            price=row["price"],
            stock_quantity=row["stock_quantity"],
            reorder_level=row["reorder_level"],
            weight=row.get("weight"),
            description=row.get("description"),
        )

    def template(self) -> Dict[str, Any]:
        return {
            "name": "Example Product",
            "category": ProductCategory.FLOUR_SEMBE.value,
            "weight": WeightCategory.KG_5.value,
            "price": 100,
            "stock_quantity": 50,
            "reorder_level": 10,
            "description": "Product description",
        }


class StockRowSchema(RowSchema):
    """
    Required: product_name, transaction_type, quantity (>= 1).
    Optional: unit_price, notes. product_name must match an
    existing product exactly; the importer resolves it.
    """

    kind = "stock"

    def validate(self, row: Mapping[str, Any]) -> List[FieldProblem]:
        checks = (
            check_string(
                row, "product_name", required=True,
                empty_message="Product name is required",
            ),
            check_enum(row, "transaction_type", TransactionType, required=True),
            check_number(row, "quantity", minimum=1, required=True),
            check_number(row, "unit_price", minimum=0, required=False),
            check_string(row, "notes", required=False),
        )
        return [problem for problem in checks if problem is not None]

    def template(self) -> Dict[str, Any]:
        return {
            "product_name": "Example Product",
            "transaction_type": TransactionType.STOCK_IN.value,
            "quantity": 10,
            "unit_price": 100,
            "notes": "Stock transaction notes",
        }
