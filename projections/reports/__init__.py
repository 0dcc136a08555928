"""
Nawiri Projections - Reports
=============================
Read-only reports over a LedgerSnapshot: the dashboard summary
and the sales, low-stock, restock and staff-performance
tables, plus the printable receipt for one sale. Nothing here
writes to the ledger.

Rows are plain dicts with display-ready keys so exporters can
write them as-is.
"""

from __future__ import annotations

from collections import OrderedDict, defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from core.config import LedgerSettings
from core.time import TimeWindow, day_window, parse_iso
from engines.ledger.models import Amount, TransactionType
from engines.ledger.snapshot import LedgerSnapshot

INVOICE_NUMBER_LENGTH = 8
DISPLAY_DATE_FORMAT = "%d/%m/%Y"
RECEIPT_DATE_FORMAT = "%d/%m/%Y %H:%M"


def format_currency(amount: Amount, settings: Optional[LedgerSettings] = None) -> str:
    """'KES 1,234' for whole amounts, 'KES 1,234.5' otherwise."""
    currency = (settings or LedgerSettings()).currency
    if float(amount).is_integer():
        return f"{currency} {int(amount):,}"
    return f"{currency} {float(amount):,.2f}".rstrip("0").rstrip(".")


def _display_date(timestamp: str) -> str:
    return parse_iso(timestamp).strftime(DISPLAY_DATE_FORMAT)


# ══════════════════════════════════════════════════════════════
# SALES
# ══════════════════════════════════════════════════════════════

def sales_report(
    snapshot: LedgerSnapshot,
    start: date,
    end: date,
    settings: Optional[LedgerSettings] = None,
) -> List[Dict[str, Any]]:
    """Sales created between `start` and `end`, both days inclusive."""
    window: TimeWindow = day_window(start, end)
    rows = []
    for sale in snapshot.sales:
        if not window.contains_iso(sale.created_at):
            continue
        rows.append({
            "Date": _display_date(sale.created_at),
            "Invoice No": sale.id[:INVOICE_NUMBER_LENGTH],
            "Amount": format_currency(sale.total_amount, settings),
            "Status": sale.payment_status.value,
            "Paid Amount": format_currency(sale.paid_amount, settings),
        })
    return rows


# ══════════════════════════════════════════════════════════════
# STOCK
# ══════════════════════════════════════════════════════════════

def low_stock_report(snapshot: LedgerSnapshot) -> List[Dict[str, Any]]:
    """Products at or below their reorder level."""
    return [
        {
            "Product": product.name,
            "Category": product.category.value,
            "Current Stock": product.stock_quantity,
            "Reorder Level": product.reorder_level,
            "Status": "Out of Stock" if product.stock_quantity == 0 else "Low Stock",
        }
        for product in snapshot.products
        if product.is_low_stock
    ]


def last_restocked_at(snapshot: LedgerSnapshot, product_id: str) -> Optional[str]:
    """created_at of the newest stock_in for a product, or None."""
    restocks = [
        tx.created_at
        for tx in snapshot.transactions_for_product(product_id)
        if tx.transaction_type is TransactionType.STOCK_IN
    ]
    if not restocks:
        return None
    return max(restocks, key=parse_iso)


def restock_report(snapshot: LedgerSnapshot) -> List[Dict[str, Any]]:
    rows = []
    for product in snapshot.products:
        restocked = last_restocked_at(snapshot, product.id)
        rows.append({
            "Product": product.name,
            "Category": product.category.value,
            "Stock Quantity": product.stock_quantity,
            "Last Restocked": _display_date(restocked) if restocked else None,
        })
    return rows


# ══════════════════════════════════════════════════════════════
# STAFF PERFORMANCE
# ══════════════════════════════════════════════════════════════

@dataclass
class PerformanceLine:
    employee: str
    total_sales: Amount = 0
    transactions: int = 0

    @property
    def average_value(self) -> float:
        return self.total_sales / self.transactions if self.transactions else 0.0


def performance_by_employee(snapshot: LedgerSnapshot) -> List[PerformanceLine]:
    lines: Dict[str, PerformanceLine] = OrderedDict()
    for sale in snapshot.sales:
        line = lines.setdefault(sale.created_by, PerformanceLine(employee=sale.created_by))
        line.total_sales += sale.total_amount
        line.transactions += 1
    return list(lines.values())


def performance_report(
    snapshot: LedgerSnapshot, settings: Optional[LedgerSettings] = None
) -> List[Dict[str, Any]]:
    return [
        {
            "Employee": line.employee,
            "Total Sales": format_currency(line.total_sales, settings),
            "Transactions": line.transactions,
            "Average Sale Value": format_currency(line.average_value, settings),
        }
        for line in performance_by_employee(snapshot)
    ]


# ══════════════════════════════════════════════════════════════
# DASHBOARD
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class DashboardSummary:
    total_sales: Amount
    total_expenses: Amount
    total_outstanding: Amount
    customer_count: int
    low_stock_count: int
    sales_by_day: Dict[str, Amount] = field(default_factory=dict)
    expenses_by_category: Dict[str, Amount] = field(default_factory=dict)

    @property
    def net_income(self) -> Amount:
        return self.total_sales - self.total_expenses

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_sales": self.total_sales,
            "total_expenses": self.total_expenses,
            "net_income": self.net_income,
            "total_outstanding": self.total_outstanding,
            "customer_count": self.customer_count,
            "low_stock_count": self.low_stock_count,
            "sales_by_day": dict(self.sales_by_day),
            "expenses_by_category": dict(self.expenses_by_category),
        }


def dashboard_summary(snapshot: LedgerSnapshot) -> DashboardSummary:
    sales_by_day: Dict[str, Amount] = defaultdict(int)
    for sale in snapshot.sales:
        sales_by_day[parse_iso(sale.created_at).date().isoformat()] += sale.total_amount

    expenses_by_category: Dict[str, Amount] = defaultdict(int)
    for expense in snapshot.expenses:
        expenses_by_category[expense.category.value] += expense.amount

    return DashboardSummary(
        total_sales=sum(s.total_amount for s in snapshot.sales),
        total_expenses=sum(e.amount for e in snapshot.expenses),
        total_outstanding=sum(c.outstanding_balance for c in snapshot.customers),
        customer_count=len(snapshot.customers),
        low_stock_count=sum(1 for p in snapshot.products if p.is_low_stock),
        sales_by_day=dict(sorted(sales_by_day.items())),
        expenses_by_category=dict(expenses_by_category),
    )


# ══════════════════════════════════════════════════════════════
# RECEIPT
# ══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ReceiptLine:
    product: str
    quantity: Amount
    unit_price: Amount
    total_price: Amount


@dataclass(frozen=True)
class SaleReceipt:
    """
    Printable receipt for one sale.

    customer / phone are empty when the customer has been
    deleted; a line's product is empty when its product has.
    """

    receipt_no: str
    date: str
    customer: str
    phone: str
    lines: Tuple[ReceiptLine, ...]
    total: Amount
    paid: Amount

    @property
    def balance(self) -> Amount:
        return self.total - self.paid

    def to_dict(self, settings: Optional[LedgerSettings] = None) -> Dict[str, Any]:
        return {
            "Receipt No": self.receipt_no,
            "Date": self.date,
            "Customer": self.customer,
            "Phone": self.phone,
            "Items": [
                {
                    "Item": line.product,
                    "Qty": line.quantity,
                    "Price": format_currency(line.unit_price, settings),
                    "Total": format_currency(line.total_price, settings),
                }
                for line in self.lines
            ],
            "Total": format_currency(self.total, settings),
            "Paid": format_currency(self.paid, settings),
            "Balance": format_currency(self.balance, settings),
        }


def sale_receipt(snapshot: LedgerSnapshot, sale_id: str) -> Optional[SaleReceipt]:
    """Receipt for `sale_id`, or None when the sale does not exist."""
    sale = snapshot.sale(sale_id)
    if sale is None:
        return None

    customer = snapshot.customer(sale.customer_id)
    lines = []
    for item in snapshot.items_for_sale(sale.id):
        product = snapshot.product(item.product_id)
        lines.append(ReceiptLine(
            product=product.name if product else "",
            quantity=item.quantity,
            unit_price=item.unit_price,
            total_price=item.total_price,
        ))

    return SaleReceipt(
        receipt_no=sale.id[:INVOICE_NUMBER_LENGTH],
        date=parse_iso(sale.created_at).strftime(RECEIPT_DATE_FORMAT),
        customer=customer.name if customer else "",
        phone=(customer.phone or "") if customer else "",
        lines=tuple(lines),
        total=sale.total_amount,
        paid=sale.paid_amount or 0,
    )


# ══════════════════════════════════════════════════════════════
# INTEGRITY
# ══════════════════════════════════════════════════════════════

def orphaned_sales(snapshot: LedgerSnapshot) -> List[Dict[str, Any]]:
    """Sales whose customer has been deleted."""
    customer_ids = {c.id for c in snapshot.customers}
    return [
        {
            "Invoice No": sale.id[:INVOICE_NUMBER_LENGTH],
            "Customer Id": sale.customer_id,
            "Amount": sale.total_amount,
            "Outstanding": sale.outstanding,
        }
        for sale in snapshot.sales
        if sale.customer_id not in customer_ids
    ]
