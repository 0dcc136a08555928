"""
Nawiri Ledger Engine - Public API
==================================
Customers, products, stock, expenses and sales, with the
derived totals kept consistent on every mutation.
"""

from engines.ledger.commands import (
    AddCustomerRequest,
    AddExpenseRequest,
    AddProductRequest,
    AddSaleRequest,
    AddStockTransactionRequest,
    SaleItemRequest,
)
from engines.ledger.events import LEDGER_EVENT_TYPES, LedgerEvent
from engines.ledger.models import (
    Customer,
    Expense,
    ExpenseCategory,
    PaymentStatus,
    Product,
    ProductCategory,
    Sale,
    SaleItem,
    StockTransaction,
    TransactionType,
    WeightCategory,
)
from engines.ledger.outcomes import MutationOutcome, ReferenceNotFound
from engines.ledger.services import LedgerStore
from engines.ledger.snapshot import LedgerSnapshot

__all__ = [
    "LedgerStore",
    "LedgerSnapshot",
    "LedgerEvent",
    "LEDGER_EVENT_TYPES",
    "MutationOutcome",
    "ReferenceNotFound",
    "AddCustomerRequest",
    "AddExpenseRequest",
    "AddProductRequest",
    "AddSaleRequest",
    "AddStockTransactionRequest",
    "SaleItemRequest",
    "Customer",
    "Expense",
    "ExpenseCategory",
    "PaymentStatus",
    "Product",
    "ProductCategory",
    "Sale",
    "SaleItem",
    "StockTransaction",
    "TransactionType",
    "WeightCategory",
]
