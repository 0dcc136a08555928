"""
Nawiri Ledger Engine - Ledger Store
====================================
Sole owner of the six ledger tables and the only code allowed
to write derived fields:

    Product.stock_quantity
    Customer.total_purchases
    Customer.outstanding_balance

Every operation:
1. Stages its changes on fresh per-table lists (rows replaced,
   never mutated in place)
2. Commits all staged tables in one step
3. Saves the whole blob (failure logged, never raised)
4. Dispatches a LedgerEvent to subscribers
5. Returns a MutationOutcome

Missing references never raise. The side effect is skipped,
the primary record is kept, and the skip is reported in the
outcome. Single writer: no locking.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from core.config import LedgerSettings
from core.events import SubscriberRegistry, dispatch
from core.logging import configure_logging
from core.persistence import (
    BlobStore,
    InMemoryBlobStore,
    JsonFileBlobStore,
    PersistedStateError,
)
from core.time import Clock, SystemClock, now_iso
from engines.ledger.commands import (
    AddCustomerRequest,
    AddExpenseRequest,
    AddProductRequest,
    AddSaleRequest,
    AddStockTransactionRequest,
    SaleItemRequest,
)
from engines.ledger.events import (
    LEDGER_CUSTOMER_ADDED_V1,
    LEDGER_CUSTOMER_DELETED_V1,
    LEDGER_CUSTOMER_UPDATED_V1,
    LEDGER_EXPENSE_ADDED_V1,
    LEDGER_EXPENSE_DELETED_V1,
    LEDGER_EXPENSE_UPDATED_V1,
    LEDGER_PRODUCT_ADDED_V1,
    LEDGER_PRODUCT_DELETED_V1,
    LEDGER_PRODUCT_UPDATED_V1,
    LEDGER_SALE_ADDED_V1,
    LEDGER_SALE_DELETED_V1,
    LEDGER_SALE_UPDATED_V1,
    LEDGER_STOCK_TRANSACTION_ADDED_V1,
    LedgerEvent,
)
from engines.ledger.models import (
    Amount,
    Customer,
    Expense,
    LedgerRow,
    Product,
    Sale,
    SaleItem,
    StockTransaction,
)
from engines.ledger.outcomes import MutationOutcome, ReferenceNotFound
from engines.ledger.policies import (
    compensating_movement,
    outstanding,
    sale_update_effect,
    stock_delta,
)
from engines.ledger.snapshot import (
    CUSTOMERS,
    EXPENSES,
    PRODUCTS,
    SALE_ITEMS,
    SALES,
    STOCK_TRANSACTIONS,
    TABLES,
    LedgerSnapshot,
)

logger = logging.getLogger("nawiri.ledger")

IdFactory = Callable[[], str]


def _uuid4_str() -> str:
    return str(uuid.uuid4())


def _index_of(rows: List[LedgerRow], row_id: str) -> Optional[int]:
    for index, row in enumerate(rows):
        if row.id == row_id:
            return index
    return None


# ══════════════════════════════════════════════════════════════
# LEDGER STORE
# ══════════════════════════════════════════════════════════════

class LedgerStore:
    """
    In-memory ledger with injected persistence.

    Collaborators (all optional):
        blob_store:  where the whole blob is saved after each mutation
        clock:       source for created_at / updated_at
        id_factory:  new row ids (default: uuid4 strings)
        subscribers: registry notified after each commit
        settings:    storage key and update_sale total policy
        initial:     snapshot to start from (see `open`)
    """

    def __init__(
        self,
        *,
        blob_store: Optional[BlobStore] = None,
        clock: Optional[Clock] = None,
        id_factory: Optional[IdFactory] = None,
        subscribers: Optional[SubscriberRegistry] = None,
        settings: Optional[LedgerSettings] = None,
        initial: Optional[LedgerSnapshot] = None,
    ):
        self._blob_store = blob_store
        self._clock = clock or SystemClock()
        self._id_factory = id_factory or _uuid4_str
        self._subscribers = subscribers or SubscriberRegistry()
        self._settings = settings or LedgerSettings()
        self._tables: Dict[str, List[LedgerRow]] = (
            initial.tables() if initial is not None
            else {key: [] for key in TABLES}
        )

    @classmethod
    def open(
        cls,
        blob_store: BlobStore,
        *,
        settings: Optional[LedgerSettings] = None,
        **collaborators: Any,
    ) -> LedgerStore:
        """
        Load the persisted blob once and build a store around it.

        A missing blob starts empty. An unreadable one raises
        PersistedStateError rather than silently discarding data.
        """
        settings = settings or LedgerSettings()
        key = settings.storage_key
        blob = blob_store.load(key)

        initial = None
        if blob is not None:
            try:
                initial = LedgerSnapshot.from_dict(blob)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise PersistedStateError(key, str(exc)) from exc
            logger.info(
                f"Ledger '{key}' loaded: {len(initial.products)} products, "
                f"{len(initial.customers)} customers, {len(initial.sales)} sales"
            )

        return cls(
            blob_store=blob_store, settings=settings, initial=initial, **collaborators
        )

    @classmethod
    def from_settings(
        cls, settings: Optional[LedgerSettings] = None, **collaborators: Any
    ) -> LedgerStore:
        """
        Wire a store from configuration alone.

        Sets the `nawiri` log level, then opens the blob under
        settings.data_root as a JSON file, or an in-memory blob
        when no data_root is configured.
        """
        settings = settings or LedgerSettings.from_env()
        configure_logging(settings.log_level)

        if settings.data_root is not None:
            blob_store: BlobStore = JsonFileBlobStore(settings.data_root)
        else:
            logger.warning("No data_root configured; ledger will not survive a restart")
            blob_store = InMemoryBlobStore()
        return cls.open(blob_store, settings=settings, **collaborators)

    # ── Read side ──────────────────────────────────────────────

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot.from_tables(self._tables, taken_at=now_iso(self._clock))

    @property
    def subscribers(self) -> SubscriberRegistry:
        return self._subscribers

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    @property
    def blob_store(self) -> Optional[BlobStore]:
        return self._blob_store

    # ── Products ───────────────────────────────────────────────

    def add_product(self, request: AddProductRequest) -> MutationOutcome:
        now = now_iso(self._clock)
        product = Product(
            id=self._new_id(), created_at=now, updated_at=now, **request.as_fields()
        )
        return self._append(PRODUCTS, product, "add_product", LEDGER_PRODUCT_ADDED_V1)

    def update_product(self, product_id: str, changes: Mapping[str, Any]) -> MutationOutcome:
        return self._update(
            PRODUCTS, product_id, changes, "update_product",
            LEDGER_PRODUCT_UPDATED_V1, touch=True,
        )

    def delete_product(self, product_id: str) -> MutationOutcome:
        return self._delete(PRODUCTS, product_id, "delete_product", LEDGER_PRODUCT_DELETED_V1)

    # ── Customers ──────────────────────────────────────────────

    def add_customer(self, request: AddCustomerRequest) -> MutationOutcome:
        now = now_iso(self._clock)
        customer = Customer(
            id=self._new_id(), created_at=now, updated_at=now, **request.as_fields()
        )
        return self._append(CUSTOMERS, customer, "add_customer", LEDGER_CUSTOMER_ADDED_V1)

    def update_customer(self, customer_id: str, changes: Mapping[str, Any]) -> MutationOutcome:
        return self._update(
            CUSTOMERS, customer_id, changes, "update_customer",
            LEDGER_CUSTOMER_UPDATED_V1, touch=True,
        )

    def delete_customer(self, customer_id: str) -> MutationOutcome:
        # Sales are left in place with a dangling customer_id.
        orphaned = sum(1 for s in self._tables[SALES] if s.customer_id == customer_id)
        outcome = self._delete(
            CUSTOMERS, customer_id, "delete_customer", LEDGER_CUSTOMER_DELETED_V1
        )
        if outcome.applied and orphaned:
            logger.warning(
                f"Customer {customer_id} deleted with {orphaned} sale(s) "
                f"still referencing it"
            )
        return outcome

    # ── Expenses ───────────────────────────────────────────────

    def add_expense(self, request: AddExpenseRequest) -> MutationOutcome:
        expense = Expense(
            id=self._new_id(), created_at=now_iso(self._clock), **request.as_fields()
        )
        return self._append(EXPENSES, expense, "add_expense", LEDGER_EXPENSE_ADDED_V1)

    def update_expense(self, expense_id: str, changes: Mapping[str, Any]) -> MutationOutcome:
        return self._update(
            EXPENSES, expense_id, changes, "update_expense",
            LEDGER_EXPENSE_UPDATED_V1, touch=False,
        )

    def delete_expense(self, expense_id: str) -> MutationOutcome:
        return self._delete(EXPENSES, expense_id, "delete_expense", LEDGER_EXPENSE_DELETED_V1)

    # ── Stock ──────────────────────────────────────────────────

    def add_stock_transaction(self, request: AddStockTransactionRequest) -> MutationOutcome:
        now = now_iso(self._clock)
        transaction = StockTransaction(
            id=self._new_id(), created_at=now, **request.as_fields()
        )

        products = list(self._tables[PRODUCTS])
        missing = self._adjust_stock(
            products,
            transaction.product_id,
            stock_delta(transaction.transaction_type, transaction.quantity),
            now,
        )

        staged = {
            STOCK_TRANSACTIONS: self._tables[STOCK_TRANSACTIONS] + [transaction],
            PRODUCTS: products,
        }
        outcome = MutationOutcome(
            operation="add_stock_transaction",
            entity_id=transaction.id,
            applied=True,
            missing_references=tuple(missing),
        )
        return self._commit(staged, outcome, LEDGER_STOCK_TRANSACTION_ADDED_V1)

    def reverse_stock_transaction(
        self,
        transaction_id: str,
        *,
        created_by: str,
        notes: Optional[str] = None,
    ) -> MutationOutcome:
        """
        Cancel a stock transaction by appending its inverse.

        History is never edited: the original row stays and a
        compensating row is added through add_stock_transaction.
        """
        index = _index_of(self._tables[STOCK_TRANSACTIONS], transaction_id)
        if index is None:
            logger.debug(f"reverse_stock_transaction: {transaction_id} not found")
            return MutationOutcome.noop("reverse_stock_transaction", transaction_id)

        original: StockTransaction = self._tables[STOCK_TRANSACTIONS][index]
        transaction_type, quantity = compensating_movement(
            original.transaction_type, original.quantity
        )
        return self.add_stock_transaction(
            AddStockTransactionRequest(
                product_id=original.product_id,
                transaction_type=transaction_type,
                quantity=quantity,
                created_by=created_by,
                unit_price=original.unit_price,
                notes=notes or f"Reversal of {original.id}",
            )
        )

    # ── Sales ──────────────────────────────────────────────────

    def add_sale(
        self, request: AddSaleRequest, items: Iterable[SaleItemRequest]
    ) -> MutationOutcome:
        now = now_iso(self._clock)
        sale = Sale(id=self._new_id(), created_at=now, **request.as_fields())
        sale_items = [
            SaleItem(
                id=self._new_id(),
                sale_id=sale.id,
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in items
        ]

        products = list(self._tables[PRODUCTS])
        missing: List[ReferenceNotFound] = []
        for item in sale_items:
            missing.extend(
                self._adjust_stock(products, item.product_id, -item.quantity, now)
            )

        customers = list(self._tables[CUSTOMERS])
        missing.extend(
            self._adjust_customer(
                customers,
                sale.customer_id,
                purchases_delta=sale.total_amount,
                outstanding_delta=outstanding(sale.total_amount, sale.paid_amount),
                now=now,
            )
        )

        staged = {
            SALES: self._tables[SALES] + [sale],
            SALE_ITEMS: self._tables[SALE_ITEMS] + sale_items,
            PRODUCTS: products,
            CUSTOMERS: customers,
        }
        outcome = MutationOutcome(
            operation="add_sale",
            entity_id=sale.id,
            applied=True,
            missing_references=tuple(missing),
        )
        return self._commit(staged, outcome, LEDGER_SALE_ADDED_V1)

    def update_sale(self, sale_id: str, changes: Mapping[str, Any]) -> MutationOutcome:
        """
        Replace sale fields and move the customer's outstanding
        balance by the change in unpaid amount.

        Sale items and stock are not touched. By default the
        balance is recomputed against the OLD total_amount; see
        LedgerSettings.recompute_total_on_sale_update.
        """
        sales = list(self._tables[SALES])
        index = _index_of(sales, sale_id)
        if index is None:
            logger.debug(f"update_sale: {sale_id} not found")
            return MutationOutcome.noop("update_sale", sale_id)

        old_sale: Sale = sales[index]
        changes = {
            k: v for k, v in changes.items()
            if not (k == "paid_amount" and v is None)
        }
        effect = sale_update_effect(
            old_sale,
            changes,
            recompute_total=self._settings.recompute_total_on_sale_update,
        )
        if effect.ignored_total_change:
            logger.warning(
                f"update_sale: total_amount of sale {sale_id} changed from "
                f"{old_sale.total_amount} to {changes['total_amount']}; customer "
                f"balances still use the old total"
            )

        now = now_iso(self._clock)
        sales[index] = old_sale.with_changes(changes)

        customers = list(self._tables[CUSTOMERS])
        missing = self._adjust_customer(
            customers,
            old_sale.customer_id,
            purchases_delta=effect.purchases_delta,
            outstanding_delta=effect.outstanding_delta,
            now=now,
        )

        outcome = MutationOutcome(
            operation="update_sale",
            entity_id=sale_id,
            applied=True,
            missing_references=tuple(missing),
        )
        return self._commit({SALES: sales, CUSTOMERS: customers}, outcome, LEDGER_SALE_UPDATED_V1)

    def delete_sale(self, sale_id: str) -> MutationOutcome:
        """Remove a sale with its items and reverse every side effect."""
        index = _index_of(self._tables[SALES], sale_id)
        if index is None:
            logger.debug(f"delete_sale: {sale_id} not found")
            return MutationOutcome.noop("delete_sale", sale_id)

        sale: Sale = self._tables[SALES][index]
        now = now_iso(self._clock)

        kept_items: List[SaleItem] = []
        removed_items: List[SaleItem] = []
        for item in self._tables[SALE_ITEMS]:
            (removed_items if item.sale_id == sale_id else kept_items).append(item)

        products = list(self._tables[PRODUCTS])
        missing: List[ReferenceNotFound] = []
        for item in removed_items:
            missing.extend(
                self._adjust_stock(products, item.product_id, item.quantity, now)
            )

        customers = list(self._tables[CUSTOMERS])
        missing.extend(
            self._adjust_customer(
                customers,
                sale.customer_id,
                purchases_delta=-sale.total_amount,
                outstanding_delta=-outstanding(sale.total_amount, sale.paid_amount),
                now=now,
            )
        )

        staged = {
            SALES: [s for s in self._tables[SALES] if s.id != sale_id],
            SALE_ITEMS: kept_items,
            PRODUCTS: products,
            CUSTOMERS: customers,
        }
        outcome = MutationOutcome(
            operation="delete_sale",
            entity_id=sale_id,
            applied=True,
            missing_references=tuple(missing),
        )
        return self._commit(staged, outcome, LEDGER_SALE_DELETED_V1)

    # ══════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════

    def _new_id(self) -> str:
        return str(self._id_factory())

    def _append(
        self, table: str, row: LedgerRow, operation: str, event_type: str
    ) -> MutationOutcome:
        outcome = MutationOutcome(operation=operation, entity_id=row.id, applied=True)
        return self._commit({table: self._tables[table] + [row]}, outcome, event_type)

    def _update(
        self,
        table: str,
        row_id: str,
        changes: Mapping[str, Any],
        operation: str,
        event_type: str,
        *,
        touch: bool,
    ) -> MutationOutcome:
        rows = list(self._tables[table])
        index = _index_of(rows, row_id)
        if index is None:
            logger.debug(f"{operation}: {row_id} not found")
            return MutationOutcome.noop(operation, row_id)

        stamps = {"updated_at": now_iso(self._clock)} if touch else {}
        rows[index] = rows[index].with_changes(changes, **stamps)

        outcome = MutationOutcome(operation=operation, entity_id=row_id, applied=True)
        return self._commit({table: rows}, outcome, event_type)

    def _delete(
        self, table: str, row_id: str, operation: str, event_type: str
    ) -> MutationOutcome:
        rows = [row for row in self._tables[table] if row.id != row_id]
        if len(rows) == len(self._tables[table]):
            logger.debug(f"{operation}: {row_id} not found")
            return MutationOutcome.noop(operation, row_id)

        outcome = MutationOutcome(operation=operation, entity_id=row_id, applied=True)
        return self._commit({table: rows}, outcome, event_type)

    def _adjust_stock(
        self, products: List[Product], product_id: str, delta: Amount, now: str
    ) -> Tuple[ReferenceNotFound, ...]:
        index = _index_of(products, product_id)
        if index is None:
            logger.warning(
                f"Product {product_id} not found; stock change of {delta} skipped"
            )
            return (ReferenceNotFound("product", product_id, "stock_quantity"),)

        product = products[index]
        products[index] = product.with_changes(
            {}, stock_quantity=product.stock_quantity + delta, updated_at=now
        )
        return ()

    def _adjust_customer(
        self,
        customers: List[Customer],
        customer_id: str,
        *,
        purchases_delta: Amount,
        outstanding_delta: Amount,
        now: str,
    ) -> Tuple[ReferenceNotFound, ...]:
        index = _index_of(customers, customer_id)
        if index is None:
            logger.warning(
                f"Customer {customer_id} not found; balance change skipped "
                f"(purchases {purchases_delta}, outstanding {outstanding_delta})"
            )
            return (
                ReferenceNotFound("customer", customer_id, "total_purchases"),
                ReferenceNotFound("customer", customer_id, "outstanding_balance"),
            )

        customer = customers[index]
        customers[index] = customer.with_changes(
            {},
            total_purchases=customer.total_purchases + purchases_delta,
            outstanding_balance=customer.outstanding_balance + outstanding_delta,
            updated_at=now,
        )
        return ()

    def _commit(
        self,
        staged: Dict[str, List[LedgerRow]],
        outcome: MutationOutcome,
        event_type: str,
    ) -> MutationOutcome:
        self._tables = {**self._tables, **staged}

        logger.info(
            f"{outcome.operation} committed: {outcome.entity_id}"
            + (
                f" ({len(outcome.missing_references)} side effect(s) skipped)"
                if outcome.missing_references else ""
            )
        )

        self._persist()
        dispatch(
            LedgerEvent(
                event_id=str(uuid.uuid4()),
                event_type=event_type,
                entity_id=outcome.entity_id,
                occurred_at=now_iso(self._clock),
                outcome=outcome,
            ),
            self._subscribers,
        )
        return outcome

    def _persist(self) -> None:
        if self._blob_store is None:
            return
        key = self._settings.storage_key
        try:
            self._blob_store.save(key, self.snapshot().to_dict())
        except Exception as exc:
            # The commit stands; persistence is fire-and-forget.
            logger.error(f"Saving ledger '{key}' failed: {exc}", exc_info=True)
