"""
Nawiri Ledger Engine - Policies
================================
Pure rules for derived-field arithmetic. The store applies
them; nothing here touches tables.
"""

from __future__ import annotations

from typing import Any, Mapping, NamedTuple

from engines.ledger.models import Amount, Sale, TransactionType


def stock_delta(transaction_type: TransactionType, quantity: Amount) -> Amount:
    """
    Signed change to Product.stock_quantity for one stock transaction.

    stock_in adds, stock_out subtracts, adjustment adds its own
    (signed) quantity. No lower bound: stock may go negative.
    """
    if transaction_type is TransactionType.STOCK_IN:
        return quantity
    if transaction_type is TransactionType.STOCK_OUT:
        return -quantity
    return quantity


def compensating_movement(
    transaction_type: TransactionType, quantity: Amount
) -> tuple[TransactionType, Amount]:
    """Type and quantity of the transaction that cancels the given one."""
    if transaction_type is TransactionType.STOCK_IN:
        return TransactionType.STOCK_OUT, quantity
    if transaction_type is TransactionType.STOCK_OUT:
        return TransactionType.STOCK_IN, quantity
    return TransactionType.ADJUSTMENT, -quantity


def outstanding(total_amount: Amount, paid_amount: Amount | None) -> Amount:
    return total_amount - (paid_amount or 0)


class SaleUpdateEffect(NamedTuple):
    purchases_delta: Amount
    outstanding_delta: Amount
    ignored_total_change: bool


def sale_update_effect(
    old_sale: Sale,
    changes: Mapping[str, Any],
    *,
    recompute_total: bool = False,
) -> SaleUpdateEffect:
    """
    Customer aggregate deltas for update_sale.

    Default rule: new outstanding is measured against the OLD
    total_amount, with paid_amount taken from `changes` when
    given (None counts as not given). A total_amount change is
    then not reflected and `ignored_total_change` is set.

    With recompute_total=True the new total is used for the
    outstanding balance and total_purchases moves by the
    difference.
    """
    new_paid = changes.get("paid_amount")
    if new_paid is None:
        new_paid = old_sale.paid_amount

    new_total = changes.get("total_amount")
    total_changed = new_total is not None and new_total != old_sale.total_amount

    old_outstanding = outstanding(old_sale.total_amount, old_sale.paid_amount)

    if recompute_total and total_changed:
        return SaleUpdateEffect(
            purchases_delta=new_total - old_sale.total_amount,
            outstanding_delta=outstanding(new_total, new_paid) - old_outstanding,
            ignored_total_change=False,
        )

    return SaleUpdateEffect(
        purchases_delta=0,
        outstanding_delta=outstanding(old_sale.total_amount, new_paid) - old_outstanding,
        ignored_total_change=total_changed,
    )
