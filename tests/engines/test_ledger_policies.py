"""Nawiri Ledger policy tests: stock and balance arithmetic."""

import pytest

from engines.ledger.models import PaymentStatus, Sale, TransactionType
from engines.ledger.policies import (
    compensating_movement,
    outstanding,
    sale_update_effect,
    stock_delta,
)


def sale(total=1000, paid=0):
    return Sale(
        id="s1",
        customer_id="c1",
        total_amount=total,
        payment_status=PaymentStatus.PENDING,
        created_by="asha",
        created_at="2025-03-01T09:00:00+00:00",
        paid_amount=paid,
    )


class TestStockDelta:
    def test_stock_in_adds(self):
        assert stock_delta(TransactionType.STOCK_IN, 10) == 10

    def test_stock_out_subtracts(self):
        assert stock_delta(TransactionType.STOCK_OUT, 10) == -10

    @pytest.mark.parametrize("quantity", [-4, 0, 6, 2.5])
    def test_adjustment_keeps_sign(self, quantity):
        assert stock_delta(TransactionType.ADJUSTMENT, quantity) == quantity


class TestCompensatingMovement:
    @pytest.mark.parametrize("tx_type,quantity", [
        (TransactionType.STOCK_IN, 10),
        (TransactionType.STOCK_OUT, 3),
        (TransactionType.ADJUSTMENT, -7),
    ])
    def test_cancels_original(self, tx_type, quantity):
        reverse_type, reverse_qty = compensating_movement(tx_type, quantity)
        assert stock_delta(tx_type, quantity) + stock_delta(reverse_type, reverse_qty) == 0

    def test_stock_in_reversed_by_stock_out(self):
        assert compensating_movement(TransactionType.STOCK_IN, 10) == (
            TransactionType.STOCK_OUT, 10,
        )


class TestOutstanding:
    def test_unpaid(self):
        assert outstanding(1000, 0) == 1000

    def test_none_paid_counts_as_zero(self):
        assert outstanding(1000, None) == 1000

    def test_overpaid_is_negative(self):
        assert outstanding(1000, 1200) == -200


class TestSaleUpdateEffect:
    def test_payment(self):
        effect = sale_update_effect(sale(), {"paid_amount": 300})
        assert effect.purchases_delta == 0
        assert effect.outstanding_delta == -300
        assert not effect.ignored_total_change

    def test_no_paid_amount_means_no_change(self):
        effect = sale_update_effect(sale(paid=200), {"notes": "x"})
        assert effect.outstanding_delta == 0

    def test_paid_none_means_no_change(self):
        effect = sale_update_effect(sale(paid=200), {"paid_amount": None})
        assert effect.outstanding_delta == 0

    def test_total_change_ignored_by_default(self):
        effect = sale_update_effect(sale(paid=200), {"total_amount": 1500, "paid_amount": 500})
        assert effect.purchases_delta == 0
        assert effect.outstanding_delta == -300
        assert effect.ignored_total_change

    def test_same_total_is_not_a_change(self):
        effect = sale_update_effect(sale(), {"total_amount": 1000})
        assert not effect.ignored_total_change

    def test_total_change_recomputed(self):
        effect = sale_update_effect(
            sale(paid=200), {"total_amount": 1500, "paid_amount": 500}, recompute_total=True,
        )
        assert effect.purchases_delta == 500
        assert effect.outstanding_delta == 1000 - 800
        assert not effect.ignored_total_change
