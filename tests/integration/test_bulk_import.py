"""Nawiri bulk import tests: row validation and application."""

import itertools
from datetime import datetime, timezone

import pytest

from core.time import FixedClock
from engines.ledger import (
    AddProductRequest,
    LedgerStore,
    ProductCategory,
    TransactionType,
    WeightCategory,
)
from integration.bulk_import import (
    BulkImporter,
    ImportValidationError,
    ProductRowSchema,
    RowError,
    StockRowSchema,
)

NOW = datetime(2025, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


def make_store():
    counter = itertools.count(1)
    return LedgerStore(clock=FixedClock(NOW), id_factory=lambda: f"id-{next(counter)}")


def product_row(**overrides):
    row = {
        "name": "Sembe 5kg",
        "category": "flour-sembe",
        "weight": "5kg",
        "price": 350,
        "stock_quantity": 50,
        "reorder_level": 10,
    }
    row.update(overrides)
    return row


def stock_row(**overrides):
    row = {"product_name": "Sembe 5kg", "transaction_type": "stock_in", "quantity": 20}
    row.update(overrides)
    return row


# ══════════════════════════════════════════════════════════════
# SCHEMAS
# ══════════════════════════════════════════════════════════════

class TestProductRowSchema:
    def test_valid_row(self):
        assert ProductRowSchema().validate(product_row()) == []

    def test_missing_fields(self):
        problems = dict(ProductRowSchema().validate({"name": "Sembe"}))
        assert problems == {
            "category": "Required",
            "price": "Required",
            "stock_quantity": "Required",
            "reorder_level": "Required",
        }

    def test_blank_name(self):
        problems = ProductRowSchema().validate(product_row(name="   "))
        assert problems == [("name", "Name is required")]

    def test_wrong_types(self):
        problems = dict(ProductRowSchema().validate(product_row(price="350", name=12)))
        assert problems["price"] == "Expected number, received string"
        assert problems["name"] == "Expected string, received number"

    def test_boolean_is_not_a_number(self):
        problems = dict(ProductRowSchema().validate(product_row(price=True)))
        assert problems["price"] == "Expected number, received boolean"

    def test_negative_number(self):
        problems = dict(ProductRowSchema().validate(product_row(stock_quantity=-1)))
        assert problems["stock_quantity"] == "Number must be greater than or equal to 0"

    def test_bad_enum(self):
        problems = dict(ProductRowSchema().validate(product_row(category="maize")))
        assert problems["category"] == (
            "Invalid enum value. Expected 'flour-sembe' | 'flour-dona' | 'bran', "
            "received 'maize'"
        )

    def test_legacy_category_accepted(self):
        assert ProductRowSchema().validate(product_row(category="unga_sembe")) == []

    def test_template_is_valid(self):
        schema = ProductRowSchema()
        assert schema.validate(schema.template()) == []


class TestStockRowSchema:
    def test_quantity_at_least_one(self):
        problems = dict(StockRowSchema().validate(stock_row(quantity=0)))
        assert problems["quantity"] == "Number must be greater than or equal to 1"

    def test_blank_product_name(self):
        problems = dict(StockRowSchema().validate(stock_row(product_name="")))
        assert problems["product_name"] == "Product name is required"

    def test_template_is_valid(self):
        schema = StockRowSchema()
        assert schema.validate(schema.template()) == []


# ══════════════════════════════════════════════════════════════
# IMPORTER
# ══════════════════════════════════════════════════════════════

class TestImportProducts:
    def test_applies_rows(self):
        store = make_store()
        result = BulkImporter(store).import_products([
            product_row(name="  Sembe 5kg  "),
            product_row(name="Pumba", category="pumba", weight=None),
        ])

        assert result.success
        assert result.applied_count == 2
        products = store.snapshot().products
        assert [p.name for p in products] == ["Sembe 5kg", "Pumba"]
        assert products[0].weight is WeightCategory.KG_5
        assert products[1].category is ProductCategory.BRAN

    def test_any_error_rejects_batch(self):
        store = make_store()
        result = BulkImporter(store).import_products([
            product_row(), product_row(price=-5), "not a row",
        ])

        assert not result.success
        assert result.applied_count == 0
        assert store.snapshot().products == ()
        assert result.errors == (
            RowError(2, "price", "Number must be greater than or equal to 0"),
            RowError(3, "row", "Expected object"),
        )
        assert result.messages()[0] == "Row 2: price - Number must be greater than or equal to 0"

    def test_raise_for_errors(self):
        result = BulkImporter(make_store()).import_products([product_row(name="")])
        with pytest.raises(ImportValidationError, match="products import rejected: 1 error"):
            result.raise_for_errors()

    def test_templates(self):
        importer = BulkImporter(make_store())
        assert importer.product_template()[0]["category"] == "flour-sembe"
        assert importer.stock_template()[0]["transaction_type"] == "stock_in"


class TestImportStock:
    def _store_with_product(self):
        store = make_store()
        store.add_product(AddProductRequest(
            name="Sembe 5kg", category=ProductCategory.FLOUR_SEMBE, price=350, stock_quantity=50,
        ))
        return store

    def test_resolves_names_and_moves_stock(self):
        store = self._store_with_product()

        result = BulkImporter(store).import_stock([
            stock_row(quantity=20, unit_price=300),
            stock_row(product_name=" Sembe 5kg ", transaction_type="stock_out", quantity=5),
        ])

        snap = store.snapshot()
        assert result.success
        assert snap.product("id-1").stock_quantity == 65
        assert [tx.transaction_type for tx in snap.stock_transactions] == [
            TransactionType.STOCK_IN, TransactionType.STOCK_OUT,
        ]
        assert {tx.created_by for tx in snap.stock_transactions} == {"system"}

    def test_created_by(self):
        store = self._store_with_product()
        BulkImporter(store).import_stock([stock_row()], created_by="juma")
        assert store.snapshot().stock_transactions[0].created_by == "juma"

    def test_unknown_product_rejects_batch(self):
        store = self._store_with_product()

        result = BulkImporter(store).import_stock([stock_row(), stock_row(product_name="Dona")])

        assert result.errors == (RowError(2, "product_name", "No product named 'Dona'"),)
        snap = store.snapshot()
        assert snap.stock_transactions == ()
        assert snap.product("id-1").stock_quantity == 50

    def test_name_match_is_exact(self):
        store = self._store_with_product()
        result = BulkImporter(store).import_stock([stock_row(product_name="sembe 5kg")])
        assert not result.success
