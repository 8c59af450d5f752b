"""
Tests for the stock ledger: running balances, the no-negative-stock rule and
the deletion guards.
"""
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date

import pytest
from sqlalchemy import create_engine, delete, update
from sqlalchemy.orm import sessionmaker

from thriftstock.core.database import drop_db, init_db
from thriftstock.core.exceptions import (
    ConflictError,
    InsufficientStockError,
    NotFoundError,
    ValidationError,
)
from thriftstock.models.catalog import Category, Item, Supplier
from thriftstock.models.stock import StockIn, StockOut
from thriftstock.schemas.catalog import CategoryCreate, ItemCreate, SupplierCreate
from thriftstock.schemas.user import StaffCreate
from thriftstock.services.auth_service import auth_service
from thriftstock.services.catalog_service import catalog_service
from thriftstock.services.ledger import ledger_service


def current_stock(db, item_id):
    db.expire_all()
    return db.get(Item, item_id).current_stock


def receive(db, item, supplier, user, quantity):
    return ledger_service.record_stock_in(
        db,
        item_id=item["item_id"],
        supplier_id=supplier.supplier_id,
        quantity=quantity,
        date_in=date(2026, 10, 1),
        user_id=user["user_id"],
    )


def sell(db, item, user, quantity):
    return ledger_service.record_stock_out(
        db,
        item_id=item["item_id"],
        quantity=quantity,
        date_out=date(2026, 10, 2),
        user_id=user["user_id"],
    )


def remove_item_after_lookup(monkeypatch):
    """Delete the item right after the ledger has looked it up."""
    lookup = ledger_service._get_item

    def lookup_then_delete(db, item_id):
        found = lookup(db, item_id)
        db.execute(delete(Item).where(Item.item_id == item_id))
        db.commit()
        return found

    monkeypatch.setattr(ledger_service, "_get_item", lookup_then_delete)


class TestStockIn:
    def test_increments_current_stock(self, db, item, supplier, clerk):
        entry = receive(db, item, supplier, clerk, 10)

        assert entry["quantity"] == 10
        assert entry["current_stock"] == 10
        assert current_stock(db, item["item_id"]) == 10

    def test_defaults_purchase_price_to_item_price(self, db, item, supplier, clerk):
        entry = receive(db, item, supplier, clerk, 3)

        assert entry["purchase_price"] == pytest.approx(8.5)

    @pytest.mark.parametrize("quantity", [0, -4])
    def test_rejects_non_positive_quantity(self, db, item, supplier, clerk, quantity):
        with pytest.raises(ValidationError):
            receive(db, item, supplier, clerk, quantity)

        assert current_stock(db, item["item_id"]) == 0
        assert db.query(StockIn).count() == 0

    def test_unknown_item(self, db, supplier, clerk):
        with pytest.raises(NotFoundError):
            ledger_service.record_stock_in(
                db, item_id=999, supplier_id=supplier.supplier_id, quantity=1, user_id=clerk["user_id"]
            )

    def test_unknown_supplier(self, db, item, clerk):
        with pytest.raises(NotFoundError):
            ledger_service.record_stock_in(
                db, item_id=item["item_id"], supplier_id=999, quantity=1, user_id=clerk["user_id"]
            )
        assert current_stock(db, item["item_id"]) == 0

    def test_unknown_user(self, db, item, supplier):
        with pytest.raises(NotFoundError):
            ledger_service.record_stock_in(
                db, item_id=item["item_id"], supplier_id=supplier.supplier_id, quantity=1, user_id=999
            )

    def test_item_removed_after_lookup_is_not_found(self, db, item, supplier, clerk, monkeypatch):
        remove_item_after_lookup(monkeypatch)

        with pytest.raises(NotFoundError):
            ledger_service.record_stock_in(
                db,
                item_id=item["item_id"],
                supplier_id=supplier.supplier_id,
                quantity=1,
                purchase_price=8,
                user_id=clerk["user_id"],
            )
        assert db.query(StockIn).count() == 0


class TestStockOut:
    def test_decrements_current_stock(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 10)
        entry = sell(db, item, clerk, 4)

        assert entry["current_stock"] == 6
        assert entry["selling_price"] == pytest.approx(20.0)
        assert current_stock(db, item["item_id"]) == 6

    def test_insufficient_stock_leaves_everything_unchanged(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 5)

        with pytest.raises(InsufficientStockError) as exc_info:
            sell(db, item, clerk, 6)

        assert exc_info.value.details == {"requested": 6, "available": 5}
        assert current_stock(db, item["item_id"]) == 5
        assert db.query(StockOut).count() == 0

    def test_insufficient_stock_is_a_validation_error(self):
        assert issubclass(InsufficientStockError, ValidationError)
        assert InsufficientStockError().status_code == 400

    def test_selling_exactly_what_is_on_hand(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 2)
        sell(db, item, clerk, 2)

        assert current_stock(db, item["item_id"]) == 0

    def test_empty_item_cannot_be_sold(self, db, item, clerk):
        with pytest.raises(InsufficientStockError):
            sell(db, item, clerk, 1)

    def test_rejects_zero_quantity(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 2)
        with pytest.raises(ValidationError):
            sell(db, item, clerk, 0)

    def test_unknown_item(self, db, clerk):
        with pytest.raises(NotFoundError):
            ledger_service.record_stock_out(db, item_id=999, quantity=1, user_id=clerk["user_id"])

    def test_item_removed_after_lookup_is_not_found(self, db, item, clerk, monkeypatch):
        remove_item_after_lookup(monkeypatch)

        with pytest.raises(NotFoundError):
            ledger_service.record_stock_out(
                db, item_id=item["item_id"], quantity=1, selling_price=20, user_id=clerk["user_id"]
            )

    def test_concurrent_sales_never_oversell(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'ledger.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        init_db(bind=engine)
        Session = sessionmaker(bind=engine, autoflush=False)
        buyers = 12

        try:
            with Session() as setup:
                clerk = auth_service.create_user(
                    setup, StaffCreate(username="clerk", password="clerk-pass", role_id=2)
                )
                category = catalog_service.create_category(setup, CategoryCreate(category_name="Coats"))
                item = catalog_service.create_item(
                    setup, ItemCreate(item_name="Wool coat", category_id=category["category_id"])
                )
                supplier = catalog_service.create_supplier(setup, SupplierCreate(supplier_name="Drop-off bin"))
                receive(setup, item, supplier, clerk, 5)

            start = threading.Barrier(buyers, timeout=30)

            def buy_one(_):
                with Session() as session:
                    start.wait()
                    try:
                        sell(session, item, clerk, 1)
                        return "sold"
                    except InsufficientStockError:
                        return "short"

            with ThreadPoolExecutor(max_workers=buyers) as pool:
                outcomes = list(pool.map(buy_one, range(buyers)))

            assert outcomes.count("sold") == 5
            assert outcomes.count("short") == buyers - 5
            with Session() as check:
                assert current_stock(check, item["item_id"]) == 0
                assert check.query(StockOut).count() == 5
                assert ledger_service.audit_balances(check) == []
        finally:
            drop_db(bind=engine)
            engine.dispose()


class TestBalances:
    def test_receive_sell_scenario(self, db, item, supplier, clerk):
        assert current_stock(db, item["item_id"]) == 0

        receive(db, item, supplier, clerk, 10)
        assert current_stock(db, item["item_id"]) == 10

        with pytest.raises(InsufficientStockError):
            sell(db, item, clerk, 15)
        assert current_stock(db, item["item_id"]) == 10

        sell(db, item, clerk, 10)
        assert current_stock(db, item["item_id"]) == 0

    def test_counter_matches_history_after_mixed_movements(self, db, category, supplier, clerk):
        items = [
            catalog_service.create_item(db, ItemCreate(item_name=name, category_id=category["category_id"]))
            for name in ("Wool coat", "Leather belt", "Silk scarf")
        ]
        movements = [
            (0, "in", 7), (1, "in", 3), (0, "out", 2), (2, "in", 1),
            (1, "out", 5), (0, "out", 5), (2, "out", 1), (1, "in", 4), (0, "out", 1),
        ]
        for index, kind, quantity in movements:
            try:
                if kind == "in":
                    receive(db, items[index], supplier, clerk, quantity)
                else:
                    sell(db, items[index], clerk, quantity)
            except InsufficientStockError:
                pass

        for entry in items:
            assert current_stock(db, entry["item_id"]) == ledger_service.item_balance(db, entry["item_id"])
            assert current_stock(db, entry["item_id"]) >= 0
        assert ledger_service.audit_balances(db) == []

    def test_audit_reports_drifted_counter(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 4)
        db.execute(update(Item).where(Item.item_id == item["item_id"]).values(current_stock=9))
        db.commit()

        drift = ledger_service.audit_balances(db)

        assert drift == [{
            "item_id": item["item_id"],
            "item_name": "Denim jacket",
            "current_stock": 9,
            "ledger_balance": 4,
        }]

    def test_history_listing_includes_names(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 3)
        sell(db, item, clerk, 1)

        [stock_in] = ledger_service.list_stock_in(db)
        [stock_out] = ledger_service.list_stock_out(db)

        assert stock_in["item_name"] == "Denim jacket"
        assert stock_in["supplier_name"] == "Estate Lots Co"
        assert stock_in["username"] == "clerk"
        assert stock_out["quantity"] == 1
        assert stock_out["username"] == "clerk"


class TestDeletionGuards:
    def test_category_in_use_cannot_be_deleted(self, db, category, item):
        with pytest.raises(ConflictError):
            ledger_service.delete_category(db, category["category_id"])

        db.expire_all()
        assert db.get(Category, category["category_id"]) is not None
        assert db.get(Item, item["item_id"]).category_id == category["category_id"]

    def test_unused_category_is_deleted(self, db):
        empty = catalog_service.create_category(db, CategoryCreate(category_name="Vinyl"))

        ledger_service.delete_category(db, empty["category_id"])

        assert db.get(Category, empty["category_id"]) is None

    def test_missing_category(self, db):
        with pytest.raises(NotFoundError):
            ledger_service.delete_category(db, 12345)

    def test_item_with_history_cannot_be_deleted(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 1)

        with pytest.raises(ConflictError):
            ledger_service.delete_item(db, item["item_id"])
        assert db.get(Item, item["item_id"]) is not None

    def test_item_without_history_is_deleted(self, db, item):
        ledger_service.delete_item(db, item["item_id"])

        assert db.get(Item, item["item_id"]) is None

    def test_supplier_with_deliveries_cannot_be_deleted(self, db, item, supplier, clerk):
        receive(db, item, supplier, clerk, 1)

        with pytest.raises(ConflictError):
            ledger_service.delete_supplier(db, supplier.supplier_id)

    def test_unused_supplier_is_deleted(self, db):
        spare = catalog_service.create_supplier(db, SupplierCreate(supplier_name="Church rummage"))
        supplier_id = spare.supplier_id

        ledger_service.delete_supplier(db, supplier_id)

        assert db.get(Supplier, supplier_id) is None
