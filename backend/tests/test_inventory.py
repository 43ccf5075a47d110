"""
Inventory primitive tests.

All stock writes are conditional UPDATEs; these tests exercise the bounds
(0 <= inventory <= max_inventory) and the daily reset.
"""

import pytest

from pizzeria.errors import InsufficientInventoryError, NotFoundError
from pizzeria.models import Product
from pizzeria.services import inventory_service
from pizzeria.validation import ValidationError
from conftest import make_product


def _stock(db_session, product_id):
    db_session.expire_all()
    return db_session.get(Product, product_id).inventory


class TestReserve:

    def test_reserve_decrements(self, db_session, margherita):
        inventory_service.try_reserve(margherita.id, 2)
        db_session.commit()
        assert _stock(db_session, margherita.id) == 3

    def test_reserve_all_then_nothing_left(self, db_session, margherita):
        inventory_service.try_reserve(margherita.id, 5)
        db_session.commit()
        with pytest.raises(InsufficientInventoryError) as exc:
            inventory_service.try_reserve(margherita.id, 1)
        assert exc.value.details == {
            "product_id": margherita.id,
            "name": "Margherita",
            "available": 0,
            "requested": 1,
        }
        db_session.rollback()
        assert _stock(db_session, margherita.id) == 0

    def test_reserve_missing_product(self, db_session):
        with pytest.raises(NotFoundError):
            inventory_service.try_reserve(9999, 1)

    def test_reserve_rejects_non_positive(self, db_session, margherita):
        with pytest.raises(ValidationError):
            inventory_service.try_reserve(margherita.id, 0)


class TestAdminStock:

    def test_set_within_max(self, db_session):
        product = make_product(db_session, inventory=2, max_inventory=10)
        inventory_service.set_inventory(product.id, 10)
        db_session.commit()
        assert _stock(db_session, product.id) == 10

    def test_set_above_max_rejected(self, db_session):
        product = make_product(db_session, inventory=2, max_inventory=10)
        with pytest.raises(ValidationError):
            inventory_service.set_inventory(product.id, 11)
        db_session.rollback()
        assert _stock(db_session, product.id) == 2

    def test_set_negative_rejected(self, db_session, margherita):
        with pytest.raises(ValidationError):
            inventory_service.set_inventory(margherita.id, -1)

    def test_version_bumped_on_write(self, db_session, margherita):
        before = margherita.version_id
        inventory_service.try_reserve(margherita.id, 1)
        db_session.commit()
        db_session.expire_all()
        assert db_session.get(Product, margherita.id).version_id == before + 1


class TestDailyReset:

    def test_reset_restores_max_and_counts_modified(self, db_session):
        low = make_product(db_session, name="Low", inventory=2, max_inventory=50)
        empty = make_product(db_session, name="Empty", inventory=0, max_inventory=20)
        full = make_product(db_session, name="Full", inventory=30, max_inventory=30)

        assert inventory_service.reset_all_to_max() == 2

        assert _stock(db_session, low.id) == 50
        assert _stock(db_session, empty.id) == 20
        assert _stock(db_session, full.id) == 30

    def test_reset_is_idempotent(self, db_session):
        make_product(db_session, inventory=1, max_inventory=10)
        assert inventory_service.reset_all_to_max() == 1
        assert inventory_service.reset_all_to_max() == 0

    def test_reset_on_empty_menu(self, db_session):
        assert inventory_service.reset_all_to_max() == 0

    def test_snapshot(self, db_session):
        product = make_product(db_session, inventory=3, max_inventory=8)
        assert inventory_service.inventory_snapshot() == [
            {"id": product.id, "name": "Margherita", "inventory": 3, "max_inventory": 8}
        ]
