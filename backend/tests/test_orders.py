"""
Checkout and order lifecycle tests.

Verifies:
- Happy-path checkout: totals, stock decrement, empty cart, order number
- All-or-nothing: a failed checkout leaves stock and cart untouched
- Coupons that do not apply are ignored rather than failing checkout
- Status transitions follow the order state machine
"""

import re

import pytest

from pizzeria.models import Product, Order, Cart
from pizzeria.services import order_service
from conftest import make_product, make_coupon


def _add(client, headers, product_id, quantity):
    resp = client.post("/api/cart/add", headers=headers, json={"product_id": product_id, "quantity": quantity})
    assert resp.status_code == 200, resp.get_json()


def _checkout(client, headers, address_id, payment_method="cod", coupon_code=None):
    body = {"address_id": address_id, "payment_method": payment_method}
    if coupon_code:
        body["coupon_code"] = coupon_code
    return client.post("/api/orders", headers=headers, json=body)


# =============================================================================
# PLACE ORDER
# =============================================================================


class TestPlaceOrder:

    def test_cod_checkout_end_to_end(self, client, db_session, customer, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 2)

        resp = _checkout(client, customer_headers, address.id)
        assert resp.status_code == 201
        order = resp.get_json()["order"]

        assert order["subtotal_cents"] == 39800
        assert order["delivery_charge_cents"] == 4000
        assert order["discount_cents"] == 0
        assert order["total_amount_cents"] == 43800
        assert order["order_status"] == "placed"
        assert order["payment_status"] == "pending"
        assert re.fullmatch(r"ORD\d{8}", order["order_number"])
        assert order["items"][0]["name"] == "Margherita"
        assert order["items"][0]["unit_price_cents"] == 19900
        assert order["delivery_address"]["city"] == "Bengaluru"

        db_session.expire_all()
        assert db_session.get(Product, margherita.id).inventory == 3
        cart = db_session.query(Cart).filter_by(user_id=customer.id).one()
        assert cart.items == []
        assert cart.total_amount_cents == 0

    def test_online_payment_marked_paid(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        resp = _checkout(client, customer_headers, address.id, payment_method="online")
        assert resp.status_code == 201
        assert resp.get_json()["order"]["payment_status"] == "paid"

    def test_free_delivery_at_threshold(self, client, db_session, customer_headers, address):
        product = make_product(db_session, name="Party Box", price_cents=50000, inventory=3)
        _add(client, customer_headers, product.id, 1)
        order = _checkout(client, customer_headers, address.id).get_json()["order"]
        assert order["delivery_charge_cents"] == 0
        assert order["total_amount_cents"] == 50000

    def test_order_numbers_increase(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        first = _checkout(client, customer_headers, address.id).get_json()["order"]["order_number"]
        _add(client, customer_headers, margherita.id, 1)
        second = _checkout(client, customer_headers, address.id).get_json()["order"]["order_number"]
        assert int(second[3:]) == int(first[3:]) + 1

    def test_coupon_applied(self, client, db_session, customer_headers, address, mega50):
        product = make_product(db_session, name="Farmhouse", price_cents=29900, inventory=5)
        _add(client, customer_headers, product.id, 2)

        order = _checkout(client, customer_headers, address.id, coupon_code="mega50").get_json()["order"]
        assert order["subtotal_cents"] == 59800
        assert order["delivery_charge_cents"] == 0
        assert order["discount_cents"] == 29900
        assert order["total_amount_cents"] == 29900
        assert order["coupon_applied"] == "MEGA50"

    def test_coupon_below_minimum_is_ignored(self, client, customer_headers, address, margherita, mega50):
        _add(client, customer_headers, margherita.id, 1)

        resp = _checkout(client, customer_headers, address.id, coupon_code="MEGA50")
        assert resp.status_code == 201
        order = resp.get_json()["order"]
        assert order["discount_cents"] == 0
        assert order["coupon_applied"] is None
        assert order["total_amount_cents"] == 19900 + 4000

    def test_unknown_coupon_is_ignored(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        resp = _checkout(client, customer_headers, address.id, coupon_code="BOGUS")
        assert resp.status_code == 201
        assert resp.get_json()["order"]["discount_cents"] == 0

    def test_flat_coupon_never_makes_total_negative(self, client, db_session, customer_headers, address, margherita):
        make_coupon(db_session, "HUGE", discount_type="flat", discount_value=1000000)
        _add(client, customer_headers, margherita.id, 1)

        order = _checkout(client, customer_headers, address.id, coupon_code="HUGE").get_json()["order"]
        assert order["discount_cents"] == 19900 + 4000
        assert order["total_amount_cents"] == 0

    def test_empty_cart(self, client, customer_headers, address):
        resp = _checkout(client, customer_headers, address.id)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Cart is empty"

    def test_missing_address_or_payment(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        assert client.post("/api/orders", headers=customer_headers, json={"payment_method": "cod"}).status_code == 400
        assert client.post("/api/orders", headers=customer_headers, json={"address_id": address.id}).status_code == 400

    def test_unknown_payment_method(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        assert _checkout(client, customer_headers, address.id, payment_method="barter").status_code == 400

    def test_someone_elses_address(self, client, other_headers, address, margherita):
        _add(client, other_headers, margherita.id, 1)
        assert _checkout(client, other_headers, address.id).status_code == 404

    def test_malformed_address_id(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        for bad in ([address.id], {"id": address.id}, "home", 0):
            resp = client.post("/api/orders", headers=customer_headers, json={"address_id": bad, "payment_method": "cod"})
            assert resp.status_code == 400, bad

    def test_non_string_coupon_code(self, client, db_session, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        resp = client.post("/api/orders", headers=customer_headers, json={
            "address_id": address.id, "payment_method": "cod", "coupon_code": 50,
        })
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "coupon_code must be a string"

        db_session.expire_all()
        assert db_session.query(Order).count() == 0
        assert db_session.get(Product, margherita.id).inventory == 5


# =============================================================================
# ALL-OR-NOTHING
# =============================================================================


class TestCheckoutAtomicity:

    def test_insufficient_stock_rolls_back_everything(self, client, db_session, customer, customer_headers,
                                                       address, margherita):
        fries = make_product(db_session, name="Fries", category="sides", price_cents=8900, inventory=5)
        _add(client, customer_headers, margherita.id, 2)
        _add(client, customer_headers, fries.id, 4)

        # Stock drops after the items were carted
        db_session.query(Product).filter_by(id=fries.id).update({"inventory": 1})
        db_session.commit()

        resp = _checkout(client, customer_headers, address.id)
        assert resp.status_code == 400
        details = resp.get_json()["details"]
        assert details["name"] == "Fries"
        assert details["available"] == 1
        assert details["requested"] == 4

        db_session.expire_all()
        assert db_session.get(Product, margherita.id).inventory == 5
        assert db_session.get(Product, fries.id).inventory == 1
        assert db_session.query(Order).count() == 0
        cart = db_session.query(Cart).filter_by(user_id=customer.id).one()
        assert len(cart.items) == 2

    def test_failure_after_reservation_restores_stock(self, client, db_session, customer, customer_headers,
                                                      address, margherita, monkeypatch):
        _add(client, customer_headers, margherita.id, 2)

        def _boom(**kwargs):
            raise RuntimeError("sequence unavailable")

        monkeypatch.setattr(order_service, "next_document_number", _boom)

        resp = _checkout(client, customer_headers, address.id)
        assert resp.status_code == 500

        db_session.expire_all()
        assert db_session.get(Product, margherita.id).inventory == 5
        assert db_session.query(Order).count() == 0
        cart = db_session.query(Cart).filter_by(user_id=customer.id).one()
        assert cart.total_amount_cents == 39800


# =============================================================================
# READS AND STATUS
# =============================================================================


class TestOrderQueries:

    @pytest.fixture
    def placed(self, client, customer_headers, address, margherita):
        _add(client, customer_headers, margherita.id, 1)
        return _checkout(client, customer_headers, address.id).get_json()["order"]

    def test_list_and_get(self, client, customer_headers, placed):
        orders = client.get("/api/orders", headers=customer_headers).get_json()["orders"]
        assert [o["id"] for o in orders] == [placed["id"]]

        resp = client.get(f"/api/orders/{placed['id']}", headers=customer_headers)
        assert resp.status_code == 200

    def test_track_by_number(self, client, customer_headers, placed):
        resp = client.get(f"/api/orders/track/{placed['order_number']}", headers=customer_headers)
        assert resp.status_code == 200
        assert resp.get_json()["order"]["id"] == placed["id"]

    def test_other_user_cannot_read(self, client, other_headers, placed):
        assert client.get(f"/api/orders/{placed['id']}", headers=other_headers).status_code == 404
        assert client.get(f"/api/orders/track/{placed['order_number']}", headers=other_headers).status_code == 404

    def test_admin_list_includes_customer(self, client, other_headers, placed):
        orders = client.get("/api/orders/admin/all", headers=other_headers).get_json()["orders"]
        assert orders[0]["customer"]["email"] == "customer@example.com"

    def test_status_walk(self, client, customer_headers, placed):
        for status in ("confirmed", "preparing", "out_for_delivery", "delivered"):
            resp = client.put(f"/api/orders/{placed['id']}/status", headers=customer_headers, json={"status": status})
            assert resp.status_code == 200, status
            assert resp.get_json()["order"]["order_status"] == status

    def test_cannot_skip_or_leave_terminal(self, client, customer_headers, placed):
        resp = client.put(f"/api/orders/{placed['id']}/status", headers=customer_headers, json={"status": "delivered"})
        assert resp.status_code == 400
        assert resp.get_json()["details"]["from"] == "placed"

        client.put(f"/api/orders/{placed['id']}/status", headers=customer_headers, json={"status": "cancelled"})
        resp = client.put(f"/api/orders/{placed['id']}/status", headers=customer_headers, json={"status": "confirmed"})
        assert resp.status_code == 400

    def test_unknown_status(self, client, customer_headers, placed):
        resp = client.put(f"/api/orders/{placed['id']}/status", headers=customer_headers, json={"status": "eaten"})
        assert resp.status_code == 400

    def test_status_missing_order(self, client, customer_headers, db_session):
        resp = client.put("/api/orders/9999/status", headers=customer_headers, json={"status": "confirmed"})
        assert resp.status_code == 404
