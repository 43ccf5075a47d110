"""
Cart tests.

Verifies:
- Adding a product creates a line priced from the catalog
- Re-adding tops up the line and checks the cumulative quantity
- Setting quantity 0 or below removes the line
- The cart total always equals the sum of line totals
"""

from conftest import make_product


def _add(client, headers, product_id, quantity=1):
    return client.post("/api/cart/add", headers=headers, json={"product_id": product_id, "quantity": quantity})


class TestCart:

    def test_empty_cart_shape(self, client, customer_headers):
        resp = client.get("/api/cart", headers=customer_headers)
        assert resp.status_code == 200
        assert resp.get_json()["cart"] == {"items": [], "total_amount_cents": 0}

    def test_add_item(self, client, customer_headers, margherita):
        resp = _add(client, customer_headers, margherita.id, 2)
        assert resp.status_code == 200
        cart = resp.get_json()["cart"]
        assert len(cart["items"]) == 1
        line = cart["items"][0]
        assert line["quantity"] == 2
        assert line["unit_price_cents"] == 19900
        assert line["line_total_cents"] == 39800
        assert line["product"]["name"] == "Margherita"
        assert cart["total_amount_cents"] == 39800

    def test_readd_merges_line(self, client, customer_headers, margherita):
        _add(client, customer_headers, margherita.id, 2)
        resp = _add(client, customer_headers, margherita.id, 1)
        cart = resp.get_json()["cart"]
        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 3
        assert cart["total_amount_cents"] == 59700

    def test_cumulative_quantity_checked_against_stock(self, client, customer_headers, margherita):
        assert _add(client, customer_headers, margherita.id, 4).status_code == 200

        resp = _add(client, customer_headers, margherita.id, 2)
        assert resp.status_code == 400
        details = resp.get_json()["details"]
        assert details["available"] == 5
        assert details["requested"] == 6

    def test_add_more_than_stock(self, client, customer_headers, margherita):
        resp = _add(client, customer_headers, margherita.id, 6)
        assert resp.status_code == 400
        assert "5" in resp.get_json()["error"]

    def test_add_unknown_product(self, client, customer_headers):
        assert _add(client, customer_headers, 9999).status_code == 404

    def test_add_unavailable_product(self, client, customer_headers, db_session):
        product = make_product(db_session, name="Retired Pizza", is_available=False)
        assert _add(client, customer_headers, product.id).status_code == 400

    def test_add_rejects_zero_quantity(self, client, customer_headers, margherita):
        assert _add(client, customer_headers, margherita.id, 0).status_code == 400

    def test_update_quantity_and_total(self, client, customer_headers, db_session, margherita):
        fries = make_product(db_session, name="Fries", category="sides", price_cents=8900, inventory=10)
        _add(client, customer_headers, margherita.id, 1)
        cart = _add(client, customer_headers, fries.id, 1).get_json()["cart"]
        fries_line = next(i for i in cart["items"] if i["product_id"] == fries.id)

        resp = client.put(f"/api/cart/update/{fries_line['id']}", headers=customer_headers, json={"quantity": 3})
        assert resp.status_code == 200
        cart = resp.get_json()["cart"]
        assert cart["total_amount_cents"] == 19900 + 3 * 8900
        assert cart["total_amount_cents"] == sum(i["line_total_cents"] for i in cart["items"])

    def test_update_to_zero_removes_line(self, client, customer_headers, margherita):
        cart = _add(client, customer_headers, margherita.id, 2).get_json()["cart"]
        item_id = cart["items"][0]["id"]

        resp = client.put(f"/api/cart/update/{item_id}", headers=customer_headers, json={"quantity": 0})
        assert resp.status_code == 200
        cart = resp.get_json()["cart"]
        assert cart["items"] == []
        assert cart["total_amount_cents"] == 0

    def test_update_to_negative_removes_line(self, client, customer_headers, margherita):
        cart = _add(client, customer_headers, margherita.id, 2).get_json()["cart"]
        item_id = cart["items"][0]["id"]

        resp = client.put(f"/api/cart/update/{item_id}", headers=customer_headers, json={"quantity": -1})
        assert resp.status_code == 200
        cart = resp.get_json()["cart"]
        assert cart["items"] == []
        assert cart["total_amount_cents"] == 0

    def test_update_rejects_non_integer_quantity(self, client, customer_headers, margherita):
        cart = _add(client, customer_headers, margherita.id, 1).get_json()["cart"]
        item_id = cart["items"][0]["id"]
        resp = client.put(f"/api/cart/update/{item_id}", headers=customer_headers, json={"quantity": 1.5})
        assert resp.status_code == 400

    def test_update_beyond_stock(self, client, customer_headers, margherita):
        cart = _add(client, customer_headers, margherita.id, 1).get_json()["cart"]
        item_id = cart["items"][0]["id"]
        resp = client.put(f"/api/cart/update/{item_id}", headers=customer_headers, json={"quantity": 9})
        assert resp.status_code == 400

    def test_remove_line(self, client, customer_headers, margherita):
        cart = _add(client, customer_headers, margherita.id, 1).get_json()["cart"]
        item_id = cart["items"][0]["id"]

        resp = client.delete(f"/api/cart/remove/{item_id}", headers=customer_headers)
        assert resp.status_code == 200
        assert resp.get_json()["cart"]["items"] == []

        resp = client.delete(f"/api/cart/remove/{item_id}", headers=customer_headers)
        assert resp.status_code == 404

    def test_cannot_touch_another_users_line(self, client, customer_headers, other_headers, margherita):
        cart = _add(client, customer_headers, margherita.id, 1).get_json()["cart"]
        item_id = cart["items"][0]["id"]

        resp = client.put(f"/api/cart/update/{item_id}", headers=other_headers, json={"quantity": 2})
        assert resp.status_code == 404

    def test_clear(self, client, customer_headers, margherita):
        assert client.delete("/api/cart/clear", headers=customer_headers).status_code == 404

        _add(client, customer_headers, margherita.id, 2)
        assert client.delete("/api/cart/clear", headers=customer_headers).status_code == 200

        cart = client.get("/api/cart", headers=customer_headers).get_json()["cart"]
        assert cart["items"] == []
        assert cart["total_amount_cents"] == 0
