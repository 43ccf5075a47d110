# Overview: Threaded checkout tests against a file-backed SQLite database.

"""
Concurrency tests for checkout and order status updates.

N customers race to buy the last I units of one product. Exactly min(N, I)
checkouts must succeed, stock must end at max(I - N, 0), and every order
number must be unique.

Run with:
    python -m pytest backend/tests/test_concurrency.py
"""
import os
import tempfile
import threading
import unittest

from pizzeria import create_app
from pizzeria.extensions import db
from pizzeria.errors import InsufficientInventoryError, InvalidStatusError
from pizzeria.models import User, Address, Product, Cart, CartItem, Order
from pizzeria.services import order_service, inventory_service


class CheckoutConcurrencyTests(unittest.TestCase):
    CUSTOMERS = 6
    STOCK = 3

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        db_path = os.path.join(self.tmpdir.name, "concurrency.db")
        self.app = create_app({
            "TESTING": True,
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{db_path}",
            "INVENTORY_RESET_ENABLED": False,
        })

        with self.app.app_context():
            db.drop_all()
            db.create_all()

            product = Product(
                name="Last Pizzas",
                category="pizza",
                price_cents=19900,
                inventory=self.STOCK,
                max_inventory=10,
            )
            db.session.add(product)
            db.session.commit()
            self.product_id = product.id

            self.customers = []
            for i in range(self.CUSTOMERS):
                user = User(
                    name=f"Customer {i}",
                    email=f"c{i}@example.com",
                    phone="9000000000",
                    password_hash="dummy",
                    is_active=True,
                )
                user.addresses.append(Address(
                    type="home", street=f"{i} Main St", city="Pune",
                    state="Maharashtra", pincode="411001", is_default=True,
                ))
                db.session.add(user)
                db.session.flush()

                cart = Cart(user_id=user.id, total_amount_cents=19900)
                cart.items.append(CartItem(
                    product_id=self.product_id, quantity=1,
                    unit_price_cents=19900, line_total_cents=19900,
                ))
                db.session.add(cart)
                self.customers.append((user.id, user.addresses[0].id))
            db.session.commit()

    def tearDown(self):
        with self.app.app_context():
            db.session.remove()
            db.drop_all()
            db.session.remove()
            db.engine.dispose()
        self.tmpdir.cleanup()

    def _race(self, worker, args_list):
        results = []
        errors = []
        lock = threading.Lock()
        barrier = threading.Barrier(len(args_list))

        def run(*args):
            with self.app.app_context():
                try:
                    barrier.wait()
                    outcome = worker(*args)
                    with lock:
                        results.append(outcome)
                except Exception as exc:
                    with lock:
                        errors.append(exc)
                finally:
                    db.session.remove()

        threads = [threading.Thread(target=run, args=args) for args in args_list]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        return results, errors

    def test_no_oversell(self):
        def checkout(user_id, address_id):
            return order_service.place_order(user_id, address_id, "cod").order_number

        placed, errors = self._race(checkout, self.customers)

        expected = min(self.CUSTOMERS, self.STOCK)
        self.assertEqual(len(placed), expected)
        self.assertEqual(len(errors), self.CUSTOMERS - expected)
        for exc in errors:
            self.assertIsInstance(exc, InsufficientInventoryError)
        self.assertEqual(len(set(placed)), len(placed))

        with self.app.app_context():
            self.assertEqual(inventory_service.get_available(self.product_id), max(self.STOCK - self.CUSTOMERS, 0))
            self.assertEqual(db.session.query(Order).count(), expected)
            # Losers keep their carts
            remaining = db.session.query(CartItem).count()
            self.assertEqual(remaining, self.CUSTOMERS - expected)

    def test_concurrent_reserves_never_go_negative(self):
        def reserve(_):
            inventory_service.try_reserve(self.product_id, 1)
            db.session.commit()
            return True

        reserved, errors = self._race(reserve, [(i,) for i in range(8)])

        self.assertEqual(len(reserved), self.STOCK)
        self.assertTrue(all(isinstance(e, InsufficientInventoryError) for e in errors))
        with self.app.app_context():
            self.assertEqual(inventory_service.get_available(self.product_id), 0)

    def test_conflicting_status_updates_from_same_state(self):
        user_id, address_id = self.customers[0]
        with self.app.app_context():
            order_id = order_service.place_order(user_id, address_id, "cod").id
            for status in ("confirmed", "preparing", "out_for_delivery"):
                order_service.update_order_status(order_id, status)

        def move(status):
            return order_service.update_order_status(order_id, status).order_status

        moved, errors = self._race(move, [("delivered",), ("cancelled",)])

        self.assertEqual(len(moved), 1)
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], InvalidStatusError)
        self.assertEqual(errors[0].details["from"], moved[0])
        with self.app.app_context():
            self.assertEqual(db.session.get(Order, order_id).order_status, moved[0])


if __name__ == "__main__":
    unittest.main()
