"""
Pytest fixtures for storefront backend tests.

Provides an in-memory database, a test client, and customer, menu,
address and coupon fixtures.
"""

from datetime import timedelta

import pytest
from pizzeria import create_app
from pizzeria.extensions import db
from pizzeria.models import Product, Coupon
from pizzeria.services import auth_service, user_service
from pizzeria.time_utils import utcnow


TEST_PASSWORD = "secret123"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'INVENTORY_RESET_ENABLED': False,
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


def make_user(email: str, name: str = "Test Customer"):
    return auth_service.create_user(
        name=name,
        email=email,
        password=TEST_PASSWORD,
        phone="9876543210",
    )


def make_product(db_session, name="Margherita", price_cents=19900, inventory=5,
                 max_inventory=None, category="pizza", **kwargs):
    product = Product(
        name=name,
        description=kwargs.pop("description", ""),
        category=category,
        price_cents=price_cents,
        inventory=inventory,
        max_inventory=inventory if max_inventory is None else max_inventory,
        **kwargs,
    )
    db_session.add(product)
    db_session.commit()
    return product


def make_coupon(db_session, code, discount_type="percentage", discount_value=50,
                min_order_amount_cents=0, max_discount_cents=0, **kwargs):
    now = utcnow()
    coupon = Coupon(
        code=code,
        description=kwargs.pop("description", ""),
        discount_type=discount_type,
        discount_value=discount_value,
        min_order_amount_cents=min_order_amount_cents,
        max_discount_cents=max_discount_cents,
        valid_from=kwargs.pop("valid_from", now - timedelta(days=1)),
        valid_until=kwargs.pop("valid_until", now + timedelta(days=30)),
        is_active=kwargs.pop("is_active", True),
    )
    db_session.add(coupon)
    db_session.commit()
    return coupon


def get_auth_token(client, email: str, password: str = TEST_PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def customer(db_session):
    return make_user("customer@example.com")


@pytest.fixture(scope='function')
def customer_headers(client, customer):
    return auth_headers(get_auth_token(client, customer.email))


@pytest.fixture(scope='function')
def other_customer(db_session):
    return make_user("other@example.com", name="Other Customer")


@pytest.fixture(scope='function')
def other_headers(client, other_customer):
    return auth_headers(get_auth_token(client, other_customer.email))


@pytest.fixture(scope='function')
def address(db_session, customer):
    user = user_service.add_address(customer.id, {
        "type": "home",
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
        "landmark": "Near the metro",
    })
    return user.addresses[0]


@pytest.fixture(scope='function')
def margherita(db_session):
    return make_product(db_session, name="Margherita", price_cents=19900, inventory=5)


@pytest.fixture(scope='function')
def mega50(db_session):
    return make_coupon(
        db_session,
        "MEGA50",
        discount_type="percentage",
        discount_value=50,
        min_order_amount_cents=50000,
        max_discount_cents=50000,
    )
