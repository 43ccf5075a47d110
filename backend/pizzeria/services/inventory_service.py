# Overview: Service-layer operations for inventory; the only code that writes Product.inventory.

"""
Inventory invariants (authoritative)

- 0 <= inventory at all times; inventory <= max_inventory after every write
  made through this module.
- Every mutation is one conditional UPDATE statement. There is no
  read-modify-write on ORM objects, so checkout, admin edits and the daily
  reset cannot lose each other's updates.
- try_reserve() is the single correctness-critical path for taking stock.
  Two concurrent reservations on the same product can never both succeed
  beyond what is available: the WHERE clause re-checks stock atomically.
- The daily reset and checkout are ordered only by last write wins. A
  reservation committed just before a reset is overwritten by it.
"""

from __future__ import annotations

from flask import current_app
from sqlalchemy import update

from ..extensions import db
from ..errors import NotFoundError, InsufficientInventoryError
from ..models import Product
from ..validation import ValidationError


def _conditional_update(stmt) -> int:
    result = db.session.execute(stmt.execution_options(synchronize_session=False))
    return result.rowcount


def get_available(product_id: int) -> int:
    inventory = db.session.query(Product.inventory).filter_by(id=product_id).scalar()
    if inventory is None:
        raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})
    return int(inventory)


def try_reserve(product_id: int, quantity: int) -> None:
    """
    Atomically take `quantity` units of a product.

    Runs inside the caller's transaction and does not commit. Raises
    InsufficientInventoryError (naming the product and the stock left) when
    the decrement would go negative, NotFoundError when the product is gone.
    """
    if quantity <= 0:
        raise ValidationError("quantity must be >= 1")

    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.inventory >= quantity)
        .values(inventory=Product.inventory - quantity, version_id=Product.version_id + 1)
    )
    if _conditional_update(stmt):
        return

    row = db.session.query(Product.name, Product.inventory).filter_by(id=product_id).first()
    if row is None:
        raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})

    current_app.logger.warning(
        "Reservation rejected for product %s: requested %s, available %s",
        product_id, quantity, row.inventory,
    )
    raise InsufficientInventoryError(
        f"Insufficient inventory for {row.name}. Available: {row.inventory}, Requested: {quantity}",
        details={
            "product_id": product_id,
            "name": row.name,
            "available": row.inventory,
            "requested": quantity,
        },
    )


def set_inventory(product_id: int, value: int) -> None:
    """
    Admin edit of on-hand stock. Only succeeds when 0 <= value <= max_inventory.
    Does not commit.
    """
    if value < 0:
        raise ValidationError("inventory must be >= 0")

    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.max_inventory >= value)
        .values(inventory=value, version_id=Product.version_id + 1)
    )
    if _conditional_update(stmt):
        return

    max_inventory = db.session.query(Product.max_inventory).filter_by(id=product_id).scalar()
    if max_inventory is None:
        raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})
    raise ValidationError(
        "inventory cannot exceed max_inventory",
        details={"product_id": product_id, "inventory": value, "max_inventory": max_inventory},
    )


def clamp_to_max(product_id: int) -> None:
    """Pull inventory down to max_inventory after the ceiling was lowered. Does not commit."""
    stmt = (
        update(Product)
        .where(Product.id == product_id, Product.inventory > Product.max_inventory)
        .values(inventory=Product.max_inventory, version_id=Product.version_id + 1)
    )
    _conditional_update(stmt)


def reset_all_to_max() -> int:
    """
    Restore every product's stock to its maximum in one bulk UPDATE and commit.

    Only rows that differ are touched, so the return value is the number of
    products actually modified and a repeat run returns 0.
    """
    stmt = (
        update(Product)
        .where(Product.inventory != Product.max_inventory)
        .values(inventory=Product.max_inventory, version_id=Product.version_id + 1)
    )
    try:
        modified = _conditional_update(stmt)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return modified


def inventory_snapshot() -> list[dict]:
    rows = (
        db.session.query(Product.id, Product.name, Product.inventory, Product.max_inventory)
        .order_by(Product.id.asc())
        .all()
    )
    return [
        {"id": r.id, "name": r.name, "inventory": r.inventory, "max_inventory": r.max_inventory}
        for r in rows
    ]
