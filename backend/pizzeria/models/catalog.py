from __future__ import annotations

from ..extensions import db
from pizzeria.time_utils import to_utc_z


class Product(db.Model):
    """
    Menu item with its on-hand stock.

    INVENTORY: `inventory` is the contended field. Checkout, admin edits and
    the daily reset all mutate it through single conditional UPDATE
    statements in inventory_service, never through read-modify-write on the
    ORM object.

    Products referenced by an order are never deleted, only marked
    unavailable; order lines keep their own name/price copies.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("inventory >= 0", name="ck_products_inventory_non_negative"),
        db.CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),
        db.Index("ix_products_category_available", "category", "is_available"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    category = db.Column(db.String(32), nullable=False, index=True)  # pizza, sides, beverages, desserts

    # Authoritative storage in minor units (frontend may only format for display)
    price_cents = db.Column(db.Integer, nullable=False)

    image = db.Column(db.String(512), nullable=False, default="")
    is_veg = db.Column(db.Boolean, nullable=False, default=True)
    is_available = db.Column(db.Boolean, nullable=False, default=True)

    inventory = db.Column(db.Integer, nullable=False, default=100)
    max_inventory = db.Column(db.Integer, nullable=False, default=100)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} inventory={self.inventory}/{self.max_inventory}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price_cents": self.price_cents,
            "image": self.image,
            "is_veg": self.is_veg,
            "is_available": self.is_available,
            "inventory": self.inventory,
            "max_inventory": self.max_inventory,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
