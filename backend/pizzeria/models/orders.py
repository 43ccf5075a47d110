from __future__ import annotations

from ..extensions import db
from pizzeria.time_utils import to_utc_z


ORDER_STATUSES = ("placed", "confirmed", "preparing", "out_for_delivery", "delivered", "cancelled")
PAYMENT_METHODS = ("cod", "online")
PAYMENT_STATUSES = ("pending", "paid", "failed")


class Order(db.Model):
    """
    Immutable snapshot of a checkout.

    Line items and the delivery address are copied by value so later catalog
    or address-book edits cannot rewrite history. After creation only
    order_status moves, and only along the edges in order_service.
    """
    __tablename__ = "orders"
    __table_args__ = (
        db.Index("ix_orders_user_created", "user_id", "created_at"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)

    # Human-readable order number (e.g., "ORD00000042")
    order_number = db.Column(db.String(32), nullable=False, unique=True, index=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    # Delivery address copied by value
    delivery_type = db.Column(db.String(32), nullable=False)
    delivery_street = db.Column(db.String(255), nullable=False)
    delivery_city = db.Column(db.String(120), nullable=False)
    delivery_state = db.Column(db.String(120), nullable=False)
    delivery_pincode = db.Column(db.String(16), nullable=False)
    delivery_landmark = db.Column(db.String(255), nullable=True)

    payment_method = db.Column(db.String(16), nullable=False)  # cod, online
    payment_status = db.Column(db.String(16), nullable=False, default="pending")  # pending, paid, failed
    order_status = db.Column(db.String(32), nullable=False, default="placed", index=True)

    # Totals (all amounts in minor units)
    subtotal_cents = db.Column(db.Integer, nullable=False)
    delivery_charge_cents = db.Column(db.Integer, nullable=False, default=0)
    discount_cents = db.Column(db.Integer, nullable=False, default=0)
    total_amount_cents = db.Column(db.Integer, nullable=False)

    coupon_applied = db.Column(db.String(64), nullable=True)
    estimated_delivery_at = db.Column(db.DateTime(timezone=True), nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    items = db.relationship(
        "OrderItem",
        backref="order",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="OrderItem.id",
    )
    user = db.relationship("User")

    def delivery_address_dict(self) -> dict:
        return {
            "type": self.delivery_type,
            "street": self.delivery_street,
            "city": self.delivery_city,
            "state": self.delivery_state,
            "pincode": self.delivery_pincode,
            "landmark": self.delivery_landmark,
        }

    def to_dict(self, include_customer: bool = False) -> dict:
        data = {
            "id": self.id,
            "order_number": self.order_number,
            "user_id": self.user_id,
            "items": [item.to_dict() for item in self.items],
            "delivery_address": self.delivery_address_dict(),
            "payment_method": self.payment_method,
            "payment_status": self.payment_status,
            "order_status": self.order_status,
            "subtotal_cents": self.subtotal_cents,
            "delivery_charge_cents": self.delivery_charge_cents,
            "discount_cents": self.discount_cents,
            "total_amount_cents": self.total_amount_cents,
            "coupon_applied": self.coupon_applied,
            "estimated_delivery_at": to_utc_z(self.estimated_delivery_at),
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
        if include_customer and self.user is not None:
            data["customer"] = {
                "name": self.user.name,
                "email": self.user.email,
                "phone": self.user.phone,
            }
        return data


class OrderItem(db.Model):
    __tablename__ = "order_items"
    __table_args__ = (
        db.CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=False, index=True)

    # Frozen at purchase time
    name = db.Column(db.String(255), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    unit_price_cents = db.Column(db.Integer, nullable=False)
    line_total_cents = db.Column(db.Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "line_total_cents": self.line_total_cents,
        }


class DocumentSequence(db.Model):
    """
    Per-type document counters. The ORDER row is bumped inside the checkout
    transaction, giving unique, increasing order numbers.
    """
    __tablename__ = "document_sequences"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    document_type = db.Column(db.String(32), nullable=False, unique=True, index=True)
    next_number = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "document_type": self.document_type,
            "next_number": self.next_number,
            "updated_at": to_utc_z(self.updated_at),
        }
