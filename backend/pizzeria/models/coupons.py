from __future__ import annotations

from ..extensions import db
from pizzeria.time_utils import to_utc_z


class Coupon(db.Model):
    """
    Order-level discount code.

    Codes are stored upper-case (normalized by validation on write and by
    coupon_service on lookup). discount_value is a whole percent for
    "percentage" coupons and minor units for "flat" coupons.
    max_discount_cents == 0 means uncapped.
    """
    __tablename__ = "coupons"
    __table_args__ = {"sqlite_autoincrement": True}

    id = db.Column(db.Integer, primary_key=True)
    code = db.Column(db.String(64), nullable=False, unique=True, index=True)
    description = db.Column(db.Text, nullable=False, default="")

    discount_type = db.Column(db.String(16), nullable=False)  # percentage, flat
    discount_value = db.Column(db.Integer, nullable=False)

    min_order_amount_cents = db.Column(db.Integer, nullable=False, default=0)
    max_discount_cents = db.Column(db.Integer, nullable=False, default=0)

    valid_from = db.Column(db.DateTime(timezone=True), nullable=False)
    valid_until = db.Column(db.DateTime(timezone=True), nullable=False)

    is_active = db.Column(db.Boolean, nullable=False, default=True, index=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now())
    updated_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=db.func.now(), onupdate=db.func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "code": self.code,
            "description": self.description,
            "discount_type": self.discount_type,
            "discount_value": self.discount_value,
            "min_order_amount_cents": self.min_order_amount_cents,
            "max_discount_cents": self.max_discount_cents,
            "valid_from": to_utc_z(self.valid_from),
            "valid_until": to_utc_z(self.valid_until),
            "is_active": self.is_active,
            "created_at": to_utc_z(self.created_at),
            "updated_at": to_utc_z(self.updated_at),
        }
