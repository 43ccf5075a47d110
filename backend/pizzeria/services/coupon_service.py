# Overview: Service-layer operations for coupons; evaluation plus admin CRUD.

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy.exc import IntegrityError

from ..extensions import db
from ..errors import NotFoundError, StorefrontError
from ..models import Coupon
from ..validation import ConflictError
from pizzeria.time_utils import utcnow


class CouponNotApplicableError(StorefrontError):
    """Base for every reason a coupon cannot discount an order."""


class CouponNotFoundError(CouponNotApplicableError, NotFoundError):
    pass


class CouponNotYetValidError(CouponNotApplicableError):
    pass


class CouponExpiredError(CouponNotApplicableError):
    pass


class CouponBelowMinimumError(CouponNotApplicableError):
    pass


@dataclass(frozen=True)
class CouponEvaluation:
    code: str
    discount_cents: int


def normalize_code(code: str) -> str:
    return (code or "").strip().upper()


def get_active_by_code(code: str) -> Coupon:
    normalized = normalize_code(code)
    coupon = (
        db.session.query(Coupon)
        .filter_by(code=normalized, is_active=True)
        .first()
    )
    if coupon is None:
        raise CouponNotFoundError("Invalid coupon code", details={"code": normalized})
    return coupon


def check_window(coupon: Coupon, now: datetime) -> None:
    """Validity window is inclusive at both ends."""
    if now < coupon.valid_from:
        raise CouponNotYetValidError("Coupon is not yet valid", details={"code": coupon.code})
    if now > coupon.valid_until:
        raise CouponExpiredError("Coupon has expired", details={"code": coupon.code})


def compute_discount(coupon: Coupon, subtotal_cents: int) -> int:
    """
    Percentage: subtotal * value / 100, rounded half-up to a minor unit and
    capped at max_discount_cents when that is positive.
    Flat: the face value, uncapped and unchecked against the subtotal.
    """
    if coupon.discount_type == "percentage":
        discount = (subtotal_cents * coupon.discount_value + 50) // 100
        if coupon.max_discount_cents > 0:
            discount = min(discount, coupon.max_discount_cents)
        return discount
    return coupon.discount_value


def evaluate(code: str, subtotal_cents: int, now: datetime | None = None) -> CouponEvaluation:
    """
    Decide whether `code` discounts an order of `subtotal_cents` at `now`.

    Raises CouponNotFoundError, CouponNotYetValidError, CouponExpiredError
    or CouponBelowMinimumError; checkout treats all of them as "no discount".
    """
    now = now or utcnow()
    coupon = get_active_by_code(code)
    check_window(coupon, now)

    if subtotal_cents < coupon.min_order_amount_cents:
        raise CouponBelowMinimumError(
            f"Minimum order amount for {coupon.code} is {coupon.min_order_amount_cents}",
            details={
                "code": coupon.code,
                "min_order_amount_cents": coupon.min_order_amount_cents,
                "subtotal_cents": subtotal_cents,
            },
        )

    return CouponEvaluation(code=coupon.code, discount_cents=compute_discount(coupon, subtotal_cents))


def validate_code(code: str, subtotal_cents: int | None = None) -> dict:
    """
    Coupon preview for the storefront. Without a subtotal only existence and
    the validity window are checked.
    """
    now = utcnow()
    coupon = get_active_by_code(code)
    check_window(coupon, now)

    result = {"coupon": coupon.to_dict()}
    if subtotal_cents is not None:
        evaluation = evaluate(code, subtotal_cents, now)
        result["discount_cents"] = evaluation.discount_cents
    return result


def list_current() -> list[dict]:
    now = utcnow()
    coupons = (
        db.session.query(Coupon)
        .filter(
            Coupon.is_active.is_(True),
            Coupon.valid_from <= now,
            Coupon.valid_until >= now,
        )
        .order_by(Coupon.created_at.desc(), Coupon.id.desc())
        .all()
    )
    return [c.to_dict() for c in coupons]


def create_coupon(data: dict) -> dict:
    coupon = Coupon(
        code=normalize_code(data["code"]),
        description=data.get("description") or "",
        discount_type=data["discount_type"],
        discount_value=data["discount_value"],
        min_order_amount_cents=data.get("min_order_amount_cents") or 0,
        max_discount_cents=data.get("max_discount_cents") or 0,
        valid_from=data["valid_from"],
        valid_until=data["valid_until"],
        is_active=data.get("is_active", True),
    )
    db.session.add(coupon)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Coupon code {coupon.code} already exists")
    return coupon.to_dict()


def update_coupon(coupon_id: int, data: dict) -> dict:
    coupon = db.session.get(Coupon, coupon_id)
    if coupon is None:
        raise NotFoundError("Coupon not found", details={"coupon_id": coupon_id})

    for key in ('code', 'description', 'discount_type', 'discount_value', 'min_order_amount_cents',
                'max_discount_cents', 'valid_from', 'valid_until', 'is_active'):
        if key in data:
            setattr(coupon, key, data[key])

    if coupon.valid_until < coupon.valid_from:
        db.session.rollback()
        raise ConflictError("valid_until must not be earlier than valid_from")

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise ConflictError(f"Coupon code {data.get('code')} already exists")
    return coupon.to_dict()


def delete_coupon(coupon_id: int) -> None:
    coupon = db.session.get(Coupon, coupon_id)
    if coupon is None:
        raise NotFoundError("Coupon not found", details={"coupon_id": coupon_id})
    db.session.delete(coupon)
    db.session.commit()
