# Overview: Service-layer operations for orders; checkout workflow and status transitions.

"""
Order Service - checkout as one atomic unit

place_order() runs, inside a single write transaction:

1. lock and snapshot the cart lines (quantity + cached unit/line prices)
2. re-read stock for every line; any shortfall aborts the whole checkout
3. subtotal = sum of cached line totals (not re-priced from the catalog)
4. delivery charge below the free-delivery threshold
5. optional coupon; a coupon that does not apply is ignored, not an error
6. total = subtotal + delivery - discount
7. reserve stock per line through inventory_service.try_reserve
8. create the order with a fresh sequence number and by-value copies
9. empty the cart
10. commit; any exception rolls back 7-9 together with the order insert

No retries on domain errors: a failed checkout surfaces to the caller, who
may resubmit.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from flask import current_app

from ..extensions import db
from ..errors import NotFoundError, InsufficientInventoryError, InvalidStatusError
from ..models import Cart, Order, OrderItem, Product, ORDER_STATUSES, PAYMENT_METHODS
from ..validation import ValidationError
from pizzeria.time_utils import utcnow
from . import coupon_service, inventory_service, user_service
from .concurrency import atomic, lock_for_update
from .document_service import next_document_number


ORDER_NUMBER_PREFIX = "ORD"

# Legal next states; "delivered" and "cancelled" are terminal
ORDER_TRANSITIONS = {
    "placed": ("confirmed", "cancelled"),
    "confirmed": ("preparing", "cancelled"),
    "preparing": ("out_for_delivery", "cancelled"),
    "out_for_delivery": ("delivered", "cancelled"),
    "delivered": (),
    "cancelled": (),
}


def compute_delivery_charge(subtotal_cents: int) -> int:
    threshold = current_app.config["FREE_DELIVERY_THRESHOLD_CENTS"]
    if subtotal_cents < threshold:
        return current_app.config["DELIVERY_CHARGE_CENTS"]
    return 0


def _coupon_discount(coupon_code: str | None, subtotal_cents: int, now: datetime) -> tuple[int, str | None]:
    if not coupon_code:
        return 0, None
    try:
        evaluation = coupon_service.evaluate(coupon_code, subtotal_cents, now)
    except coupon_service.CouponNotApplicableError as e:
        current_app.logger.warning("Coupon %r ignored at checkout: %s", coupon_code, e)
        return 0, None
    return evaluation.discount_cents, evaluation.code


def _check_stock(product_id: int, quantity: int) -> Product:
    product = lock_for_update(db.session.query(Product).filter_by(id=product_id)).first()
    if product is None:
        raise NotFoundError(f"Product {product_id} not found", details={"product_id": product_id})
    if product.inventory < quantity:
        raise InsufficientInventoryError(
            f"Insufficient inventory for {product.name}. "
            f"Available: {product.inventory}, Requested: {quantity}",
            details={
                "product_id": product.id,
                "name": product.name,
                "available": product.inventory,
                "requested": quantity,
            },
        )
    return product


def place_order(
    user_id: int,
    address_id: int | None,
    payment_method: str | None,
    coupon_code: str | None = None,
    now: datetime | None = None,
) -> Order:
    """
    Turn the user's cart into an order.

    Raises:
        ValidationError: missing address/payment method, unknown payment method, empty cart
        NotFoundError: address or a carted product no longer exists
        InsufficientInventoryError: a line asks for more than is in stock
    """
    if not address_id or not payment_method:
        raise ValidationError("Address and payment method are required")
    if payment_method not in PAYMENT_METHODS:
        raise ValidationError(
            f"payment_method must be one of: {', '.join(PAYMENT_METHODS)}",
            details={"payment_method": payment_method},
        )

    def _op() -> Order:
        created_at = now or utcnow()

        cart = lock_for_update(db.session.query(Cart).filter_by(user_id=user_id)).first()
        if cart is None or not cart.items:
            raise ValidationError("Cart is empty")

        address = user_service.get_address(user_id, address_id)

        lines = [
            (item.product_id, item.quantity, item.unit_price_cents, item.line_total_cents)
            for item in cart.items
        ]

        names = {}
        for product_id, quantity, _, _ in lines:
            names[product_id] = _check_stock(product_id, quantity).name

        subtotal = sum(line_total for _, _, _, line_total in lines)
        delivery_charge = compute_delivery_charge(subtotal)
        discount, applied_code = _coupon_discount(coupon_code, subtotal, created_at)
        # A flat coupon may exceed the bill; the order is then free, never negative
        discount = min(discount, subtotal + delivery_charge)
        total = subtotal + delivery_charge - discount

        for product_id, quantity, _, _ in lines:
            inventory_service.try_reserve(product_id, quantity)

        order = Order(
            order_number=next_document_number(document_type="ORDER", prefix=ORDER_NUMBER_PREFIX),
            user_id=user_id,
            delivery_type=address.type,
            delivery_street=address.street,
            delivery_city=address.city,
            delivery_state=address.state,
            delivery_pincode=address.pincode,
            delivery_landmark=address.landmark,
            payment_method=payment_method,
            payment_status="paid" if payment_method == "online" else "pending",
            order_status="placed",
            subtotal_cents=subtotal,
            delivery_charge_cents=delivery_charge,
            discount_cents=discount,
            total_amount_cents=total,
            coupon_applied=applied_code,
            estimated_delivery_at=created_at + timedelta(
                minutes=current_app.config["ESTIMATED_DELIVERY_MINUTES"]
            ),
            created_at=created_at,
        )
        for product_id, quantity, unit_price, line_total in lines:
            order.items.append(
                OrderItem(
                    product_id=product_id,
                    name=names[product_id],
                    quantity=quantity,
                    unit_price_cents=unit_price,
                    line_total_cents=line_total,
                )
            )
        db.session.add(order)

        cart.items.clear()
        cart.total_amount_cents = 0

        db.session.flush()
        return order

    order = atomic(_op)
    current_app.logger.info(
        "Order %s placed for user %s: total %s", order.order_number, user_id, order.total_amount_cents
    )
    return order


def list_orders(user_id: int) -> list[Order]:
    return (
        db.session.query(Order)
        .filter_by(user_id=user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_all_orders() -> list[Order]:
    return db.session.query(Order).order_by(Order.created_at.desc(), Order.id.desc()).all()


def get_order(user_id: int, order_id: int) -> Order:
    order = db.session.query(Order).filter_by(id=order_id, user_id=user_id).first()
    if order is None:
        raise NotFoundError("Order not found", details={"order_id": order_id})
    return order


def get_order_by_number(user_id: int, order_number: str) -> Order:
    order = db.session.query(Order).filter_by(order_number=order_number, user_id=user_id).first()
    if order is None:
        raise NotFoundError("Order not found", details={"order_number": order_number})
    return order


def update_order_status(order_id: int, status: str | None) -> Order:
    """
    Move an order along placed -> confirmed -> preparing -> out_for_delivery
    -> delivered, or to cancelled from any non-terminal state.

    The current status is read under the write lock; concurrent updates
    from the same state are checked one after the other.
    """
    if status not in ORDER_STATUSES:
        raise InvalidStatusError("Invalid order status", details={"status": status})

    def _op() -> tuple[Order, str]:
        order = lock_for_update(db.session.query(Order).filter_by(id=order_id)).first()
        if order is None:
            raise NotFoundError("Order not found", details={"order_id": order_id})

        allowed = ORDER_TRANSITIONS[order.order_status]
        if status not in allowed:
            raise InvalidStatusError(
                f"Cannot move order from {order.order_status} to {status}",
                details={"from": order.order_status, "to": status, "allowed": list(allowed)},
            )

        previous = order.order_status
        order.order_status = status
        db.session.flush()
        return order, previous

    order, previous = atomic(_op)
    current_app.logger.info("Order %s moved from %s to %s", order.order_number, previous, status)
    return order
