# Overview: Service-layer operations for the per-user cart aggregate.

"""
Cart Service

Every mutation ends with recompute_total(): the cart total is rebuilt from
the line totals, never adjusted incrementally. Stock checks here are
advisory (stock can move before checkout); order_service re-checks and
reserves atomically.

Concurrent edits of one user's cart from several tabs are last write wins.
"""

from __future__ import annotations

from ..extensions import db
from ..errors import NotFoundError, InsufficientInventoryError
from ..models import Cart, CartItem, Product
from ..validation import ValidationError


def get_cart(user_id: int) -> Cart | None:
    return db.session.query(Cart).filter_by(user_id=user_id).first()


def cart_to_dict(cart: Cart | None) -> dict:
    if cart is None:
        return {"items": [], "total_amount_cents": 0}
    return cart.to_dict()


def get_or_create_cart(user_id: int) -> Cart:
    cart = get_cart(user_id)
    if cart is None:
        cart = Cart(user_id=user_id, total_amount_cents=0)
        db.session.add(cart)
        db.session.flush()
    return cart


def recompute_total(cart: Cart) -> int:
    cart.total_amount_cents = sum(item.line_total_cents for item in cart.items)
    return cart.total_amount_cents


def _commit(cart: Cart) -> Cart:
    try:
        recompute_total(cart)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return cart


def _load_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found", details={"product_id": product_id})
    return product


def _insufficient(product: Product, requested: int, message: str) -> InsufficientInventoryError:
    return InsufficientInventoryError(
        message,
        details={
            "product_id": product.id,
            "name": product.name,
            "available": product.inventory,
            "requested": requested,
        },
    )


def _find_item(cart: Cart | None, item_id: int) -> CartItem:
    if cart is None:
        raise NotFoundError("Cart not found")
    for item in cart.items:
        if item.id == item_id:
            return item
    raise NotFoundError("Item not found in cart", details={"item_id": item_id})


def add_item(user_id: int, product_id: int, quantity: int) -> Cart:
    """
    Add a product, or top up its existing line.

    The cumulative quantity on the line is what gets checked against stock.
    """
    if quantity < 1:
        raise ValidationError("quantity must be >= 1")

    product = _load_product(product_id)
    if not product.is_available:
        raise ValidationError("Product is not available", details={"product_id": product_id})

    if product.inventory < quantity:
        raise _insufficient(product, quantity, f"Only {product.inventory} items available in stock")

    cart = get_or_create_cart(user_id)
    existing = next((item for item in cart.items if item.product_id == product_id), None)

    if existing is not None:
        new_quantity = existing.quantity + quantity
        if new_quantity > product.inventory:
            raise _insufficient(
                product,
                new_quantity,
                f"Cannot add more items. Only {product.inventory} available in stock",
            )
        existing.quantity = new_quantity
        existing.unit_price_cents = product.price_cents
        existing.line_total_cents = product.price_cents * new_quantity
    else:
        cart.items.append(
            CartItem(
                product_id=product_id,
                quantity=quantity,
                unit_price_cents=product.price_cents,
                line_total_cents=product.price_cents * quantity,
            )
        )

    return _commit(cart)


def set_item_quantity(user_id: int, item_id: int, quantity: int) -> Cart:
    """Set a line's quantity; zero or negative removes the line."""
    cart = get_cart(user_id)
    item = _find_item(cart, item_id)
    product = _load_product(item.product_id)

    if quantity > product.inventory:
        raise _insufficient(product, quantity, f"Only {product.inventory} items available in stock")

    if quantity <= 0:
        cart.items.remove(item)
    else:
        item.quantity = quantity
        item.unit_price_cents = product.price_cents
        item.line_total_cents = product.price_cents * quantity

    return _commit(cart)


def remove_item(user_id: int, item_id: int) -> Cart:
    cart = get_cart(user_id)
    item = _find_item(cart, item_id)
    cart.items.remove(item)
    return _commit(cart)


def clear_cart(user_id: int) -> bool:
    """Empty the cart. Returns False when the user never had one."""
    cart = get_cart(user_id)
    if cart is None:
        return False
    cart.items.clear()
    _commit(cart)
    return True


def drop_product_lines(product_id: int) -> None:
    """Remove a product from every cart and refresh those totals. Does not commit."""
    items = db.session.query(CartItem).filter_by(product_id=product_id).all()
    carts = {item.cart for item in items}
    for item in items:
        item.cart.items.remove(item)
    for cart in carts:
        recompute_total(cart)
