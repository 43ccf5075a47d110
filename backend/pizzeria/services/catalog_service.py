# backend/pizzeria/services/catalog_service.py
"""
Catalog Service

Menu listing and admin edits. Stock changes are delegated to
inventory_service so every writer of Product.inventory shares one
conditional-update path.
"""
from __future__ import annotations

import math

from flask import current_app

from ..extensions import db
from ..errors import NotFoundError
from ..models import Product, OrderItem
from ..validation import ValidationError, PRODUCT_CATEGORIES
from . import cart_service, inventory_service
from .concurrency import run_with_retry

PRODUCT_MUTABLE_FIELDS = {
    "name", "description", "category", "price_cents", "image",
    "is_veg", "is_available", "max_inventory",
}

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def list_products(category: str | None = None, page: int | None = None, limit: int | None = None) -> dict:
    """
    Newest-first product listing with optional category filter and pagination.

    Returns dict with 'items' and a 'pagination' block.
    """
    if category and category not in PRODUCT_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(PRODUCT_CATEGORIES)}")

    page = page if page and page > 0 else 1
    limit = limit if limit and limit > 0 else DEFAULT_PAGE_LIMIT
    limit = min(limit, MAX_PAGE_LIMIT)

    q = db.session.query(Product)
    if category:
        q = q.filter(Product.category == category)

    total = q.count()
    items = (
        q.order_by(Product.created_at.desc(), Product.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )

    return {
        "items": [p.to_dict() for p in items],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "pages": math.ceil(total / limit) if total else 0,
        },
    }


def list_by_category(category: str) -> list[dict]:
    if category not in PRODUCT_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(PRODUCT_CATEGORIES)}")
    products = db.session.query(Product).filter_by(category=category).order_by(Product.id.asc()).all()
    return [p.to_dict() for p in products]


def get_product(product_id: int) -> Product:
    product = db.session.get(Product, product_id)
    if product is None:
        raise NotFoundError("Product not found", details={"product_id": product_id})
    return product


def create_product(patch: dict) -> dict:
    """New products start full unless the payload sets stock explicitly."""
    default_max = current_app.config.get("DEFAULT_MAX_INVENTORY", 100)
    max_inventory = patch.get("max_inventory")
    if max_inventory is None:
        max_inventory = default_max
    inventory = patch.get("inventory")
    if inventory is None:
        inventory = max_inventory
    if inventory > max_inventory:
        raise ValidationError("inventory cannot exceed max_inventory")

    product = Product(
        name=patch["name"],
        description=patch.get("description") or "",
        category=patch["category"],
        price_cents=patch["price_cents"],
        image=patch.get("image") or "",
        is_veg=patch.get("is_veg", True),
        is_available=patch.get("is_available", True),
        inventory=inventory,
        max_inventory=max_inventory,
    )
    db.session.add(product)
    db.session.commit()
    return product.to_dict()


def update_product(product_id: int, patch: dict) -> dict:
    """
    Apply an admin edit.

    Descriptive fields go through the ORM (optimistic version check); an
    inventory value goes through inventory_service.set_inventory; lowering
    max_inventory clamps stock down to the new ceiling.
    """
    def _op():
        try:
            product = get_product(product_id)
            apply_product_patch(product, patch)
            db.session.flush()

            if "inventory" in patch and patch["inventory"] is not None:
                inventory_service.set_inventory(product_id, patch["inventory"])
            if "max_inventory" in patch:
                inventory_service.clamp_to_max(product_id)

            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        return get_product(product_id).to_dict()

    return run_with_retry(_op)


def delete_product(product_id: int) -> str:
    """
    Remove a product from the menu.

    Returns "deleted" for a hard delete, "deactivated" when order history
    references the product and it is only marked unavailable.
    """
    product = get_product(product_id)
    referenced = db.session.query(OrderItem.id).filter_by(product_id=product_id).first() is not None

    if referenced:
        product.is_available = False
        db.session.commit()
        return "deactivated"

    cart_service.drop_product_lines(product_id)
    db.session.delete(product)
    db.session.commit()
    return "deleted"
