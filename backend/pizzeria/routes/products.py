# Overview: Flask API routes for catalog operations; parses input and returns JSON responses.

# backend/pizzeria/routes/products.py
"""
Menu routes.

Reads are public. Writes require a logged-in user (there is no role model).
"""
from flask import Blueprint, request, current_app

from ..errors import NotFoundError
from ..models import Product
from ..services import catalog_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    product_rules,
    ValidationError,
)
from ..decorators import require_auth
from ._responses import error_response

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "name", "description", "category", "price_cents", "image",
        "is_veg", "is_available", "inventory", "max_inventory",
    }),
    required_on_create=frozenset({"name", "category", "price_cents"}),
    rules=product_rules,
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products, newest first.

    Query params:
    - category: pizza | sides | beverages | desserts (optional)
    - page: int (optional, 1-indexed, default 1)
    - limit: int (optional, default 50, max 100)
    """
    try:
        return catalog_service.list_products(
            category=request.args.get("category") or None,
            page=request.args.get("page", type=int),
            limit=request.args.get("limit", type=int),
        )
    except ValidationError as e:
        return error_response(e, 400)


@products_bp.get("/<int:product_id>")
def get_product(product_id: int):
    try:
        return {"product": catalog_service.get_product(product_id).to_dict()}
    except NotFoundError as e:
        return error_response(e, 404)


@products_bp.get("/category/<category>")
def list_products_by_category(category: str):
    try:
        return {"items": catalog_service.list_by_category(category)}
    except ValidationError as e:
        return error_response(e, 400)


@products_bp.post("")
@require_auth
def create_product_route():
    """Create a product; stock starts at max_inventory unless given."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        created = catalog_service.create_product(patch)
    except ValidationError as e:
        return error_response(e, 400)
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return {"product": created}, 201


@products_bp.put("/<int:product_id>")
@require_auth
def update_product_route(product_id: int):
    """Edit a product. Stock edits must stay within 0..max_inventory."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        updated = catalog_service.update_product(product_id, patch)
    except ValidationError as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return {"product": updated}, 200


@products_bp.delete("/<int:product_id>")
@require_auth
def delete_product_route(product_id: int):
    """Delete a product, or only deactivate it when orders reference it."""
    try:
        outcome = catalog_service.delete_product(product_id)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    return {"ok": True, "result": outcome}, 200
