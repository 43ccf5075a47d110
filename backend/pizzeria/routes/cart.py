# Overview: Flask API routes for the customer cart; parses input and returns JSON responses.

# backend/pizzeria/routes/cart.py
from flask import Blueprint, request, jsonify, current_app, g

from ..errors import NotFoundError, InsufficientInventoryError
from ..services import cart_service
from ..validation import ValidationError, require_int
from ..decorators import require_auth
from ._responses import error_response


cart_bp = Blueprint("cart", __name__, url_prefix="/api/cart")


def _cart_response(cart, status: int = 200, message: str | None = None):
    body = {"cart": cart_service.cart_to_dict(cart)}
    if message:
        body["message"] = message
    return jsonify(body), status


@cart_bp.get("")
@require_auth
def get_cart_route():
    """The caller's cart; an empty shape when none exists yet."""
    return _cart_response(cart_service.get_cart(g.current_user.id))


@cart_bp.post("/add")
@require_auth
def add_to_cart_route():
    """
    Add a product to the cart.

    Request body:
    {
        "product_id": int,
        "quantity": int (optional, default 1)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        product_id = require_int(data.get("product_id"), "product_id", minimum=1)
        quantity = require_int(data.get("quantity", 1), "quantity", minimum=1)

        cart = cart_service.add_item(g.current_user.id, product_id, quantity)
        return _cart_response(cart, message="Item added to cart")

    except (ValidationError, InsufficientInventoryError) as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to add item to cart")
        return jsonify({"error": "Internal server error"}), 500


@cart_bp.put("/update/<int:item_id>")
@require_auth
def update_cart_item_route(item_id: int):
    """Set a line's quantity. Zero or a negative quantity removes the line."""
    data = request.get_json(silent=True) or {}
    try:
        quantity = require_int(data.get("quantity"), "quantity")

        cart = cart_service.set_item_quantity(g.current_user.id, item_id, quantity)
        return _cart_response(cart, message="Cart updated")

    except (ValidationError, InsufficientInventoryError) as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to update cart item")
        return jsonify({"error": "Internal server error"}), 500


@cart_bp.delete("/remove/<int:item_id>")
@require_auth
def remove_cart_item_route(item_id: int):
    try:
        cart = cart_service.remove_item(g.current_user.id, item_id)
        return _cart_response(cart, message="Item removed from cart")
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to remove cart item")
        return jsonify({"error": "Internal server error"}), 500


@cart_bp.delete("/clear")
@require_auth
def clear_cart_route():
    try:
        if not cart_service.clear_cart(g.current_user.id):
            return jsonify({"error": "Cart not found"}), 404
        return jsonify({"message": "Cart cleared"}), 200
    except Exception:
        current_app.logger.exception("Failed to clear cart")
        return jsonify({"error": "Internal server error"}), 500
