# Overview: Flask API routes for orders; checkout, history, tracking and status updates.

# backend/pizzeria/routes/orders.py
from flask import Blueprint, request, jsonify, current_app, g

from ..errors import NotFoundError, InsufficientInventoryError, InvalidStatusError
from ..services import order_service
from ..validation import ValidationError, require_int, optional_code
from ..decorators import require_auth
from ._responses import error_response


orders_bp = Blueprint("orders", __name__, url_prefix="/api/orders")


@orders_bp.post("")
@require_auth
def create_order_route():
    """
    Place an order from the caller's cart.

    Request body:
    {
        "address_id": int,
        "payment_method": "cod" | "online",
        "coupon_code": str (optional)
    }

    Stock is reserved for every line or for none; a shortfall returns 400
    naming the product and what is left.
    """
    data = request.get_json(silent=True) or {}
    try:
        address_id = data.get("address_id")
        if address_id is not None:
            address_id = require_int(address_id, "address_id", minimum=1)

        order = order_service.place_order(
            user_id=g.current_user.id,
            address_id=address_id,
            payment_method=data.get("payment_method"),
            coupon_code=optional_code(data.get("coupon_code"), "coupon_code"),
        )
        return jsonify({"order": order.to_dict(), "message": "Order placed successfully"}), 201

    except (ValidationError, InsufficientInventoryError) as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to place order")
        return jsonify({"error": "Internal server error"}), 500


@orders_bp.get("")
@require_auth
def list_orders_route():
    orders = order_service.list_orders(g.current_user.id)
    return jsonify({"orders": [o.to_dict() for o in orders]}), 200


@orders_bp.get("/admin/all")
@require_auth
def list_all_orders_route():
    """Every order, newest first, with customer contact details."""
    orders = order_service.list_all_orders()
    return jsonify({"orders": [o.to_dict(include_customer=True) for o in orders]}), 200


@orders_bp.get("/track/<order_number>")
@require_auth
def track_order_route(order_number: str):
    try:
        order = order_service.get_order_by_number(g.current_user.id, order_number)
    except NotFoundError as e:
        return error_response(e, 404)
    return jsonify({"order": order.to_dict()}), 200


@orders_bp.get("/<int:order_id>")
@require_auth
def get_order_route(order_id: int):
    try:
        order = order_service.get_order(g.current_user.id, order_id)
    except NotFoundError as e:
        return error_response(e, 404)
    return jsonify({"order": order.to_dict()}), 200


@orders_bp.put("/<int:order_id>/status")
@require_auth
def update_order_status_route(order_id: int):
    """
    Advance an order's status.

    Request body:
    {
        "status": "confirmed" | "preparing" | "out_for_delivery" | "delivered" | "cancelled"
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        order = order_service.update_order_status(order_id, data.get("status"))
        return jsonify({"order": order.to_dict(), "message": "Order status updated"}), 200

    except InvalidStatusError as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to update order status")
        return jsonify({"error": "Internal server error"}), 500
