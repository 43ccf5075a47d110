# Overview: Flask API routes for the customer profile and address book.

# backend/pizzeria/routes/users.py
from flask import Blueprint, request, jsonify, current_app, g

from ..errors import NotFoundError
from ..services import user_service
from ..validation import ValidationError
from ..decorators import require_auth
from ._responses import error_response


users_bp = Blueprint("users", __name__, url_prefix="/api/users")


@users_bp.get("/profile")
@require_auth
def get_profile_route():
    return jsonify({"user": g.current_user.to_dict()}), 200


@users_bp.put("/profile")
@require_auth
def update_profile_route():
    """Only name and phone are editable; email is the login identity."""
    data = request.get_json(silent=True) or {}
    try:
        user = user_service.update_profile(g.current_user.id, data)
        return jsonify({"user": user.to_dict(), "message": "Profile updated"}), 200
    except Exception:
        current_app.logger.exception("Failed to update profile")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.post("/address")
@require_auth
def add_address_route():
    data = request.get_json(silent=True) or {}
    try:
        user = user_service.add_address(g.current_user.id, data)
        return jsonify({"addresses": [a.to_dict() for a in user.addresses]}), 201
    except ValidationError as e:
        return error_response(e, 400)
    except Exception:
        current_app.logger.exception("Failed to add address")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.put("/address/<int:address_id>")
@require_auth
def update_address_route(address_id: int):
    data = request.get_json(silent=True) or {}
    try:
        user = user_service.update_address(g.current_user.id, address_id, data)
        return jsonify({"addresses": [a.to_dict() for a in user.addresses]}), 200
    except ValidationError as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to update address")
        return jsonify({"error": "Internal server error"}), 500


@users_bp.delete("/address/<int:address_id>")
@require_auth
def delete_address_route(address_id: int):
    try:
        user = user_service.delete_address(g.current_user.id, address_id)
        return jsonify({"addresses": [a.to_dict() for a in user.addresses]}), 200
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to delete address")
        return jsonify({"error": "Internal server error"}), 500
