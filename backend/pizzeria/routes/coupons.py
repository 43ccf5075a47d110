# Overview: Flask API routes for coupons; preview for shoppers and CRUD for staff.

# backend/pizzeria/routes/coupons.py
from flask import Blueprint, request, jsonify, current_app

from ..errors import NotFoundError
from ..models import Coupon
from ..services import coupon_service
from ..validation import (
    ModelValidationPolicy,
    validate_payload,
    coupon_rules,
    require_int,
    optional_code,
    ValidationError,
    ConflictError,
)
from ..decorators import require_auth
from ._responses import error_response

COUPON_POLICY = ModelValidationPolicy(
    writable_fields=frozenset({
        "code", "description", "discount_type", "discount_value",
        "min_order_amount_cents", "max_discount_cents",
        "valid_from", "valid_until", "is_active",
    }),
    required_on_create=frozenset({"code", "discount_type", "discount_value", "valid_from", "valid_until"}),
    rules=coupon_rules,
)

coupons_bp = Blueprint("coupons", __name__, url_prefix="/api/coupons")


@coupons_bp.post("/validate")
@require_auth
def validate_coupon_route():
    """
    Preview a coupon.

    Request body:
    {
        "code": str,
        "subtotal_cents": int (optional; when given the discount is computed)
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        code = optional_code(data.get("code"), "code")
        if code is None:
            return jsonify({"error": "code is required"}), 400

        subtotal = data.get("subtotal_cents")
        if subtotal is not None:
            subtotal = require_int(subtotal, "subtotal_cents", minimum=0)
        return jsonify(coupon_service.validate_code(code, subtotal)), 200

    except coupon_service.CouponNotFoundError as e:
        return error_response(e, 404)
    except (coupon_service.CouponNotApplicableError, ValidationError) as e:
        return error_response(e, 400)
    except Exception:
        current_app.logger.exception("Failed to validate coupon")
        return jsonify({"error": "Internal server error"}), 500


@coupons_bp.get("")
def list_coupons_route():
    """Active coupons whose validity window contains now."""
    return jsonify({"coupons": coupon_service.list_current()}), 200


@coupons_bp.post("")
@require_auth
def create_coupon_route():
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Coupon, payload=payload, policy=COUPON_POLICY, partial=False)
        created = coupon_service.create_coupon(patch)
    except ValidationError as e:
        return error_response(e, 400)
    except ConflictError as e:
        return error_response(e, 409)
    except Exception:
        current_app.logger.exception("Failed to create coupon")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"coupon": created}), 201


@coupons_bp.put("/<int:coupon_id>")
@require_auth
def update_coupon_route(coupon_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        patch = validate_payload(model=Coupon, payload=payload, policy=COUPON_POLICY, partial=True)
        updated = coupon_service.update_coupon(coupon_id, patch)
    except ValidationError as e:
        return error_response(e, 400)
    except NotFoundError as e:
        return error_response(e, 404)
    except ConflictError as e:
        return error_response(e, 409)
    except Exception:
        current_app.logger.exception("Failed to update coupon")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"coupon": updated}), 200


@coupons_bp.delete("/<int:coupon_id>")
@require_auth
def delete_coupon_route(coupon_id: int):
    try:
        coupon_service.delete_coupon(coupon_id)
    except NotFoundError as e:
        return error_response(e, 404)
    except Exception:
        current_app.logger.exception("Failed to delete coupon")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"message": "Coupon deleted"}), 200
