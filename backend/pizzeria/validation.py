from __future__ import annotations
from datetime import datetime
from pizzeria.time_utils import parse_iso_datetime

from dataclasses import dataclass
from typing import Any, Callable

from sqlalchemy import Boolean, Integer, String, Text, DateTime
from sqlalchemy.orm import DeclarativeMeta


# Maximum price: 9,999,999.99 (999,999,999 minor units)
MAX_PRICE_CENTS = 999_999_999

PRODUCT_CATEGORIES = ("pizza", "sides", "beverages", "desserts")
DISCOUNT_TYPES = ("percentage", "flat")


class ValidationError(ValueError):
    """400-level input problem."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ConflictError(ValueError):
    """409-level business rule conflict (e.g., duplicate coupon code)."""


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    What a client may write to one model through the catalog/coupon routes.

    - writable_fields: allowlist; anything else is rejected
    - required_on_create: fields a POST must carry
    - rules: cross-field checks run on the coerced patch
    """
    writable_fields: frozenset
    required_on_create: frozenset = frozenset()
    rules: Callable[[dict], None] | None = None


def require_int(value: Any, field: str, *, minimum: int | None = None) -> int:
    """
    Coerce a JSON number or numeric string to int.

    Bools, decimals and scientific notation are rejected. Integral floats
    (2.0) pass because JSON clients often send them.
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field} must be an integer")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f"{field} must be an integer, not a decimal")
        value = int(value)
    if isinstance(value, str):
        stripped = value.strip()
        if "e" in stripped.lower() or "." in stripped:
            raise ValidationError(f"{field} must be a plain integer")
        try:
            value = int(stripped)
        except ValueError:
            raise ValidationError(f"{field} must be an integer")
    if not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if minimum is not None and value < minimum:
        raise ValidationError(f"{field} must be >= {minimum}")
    return value


def optional_code(value: Any, field: str) -> str | None:
    """A code-like string field that may be omitted; blank counts as omitted."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value.strip() or None


def _coerce_column(col, value: Any):
    coltype = col.type

    # Every writable integer column holds money or stock, never negative
    if isinstance(coltype, Integer):
        return require_int(value, col.key, minimum=0)

    if isinstance(coltype, Boolean):
        if not isinstance(value, bool):
            raise ValidationError(f"{col.key} must be true or false")
        return value

    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                dt = None
            if dt is not None:
                return dt
        raise ValidationError(f"{col.key} must be an ISO-8601 datetime")

    if isinstance(coltype, (String, Text)):
        if not isinstance(value, str):
            raise ValidationError(f"{col.key} must be a string")
        value = value.strip()
        if value == "" and not col.nullable:
            raise ValidationError(f"{col.key} cannot be blank")
        if isinstance(coltype, String) and coltype.length and len(value) > coltype.length:
            raise ValidationError(f"{col.key} exceeds max length {coltype.length}")
        return value

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Turn a product or coupon JSON body into a patch of model attributes.

    Keys are checked against the policy allowlist, values are coerced from
    the column types, then the policy's rules run on the result.
    partial=False is create (required fields enforced), partial=True is edit.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = {c.key: c for c in model.__mapper__.columns}

    patch: dict = {}
    for k, raw in payload.items():
        if k not in policy.writable_fields or k not in cols:
            raise ValidationError(f"Field not allowed: {k}")
        col = cols[k]
        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue
        patch[k] = _coerce_column(col, raw)

    if policy.rules is not None:
        policy.rules(patch)
    return patch


def product_rules(patch: dict) -> None:
    if "category" in patch and patch["category"] not in PRODUCT_CATEGORIES:
        raise ValidationError(f"category must be one of: {', '.join(PRODUCT_CATEGORIES)}")

    if patch.get("price_cents") is not None and patch["price_cents"] > MAX_PRICE_CENTS:
        raise ValidationError(f"price_cents cannot exceed {MAX_PRICE_CENTS}")

    # Against the stored maximum when only one side is sent; see catalog_service
    inventory = patch.get("inventory")
    max_inventory = patch.get("max_inventory")
    if inventory is not None and max_inventory is not None and inventory > max_inventory:
        raise ValidationError("inventory cannot exceed max_inventory")


def coupon_rules(patch: dict) -> None:
    if patch.get("code") is not None:
        patch["code"] = patch["code"].upper()

    if "discount_type" in patch and patch["discount_type"] not in DISCOUNT_TYPES:
        raise ValidationError(f"discount_type must be one of: {', '.join(DISCOUNT_TYPES)}")

    if patch.get("discount_type") == "percentage" and (patch.get("discount_value") or 0) > 100:
        raise ValidationError("percentage discount_value cannot exceed 100")

    valid_from = patch.get("valid_from")
    valid_until = patch.get("valid_until")
    if valid_from is not None and valid_until is not None and valid_until < valid_from:
        raise ValidationError("valid_until must not be earlier than valid_from")
