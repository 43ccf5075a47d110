# backend/pizzeria/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/pizzeria.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///pizzeria.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Storefront origin allowed by CORS
    FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")

    # Checkout pricing (minor currency units)
    FREE_DELIVERY_THRESHOLD_CENTS = int(os.environ.get("FREE_DELIVERY_THRESHOLD_CENTS", "50000"))
    DELIVERY_CHARGE_CENTS = int(os.environ.get("DELIVERY_CHARGE_CENTS", "4000"))
    ESTIMATED_DELIVERY_MINUTES = int(os.environ.get("ESTIMATED_DELIVERY_MINUTES", "45"))

    # New products start full
    DEFAULT_MAX_INVENTORY = int(os.environ.get("DEFAULT_MAX_INVENTORY", "100"))

    # Daily inventory reset (server local time, HH:MM)
    INVENTORY_RESET_ENABLED = _env_bool("INVENTORY_RESET_ENABLED", True)
    INVENTORY_RESET_TIME = os.environ.get("INVENTORY_RESET_TIME", "23:59")
