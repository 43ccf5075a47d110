# backend/pizzeria/routes/system.py
"""
System health endpoint.

Reports database reachability and the state of the daily inventory reset
scheduler.
"""

import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Product
from pizzeria.time_utils import utcnow

system_bp = Blueprint("system", __name__)


def check_database_health() -> dict:
    start_time = time.time()
    try:
        product_count = db.session.query(Product).count()
        elapsed_ms = (time.time() - start_time) * 1000
        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": {"products": product_count},
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


def check_scheduler_health() -> dict:
    """A disabled scheduler is reported, not treated as a failure."""
    scheduler = current_app.extensions.get("inventory_reset_scheduler")
    if scheduler is None:
        return {"status": "disabled"}
    status = scheduler.status()
    status["status"] = "healthy" if status["running"] else "degraded"
    return status


@system_bp.get("/health")
def health():
    """
    Returns:
    - 200: database reachable (scheduler may be degraded or disabled)
    - 503: database unreachable
    """
    database_health = check_database_health()
    scheduler_health = check_scheduler_health()

    if database_health["status"] == "unhealthy":
        overall_status, http_status = "unhealthy", 503
    elif scheduler_health["status"] == "degraded":
        overall_status, http_status = "degraded", 200
    else:
        overall_status, http_status = "healthy", 200

    return {
        "status": overall_status,
        "timestamp": utcnow().isoformat() + "Z",
        "checks": {
            "database": database_health,
            "inventory_reset_scheduler": scheduler_health,
        },
    }, http_status
