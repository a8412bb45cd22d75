# backend/purchasing/routes/system.py
"""
System health and version endpoints.

Provides health checks for the database and the timezone configuration,
plus version information for deployment debugging.
"""

import sys
import time
from flask import Blueprint, current_app
from ..extensions import db
from ..models import Item, User, PurchaseOrderHeader, PurchaseOrderDetail
from ..time_utils import get_timezone, to_utc_z, utcnow

system_bp = Blueprint("system", __name__, url_prefix="/api")

API_VERSION = "1.0.0"


def check_database_health() -> dict:
    """
    Check database connectivity and basic operations.

    Returns dict with status and details.
    """
    start_time = time.time()
    try:
        details = {
            "items": db.session.query(Item).count(),
            "users": db.session.query(User).count(),
            "purchase_orders": db.session.query(PurchaseOrderHeader).count(),
            "purchase_order_details": db.session.query(PurchaseOrderDetail).count(),
        }
        elapsed_ms = (time.time() - start_time) * 1000

        return {
            "status": "healthy",
            "latency_ms": round(elapsed_ms, 2),
            "details": details,
        }
    except Exception:
        elapsed_ms = (time.time() - start_time) * 1000
        current_app.logger.exception("Database health check failed")
        db.session.rollback()
        return {
            "status": "unhealthy",
            "latency_ms": round(elapsed_ms, 2),
            "error": "Database error"
        }


def check_timezone_health() -> dict:
    tz = get_timezone()
    return {
        "status": "healthy",
        "details": {
            "zone": tz.name,
            "display_name": tz.display_name(),
            "offset": tz.zone_offset(),
            "local_time": tz.format(utcnow()),
        }
    }


@system_bp.get("/health")
def health():
    """
    Health check endpoint.

    Returns:
    - 200: All systems healthy
    - 503: Database unreachable
    """
    start_time = time.time()

    database_health = check_database_health()
    timezone_health = check_timezone_health()

    if database_health["status"] == "unhealthy":
        overall_status = "unhealthy"
        http_status = 503
    else:
        overall_status = "healthy"
        http_status = 200

    total_elapsed_ms = (time.time() - start_time) * 1000

    response = {
        "status": overall_status,
        "timestamp": to_utc_z(utcnow()),
        "total_latency_ms": round(total_elapsed_ms, 2),
        "checks": {
            "database": database_health,
            "timezone": timezone_health,
        }
    }

    return response, http_status


@system_bp.get("/version")
def version():
    """
    Version endpoint for deployment debugging.

    Does NOT expose secret keys, database credentials or internal paths.
    """
    env = "production" if not current_app.debug else "development"

    return {
        "api_version": API_VERSION,
        "environment": env,
        "python_version": sys.version.split()[0],
        "server_time": to_utc_z(utcnow()),
        "timezone": get_timezone().name,
    }
