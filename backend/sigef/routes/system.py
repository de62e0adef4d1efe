# backend/sigef/routes/system.py
"""
System health and database connectivity endpoints.
"""

import time

from flask import Blueprint, current_app
from sqlalchemy import text

from ..extensions import db
from ..time_utils import to_utc_z, utcnow

system_bp = Blueprint("system", __name__, url_prefix="/api/system")


def check_database_connection() -> bool:
    """Run SELECT 1; False on any database failure (logged)."""
    try:
        db.session.execute(text("SELECT 1"))
        return True
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Database connectivity check failed")
        return False


@system_bp.get("/health")
def health():
    start_time = time.time()
    connected = check_database_connection()
    elapsed_ms = (time.time() - start_time) * 1000
    status = "healthy" if connected else "unhealthy"
    return {
        "status": status,
        "timestamp": to_utc_z(utcnow()),
        "database": {"status": status, "latency_ms": round(elapsed_ms, 2)},
    }, (200 if connected else 503)


@system_bp.route("/check-db", methods=["GET", "POST"])
def check_db():
    return {"is_connected": check_database_connection()}
