# Overview: Flask API routes for full-data export and import (JSON backups).

# backend/sigef/routes/data.py
from flask import Blueprint, current_app, request

from ..services.backup_service import BackupError, export_data, import_data

data_bp = Blueprint("data", __name__, url_prefix="/api/data")


@data_bp.get("/export")
def export_route():
    try:
        return export_data()
    except Exception:
        current_app.logger.exception("Failed to export data")
        return {"error": "Internal server error"}, 500


@data_bp.post("/import")
def import_route():
    """Replace all products, sales and debts with the posted backup document."""
    document = request.get_json(silent=True)
    if document is None:
        return {"error": "Invalid JSON file. Please check the file content."}, 400

    try:
        counts = import_data(document)
    except BackupError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to import data")
        return {"error": "Internal server error"}, 500

    return {"ok": True, "imported": counts}, 200
