# Overview: Flask API routes for reporting; read-only aggregations as JSON.

# backend/sigef/routes/reports.py
from flask import Blueprint, current_app, request

from ..services.analysis_service import analysis_input
from ..services.reporting_service import summary_report
from ..validation import ValidationError

reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


@reports_bp.get("/summary")
def summary_route():
    """Dashboard figures: totals, rankings and pending debts."""
    try:
        return summary_report()
    except Exception:
        current_app.logger.exception("Failed to build summary report")
        return {"error": "Internal server error"}, 500


@reports_bp.get("/analysis-input")
def analysis_input_route():
    """
    Collections plus pre-aggregated balance figures for the analysis flow.

    Query params:
    - currency: ISO 4217 code (optional, defaults to DEFAULT_CURRENCY)
    """
    try:
        return analysis_input(request.args.get("currency"))
    except ValidationError as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to build analysis input")
        return {"error": "Internal server error"}, 500
