# Overview: Flask API routes for receivables and payables; parses input and returns JSON responses.

# backend/sigef/routes/debts.py
"""
Debt routes.

status and paid_at are derived by the service on every write; sending
either of them (or id/created_at) is rejected with 400.
"""

from flask import Blueprint, current_app, request

from ..models import Debt, DEBT_STATUSES, DEBT_TYPES
from ..services import debt_service
from ..services.errors import SigefError
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_debt,
    validate_payload,
)
from . import domain_error_response

DEBT_POLICY = ModelValidationPolicy(
    writable_fields=set(debt_service.DEBT_MUTABLE_FIELDS),
    required_on_create={"type", "description", "amount"},
)

debts_bp = Blueprint("debts", __name__, url_prefix="/api/debts")


@debts_bp.get("")
def list_debts_route():
    """
    Query params:
    - type: receivable|payable (optional)
    - status: pending|partially_paid|paid (optional)
    """
    debt_type = request.args.get("type") or None
    status = request.args.get("status") or None
    if debt_type is not None and debt_type not in DEBT_TYPES:
        return {"error": f"type must be one of: {', '.join(DEBT_TYPES)}"}, 400
    if status is not None and status not in DEBT_STATUSES:
        return {"error": f"status must be one of: {', '.join(DEBT_STATUSES)}"}, 400
    return debt_service.list_debts(type=debt_type, status=status)


@debts_bp.post("")
def create_debt_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Debt, payload=payload, policy=DEBT_POLICY, partial=False)
        if "amount_paid" in patch:
            raise ValidationError("amount_paid cannot be set on creation; register a payment instead")
        enforce_rules_debt(patch)
        debt = debt_service.create_debt(
            patch["type"],
            patch["description"],
            patch["amount"],
            due_date=patch.get("due_date"),
            contact_name=patch.get("contact_name"),
            related_sale_id=patch.get("related_sale_id"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to create debt")
        return {"error": "Internal server error"}, 500

    return debt.to_dict(), 201


@debts_bp.get("/<debt_id>")
def get_debt_route(debt_id: str):
    try:
        return debt_service.get_debt(debt_id).to_dict()
    except SigefError as e:
        return domain_error_response(e)


@debts_bp.put("/<debt_id>")
def update_debt_route(debt_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Debt, payload=payload, policy=DEBT_POLICY, partial=True)
        enforce_rules_debt(patch)
        debt = debt_service.update_debt(debt_id, patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update debt")
        return {"error": "Internal server error"}, 500

    return debt.to_dict(), 200


@debts_bp.post("/<debt_id>/payments")
def register_payment_route(debt_id: str):
    """Quick pay: body {"amount": <positive money>} is added to amount_paid."""
    payload = request.get_json(silent=True) or {}
    if "amount" not in payload:
        return {"error": "Missing required fields: amount"}, 400

    try:
        debt = debt_service.register_payment(debt_id, payload["amount"])
    except ValidationError as e:
        return {"error": str(e)}, 400
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to register payment")
        return {"error": "Internal server error"}, 500

    return debt.to_dict(), 200


@debts_bp.post("/<debt_id>/mark-paid")
def mark_paid_route(debt_id: str):
    try:
        debt = debt_service.mark_debt_paid(debt_id)
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to mark debt as paid")
        return {"error": "Internal server error"}, 500

    return debt.to_dict(), 200


@debts_bp.delete("/<debt_id>")
def delete_debt_route(debt_id: str):
    try:
        debt_service.delete_debt(debt_id)
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete debt")
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200
