# Overview: Flask API routes for sales and losses; parses input and returns JSON responses.

# backend/sigef/routes/sales.py
"""Sales API routes. A loss is a sale with is_loss=true and a loss_reason."""

from flask import Blueprint, current_app, request

from ..models import Sale
from ..services import sales_service
from ..services.errors import SigefError
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_sale,
    validate_payload,
)
from . import domain_error_response

SALE_POLICY = ModelValidationPolicy(
    writable_fields={"product_id", "quantity_sold", "sale_value", "is_loss", "loss_reason"},
    required_on_create={"product_id", "quantity_sold"},
)

sales_bp = Blueprint("sales", __name__, url_prefix="/api/sales")


def _parse_bool_arg(name: str):
    raw = request.args.get(name)
    if raw is None or raw == "":
        return None
    lowered = raw.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    raise ValidationError(f"{name} must be true or false")


@sales_bp.get("")
def list_sales_route():
    """
    List sales and losses in creation order.

    Query params:
    - product_id: str (optional)
    - is_loss: true|false (optional)
    """
    try:
        is_loss = _parse_bool_arg("is_loss")
    except ValidationError as e:
        return {"error": str(e)}, 400
    return sales_service.list_sales(product_id=request.args.get("product_id"), is_loss=is_loss)


@sales_bp.post("")
def create_sale_route():
    """Record a sale or a loss and take its quantity out of stock."""
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Sale, payload=payload, policy=SALE_POLICY, partial=False)
        enforce_rules_sale(patch)
        sale = sales_service.record_sale(
            patch["product_id"],
            patch["quantity_sold"],
            sale_value=patch.get("sale_value"),
            is_loss=bool(patch.get("is_loss")),
            loss_reason=patch.get("loss_reason"),
        )
    except ValidationError as e:
        return {"error": str(e)}, 400
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to record sale")
        return {"error": "Internal server error"}, 500

    return sale.to_dict(), 201


@sales_bp.get("/<sale_id>")
def get_sale_route(sale_id: str):
    try:
        return sales_service.get_sale(sale_id).to_dict()
    except SigefError as e:
        return domain_error_response(e)


@sales_bp.delete("/<sale_id>")
def delete_sale_route(sale_id: str):
    """Delete a sale or loss and put its quantity back into stock."""
    try:
        deleted = sales_service.delete_sale(sale_id)
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete sale")
        return {"error": "Internal server error"}, 500

    return {"ok": True, "sale": deleted}, 200
