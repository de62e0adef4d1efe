# Overview: Flask API routes for products; parses input and returns JSON responses.

# backend/sigef/routes/products.py
from flask import Blueprint, current_app, request

from ..models import Product
from ..services.cost_service import cost_denominator, unit_cost
from ..services.errors import SigefError
from ..services.products_service import (
    create_product,
    delete_product,
    get_product,
    list_products as list_products_service,
    update_product,
)
from ..validation import (
    ModelValidationPolicy,
    ValidationError,
    enforce_rules_product,
    validate_payload,
)
from . import domain_error_response

PRODUCT_POLICY = ModelValidationPolicy(
    writable_fields={"name", "acquisition_value", "quantity", "initial_quantity"},
    required_on_create={"name", "acquisition_value", "quantity"},
)

products_bp = Blueprint("products", __name__, url_prefix="/api/products")


@products_bp.get("")
def list_products():
    """
    List products in creation order.

    Query params:
    - page: int (optional) - page number (1-indexed). If omitted, returns all items.
    - per_page: int (optional) - items per page (default 20, max 100)
    """
    page = request.args.get("page", type=int)
    per_page = request.args.get("per_page", type=int)
    return list_products_service(page=page, per_page=per_page)


@products_bp.post("")
def create_product_route():
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=False)
        enforce_rules_product(patch)
        created = create_product(patch=patch)
    except (ValidationError, ValueError) as e:
        return {"error": str(e)}, 400
    except Exception:
        current_app.logger.exception("Failed to create product")
        return {"error": "Internal server error"}, 500

    return created.to_dict(), 201


@products_bp.get("/<product_id>")
def get_product_route(product_id: str):
    try:
        return get_product(product_id).to_dict()
    except SigefError as e:
        return domain_error_response(e)


@products_bp.get("/<product_id>/unit-cost")
def unit_cost_route(product_id: str):
    """Unit cost used for COGS, with the error flag when it is not computable."""
    try:
        product = get_product(product_id)
    except SigefError as e:
        return domain_error_response(e)

    result = unit_cost(product)
    return {
        "product_id": product.id,
        "unit_cost": str(result.cost),
        "denominator": cost_denominator(product),
        "error": result.error,
    }


@products_bp.put("/<product_id>")
def update_product_route(product_id: str):
    payload = request.get_json(silent=True) or {}

    try:
        patch = validate_payload(model=Product, payload=payload, policy=PRODUCT_POLICY, partial=True)
        enforce_rules_product(patch)
        updated = update_product(product_id=product_id, patch=patch)
    except ValidationError as e:
        return {"error": str(e)}, 400
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to update product")
        return {"error": "Internal server error"}, 500

    return updated.to_dict(), 200


@products_bp.delete("/<product_id>")
def delete_product_route(product_id: str):
    """Delete a product together with its sales."""
    try:
        delete_product(product_id=product_id)
    except SigefError as e:
        return domain_error_response(e)
    except Exception:
        current_app.logger.exception("Failed to delete product")
        return {"error": "Internal server error"}, 500

    return {"ok": True}, 200
