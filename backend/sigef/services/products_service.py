# backend/sigef/services/products_service.py
"""
Products Service

- create_product defaults initial_quantity to quantity.
- update_product is an explicit correction: it may change name,
  acquisition_value and quantity, and never recomputes initial_quantity.
  initial_quantity only changes when the caller supplies it.
- delete_product hard-deletes the product together with its sales and
  clears related_sale_id on debts that pointed at those sales.
"""
from __future__ import annotations

from flask import current_app

from ..extensions import db
from ..models import Debt, Product, Sale
from .concurrency import atomic
from .inventory_service import load_product

PRODUCT_MUTABLE_FIELDS = {"name", "acquisition_value", "quantity", "initial_quantity"}


def apply_product_patch(p: Product, patch: dict) -> None:
    for k, v in patch.items():
        if k not in PRODUCT_MUTABLE_FIELDS:
            continue
        setattr(p, k, v)


def _base_query():
    return db.session.query(Product).order_by(Product.created_at.asc(), Product.id.asc())


def all_products() -> list[Product]:
    return _base_query().all()


def list_products(page: int | None = None, per_page: int | None = None) -> dict:
    """
    Product listing in creation order, with optional pagination.

    Args:
        page: Page number (1-indexed). If None, returns all items.
        per_page: Items per page (default 20, max 100)

    Returns:
        Dict with 'items', 'count', and pagination metadata if paginated.
    """
    base_query = _base_query()

    # If no pagination requested, return all items
    if page is None:
        products = base_query.all()
        return {
            "items": [p.to_dict() for p in products],
            "count": len(products),
        }

    # Pagination logic
    per_page = max(min(per_page or 20, 100), 1)  # Default 20, range 1-100
    page = max(page, 1)  # Ensure page >= 1

    total = base_query.count()
    total_pages = (total + per_page - 1) // per_page if total > 0 else 1

    products = base_query.offset((page - 1) * per_page).limit(per_page).all()

    return {
        "items": [p.to_dict() for p in products],
        "count": len(products),
        "pagination": {
            "page": page,
            "per_page": per_page,
            "total": total,
            "total_pages": total_pages,
            "has_next": page < total_pages,
            "has_prev": page > 1,
        },
    }


def get_product(product_id: str) -> Product:
    """Raises ProductNotFound."""
    return load_product(product_id)


def create_product(*, patch: dict) -> Product:
    """
    Create product using a validated patch dict.

    Requires name, acquisition_value and quantity. initial_quantity falls
    back to quantity when not supplied.
    """
    for field in ("name", "acquisition_value", "quantity"):
        if patch.get(field) is None:
            raise ValueError(f"{field} is required")

    def _op():
        p = Product()
        apply_product_patch(p, patch)
        if p.initial_quantity is None:
            p.initial_quantity = p.quantity
        db.session.add(p)
        db.session.flush()
        return p

    p = atomic(_op)
    current_app.logger.info("Created product id=%s name=%r quantity=%s", p.id, p.name, p.quantity)
    return p


def update_product(*, product_id: str, patch: dict) -> Product:
    """
    Apply an explicit correction to a product.

    Raises:
        ProductNotFound: If the product does not exist
    """
    def _op():
        p = load_product(product_id, lock=True)
        apply_product_patch(p, patch)
        return p

    p = atomic(_op)
    current_app.logger.info(
        "Updated product id=%s fields=%s", p.id, ", ".join(sorted(patch.keys()))
    )
    return p


def delete_product(*, product_id: str) -> None:
    """
    Delete a product and, by cascade, its sales.

    Raises:
        ProductNotFound: If the product does not exist
    """
    def _op():
        p = load_product(product_id, lock=True)
        sale_ids = [s.id for s in db.session.query(Sale.id).filter(Sale.product_id == p.id)]
        if sale_ids:
            (
                db.session.query(Debt)
                .filter(Debt.related_sale_id.in_(sale_ids))
                .update({Debt.related_sale_id: None}, synchronize_session="fetch")
            )
        db.session.delete(p)
        return len(sale_ids)

    removed_sales = atomic(_op)
    current_app.logger.info(
        "Deleted product id=%s (cascade removed %d sales)", product_id, removed_sales
    )
