"""
Sales Service - sale and loss recording

WHY: A sale row and the stock it consumed must never disagree. Both
record_sale and delete_sale change Product.quantity (through
inventory_service) and the Sale table in one DB transaction.

Profit rule (snapshot at creation):
- sale: profit = sale_value - unit_cost * quantity_sold
- loss: profit = -(unit_cost * quantity_sold)
"""

from __future__ import annotations

from decimal import Decimal

from flask import current_app

from ..extensions import db
from ..models import Debt, Sale
from ..validation import ValidationError
from .concurrency import atomic, lock_for_update
from .cost_service import cost_of_goods, quantize_money, to_decimal
from .errors import InvalidLossReason, InvalidQuantity, ProductNotFound, SaleNotFound
from .inventory_service import load_product, release, reserve


def compute_profit(product, quantity_sold: int, sale_value, is_loss: bool) -> Decimal:
    cogs = cost_of_goods(product, quantity_sold)
    if is_loss:
        return quantize_money(-cogs)
    return quantize_money(to_decimal(sale_value) - cogs)


def _normalize_loss_reason(is_loss: bool, loss_reason: str | None) -> str | None:
    if not is_loss:
        return None
    reason = (loss_reason or "").strip()
    if not reason:
        raise InvalidLossReason()
    return reason


def record_sale(
    product_id: str,
    quantity_sold: int,
    sale_value=0,
    is_loss: bool = False,
    loss_reason: str | None = None,
) -> Sale:
    """
    Record a sale (or a loss when is_loss=True) and take its stock.

    A loss always stores sale_value 0; any value passed with it is dropped.

    Raises:
        InvalidQuantity: quantity_sold is not a positive integer
        InvalidLossReason: is_loss with an empty reason
        ProductNotFound: product_id does not resolve
        InsufficientStock: quantity_sold > product.quantity
    """
    if isinstance(quantity_sold, bool) or not isinstance(quantity_sold, int) or quantity_sold <= 0:
        raise InvalidQuantity(
            "quantity_sold must be a positive integer",
            details={"quantity_sold": quantity_sold},
        )
    reason = _normalize_loss_reason(is_loss, loss_reason)
    value = Decimal("0") if sale_value is None else to_decimal(sale_value)
    if value < 0:
        raise ValidationError("sale_value must be >= 0")
    if is_loss:
        # a loss brings in no revenue
        value = Decimal("0")

    def _op():
        product = load_product(product_id, lock=True)

        # Profit uses the unit cost before the stock moves: when
        # initial_quantity is unset the denominator is the current quantity.
        profit = compute_profit(product, quantity_sold, value, is_loss)

        reserve(product, quantity_sold)

        sale = Sale(
            product_id=product.id,
            product_name=product.name,
            quantity_sold=quantity_sold,
            sale_value=quantize_money(value),
            is_loss=bool(is_loss),
            loss_reason=reason,
            profit=profit,
        )
        db.session.add(sale)
        db.session.flush()
        return sale

    sale = atomic(_op)
    current_app.logger.info(
        "Recorded %s id=%s product_id=%s qty=%d profit=%s",
        "loss" if sale.is_loss else "sale",
        sale.id,
        sale.product_id,
        sale.quantity_sold,
        sale.profit,
    )
    return sale


def delete_sale(sale_id: str) -> dict:
    """
    Delete a sale/loss and put its quantity back into stock.

    A sale whose product is gone is still deleted; the stock release is
    skipped and a warning is logged. Returns the deleted row as a dict.

    Raises:
        SaleNotFound
    """
    def _op():
        sale = lock_for_update(db.session.query(Sale).filter_by(id=sale_id)).first()
        if sale is None:
            raise SaleNotFound(sale_id)

        try:
            product = load_product(sale.product_id, lock=True)
        except ProductNotFound:
            product = None
            current_app.logger.warning(
                "Product %s not found for sale %s; deleting sale without restoring stock",
                sale.product_id,
                sale.id,
            )

        if product is not None:
            release(product, sale.quantity_sold)

        (
            db.session.query(Debt)
            .filter(Debt.related_sale_id == sale.id)
            .update({Debt.related_sale_id: None}, synchronize_session="fetch")
        )
        snapshot = sale.to_dict()
        db.session.delete(sale)
        return snapshot, product is not None

    snapshot, restored = atomic(_op)
    current_app.logger.info(
        "Deleted %s id=%s (restored %d to product_id=%s: %s)",
        "loss" if snapshot["is_loss"] else "sale",
        snapshot["id"],
        snapshot["quantity_sold"],
        snapshot["product_id"],
        "yes" if restored else "no",
    )
    return snapshot


def get_sale(sale_id: str) -> Sale:
    sale = db.session.query(Sale).filter_by(id=sale_id).first()
    if sale is None:
        raise SaleNotFound(sale_id)
    return sale


def all_sales() -> list[Sale]:
    return db.session.query(Sale).order_by(Sale.created_at.asc(), Sale.id.asc()).all()


def list_sales(
    *,
    product_id: str | None = None,
    is_loss: bool | None = None,
) -> dict:
    query = db.session.query(Sale)
    if product_id is not None:
        query = query.filter(Sale.product_id == product_id)
    if is_loss is not None:
        query = query.filter(Sale.is_loss == is_loss)
    sales = query.order_by(Sale.created_at.asc(), Sale.id.asc()).all()
    return {
        "items": [s.to_dict() for s in sales],
        "count": len(sales),
    }
