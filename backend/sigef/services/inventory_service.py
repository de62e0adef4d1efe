# Overview: Inventory ledger; the only writer of Product.quantity in sale flows.

# backend/sigef/services/inventory_service.py
"""
SIGEF Inventory Invariants (authoritative)

Inventory model:
- Stock is the mutable Product.quantity counter (not ledger-derived).
- reserve() and release() mutate the in-memory Product only; the caller
  commits them in the same DB transaction as the Sale row they belong to.

Business invariants:
- quantity may never go negative.
- reserve(qty) succeeds when qty <= quantity (qty == quantity drains to 0)
  and fails with InsufficientStock otherwise. There is no negative-stock mode.
- release(qty) always succeeds. It is only used to reverse a sale or loss
  that was validly reserved earlier, so no upper bound is checked against
  initial_quantity.
- initial_quantity is never touched here.
"""

from __future__ import annotations

from ..extensions import db
from ..models import Product
from .concurrency import lock_for_update
from .errors import InsufficientStock, InvalidQuantity, ProductNotFound


def load_product(product_id: str, *, lock: bool = False) -> Product:
    query = db.session.query(Product).filter_by(id=product_id)
    if lock:
        query = lock_for_update(query)
    product = query.first()
    if product is None:
        raise ProductNotFound(product_id)
    return product


def _require_positive(qty: int) -> None:
    if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
        raise InvalidQuantity("quantity must be a positive integer", details={"quantity": qty})


def reserve(product: Product, qty: int) -> Product:
    """Take qty units out of stock."""
    _require_positive(qty)
    on_hand = product.quantity or 0
    if qty > on_hand:
        raise InsufficientStock(product.id, requested=qty, available=on_hand)
    product.quantity = on_hand - qty
    return product


def release(product: Product, qty: int) -> Product:
    """Put qty units back into stock (sale/loss reversal)."""
    _require_positive(qty)
    product.quantity = (product.quantity or 0) + qty
    return product
