# Overview: Unit cost model; pure functions shared by sales and reporting.

"""
SIGEF Cost Invariants (authoritative)

- unit cost = acquisition_value / denominator
- denominator = initial_quantity when set and > 0, otherwise the current
  quantity when > 0.
- No positive denominator -> cost 0 plus an error flag. Division by zero is
  never attempted.
- Missing product -> cost 0 plus an error flag.
- Never raises: a report over many products must survive one bad row.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from ..models import Product

PRODUCT_NOT_FOUND = "Produto não encontrado"
INVALID_INITIAL_QUANTITY = "Quantidade inicial inválida"

ZERO = Decimal("0")
CENT = Decimal("0.01")


@dataclass(frozen=True)
class UnitCostResult:
    cost: Decimal
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def cost_denominator(product: Product) -> int:
    """Return the quantity used to spread acquisition_value, or 0 if none."""
    initial = product.initial_quantity
    if initial is not None and initial > 0:
        return initial
    current = product.quantity or 0
    return current if current > 0 else 0


def unit_cost(product: Optional[Product]) -> UnitCostResult:
    if product is None:
        return UnitCostResult(cost=ZERO, error=PRODUCT_NOT_FOUND)

    denominator = cost_denominator(product)
    if denominator <= 0:
        return UnitCostResult(cost=ZERO, error=INVALID_INITIAL_QUANTITY)

    return UnitCostResult(cost=to_decimal(product.acquisition_value) / denominator)


def cost_of_goods(product: Optional[Product], quantity: int) -> Decimal:
    """Unrounded unit cost times quantity."""
    return unit_cost(product).cost * quantity
