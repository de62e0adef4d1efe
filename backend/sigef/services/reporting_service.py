# Overview: Service-layer operations for reporting; pure aggregation plus DB loaders.

"""
SIGEF Report Semantics (authoritative)

- build_report() is a pure function of (products, sales, debts). It never
  raises on a bad record: a sale whose product is gone, or a product with
  no usable quantity, costs 0 and is listed under `warnings`.
- Profit and loss totals are recomputed live from the CURRENT unit cost of
  each product. Editing a product's acquisition_value after a sale shifts
  these totals. `recorded_profit` sums the immutable per-sale snapshots so
  the two can be compared.
- Rankings keep the input order of `products` and the first product wins a
  tie. Only strictly positive values qualify.
- Money totals are rounded to cents (half-up) once, after summing.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Optional

from ..models import Debt, Product, Sale, DEBT_STATUS_PAID, DEBT_TYPE_PAYABLE, DEBT_TYPE_RECEIVABLE
from ..time_utils import to_utc_z, utcnow
from .cost_service import ZERO, quantize_money, to_decimal, unit_cost
from .debt_service import all_debts
from .products_service import all_products
from .sales_service import all_sales


@dataclass(frozen=True)
class ProductRanking:
    product_id: str
    name: str
    value: Decimal

    def to_dict(self, value_key: str) -> dict:
        return {"product_id": self.product_id, "name": self.name, value_key: str(self.value)}


@dataclass(frozen=True)
class ReportData:
    total_products: int
    total_sales: int
    total_investment: Decimal
    total_revenue: Decimal
    total_profit: Decimal
    total_loss_value: Decimal
    most_profitable_product: Optional[ProductRanking]
    highest_loss_product: Optional[ProductRanking]
    total_receivables_pending: Decimal
    total_payables_pending: Decimal
    recorded_profit: Decimal = ZERO
    warnings: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_products": self.total_products,
            "total_sales": self.total_sales,
            "total_investment": str(self.total_investment),
            "total_revenue": str(self.total_revenue),
            "total_profit": str(self.total_profit),
            "total_loss_value": str(self.total_loss_value),
            "most_profitable_product": (
                self.most_profitable_product.to_dict("profit")
                if self.most_profitable_product else None
            ),
            "highest_loss_product": (
                self.highest_loss_product.to_dict("loss_value")
                if self.highest_loss_product else None
            ),
            "total_receivables_pending": str(self.total_receivables_pending),
            "total_payables_pending": str(self.total_payables_pending),
            "recorded_profit": str(self.recorded_profit),
            "warnings": list(self.warnings),
        }


@dataclass(frozen=True)
class AnalysisSnapshot:
    """Pre-aggregated figures handed to the financial analysis flow."""
    approx_assets: Decimal
    approx_liabilities: Decimal
    approx_net_worth: Decimal
    total_receivables_pending: Decimal
    total_payables_pending: Decimal

    def to_dict(self) -> dict:
        return {
            "approx_assets": str(self.approx_assets),
            "approx_liabilities": str(self.approx_liabilities),
            "approx_net_worth": str(self.approx_net_worth),
            "total_receivables_pending": str(self.total_receivables_pending),
            "total_payables_pending": str(self.total_payables_pending),
        }


def stock_valuation(products: Iterable[Product]) -> Decimal:
    """Sum of unit cost * current quantity, unrounded."""
    total = ZERO
    for product in products:
        total += unit_cost(product).cost * (product.quantity or 0)
    return total


def pending_debt_total(debts: Iterable[Debt], debt_type: str) -> Decimal:
    total = ZERO
    for debt in debts:
        if debt.type == debt_type and debt.status != DEBT_STATUS_PAID:
            total += to_decimal(debt.amount) - to_decimal(debt.amount_paid)
    return total


def _pick_max(candidates: list[ProductRanking]) -> Optional[ProductRanking]:
    best: Optional[ProductRanking] = None
    for candidate in candidates:
        if candidate.value > 0 and (best is None or candidate.value > best.value):
            best = candidate
    return best


def build_report(
    products: Iterable[Product],
    sales: Iterable[Sale],
    debts: Iterable[Debt],
) -> ReportData:
    products = list(products)
    sales = list(sales)
    debts = list(debts)

    by_id = {p.id: p for p in products}
    warnings: list[dict] = []

    costs = {}
    for p in products:
        result = unit_cost(p)
        costs[p.id] = result.cost
        if not result.ok:
            warnings.append({"product_id": p.id, "name": p.name, "error": result.error})

    # product_id -> [profit, loss_value]
    per_product = {p.id: [ZERO, ZERO] for p in products}

    total_revenue = ZERO
    total_profit = ZERO
    total_loss_value = ZERO
    recorded_profit = ZERO

    for s in sales:
        product = by_id.get(s.product_id)
        if product is None:
            result = unit_cost(None)
            warnings.append({"sale_id": s.id, "product_id": s.product_id, "error": result.error})
            cost = result.cost
        else:
            cost = costs[product.id]

        cogs = cost * s.quantity_sold
        recorded_profit += to_decimal(s.profit)

        if s.is_loss:
            total_loss_value += cogs
            total_profit -= cogs
            if product is not None:
                per_product[product.id][0] -= cogs
                per_product[product.id][1] += cogs
        else:
            value = to_decimal(s.sale_value)
            total_revenue += value
            total_profit += value - cogs
            if product is not None:
                per_product[product.id][0] += value - cogs

    most_profitable = _pick_max([
        ProductRanking(p.id, p.name, quantize_money(per_product[p.id][0])) for p in products
    ])
    highest_loss = _pick_max([
        ProductRanking(p.id, p.name, quantize_money(per_product[p.id][1])) for p in products
    ])

    return ReportData(
        total_products=len(products),
        total_sales=len(sales),
        total_investment=quantize_money(stock_valuation(products)),
        total_revenue=quantize_money(total_revenue),
        total_profit=quantize_money(total_profit),
        total_loss_value=quantize_money(total_loss_value),
        most_profitable_product=most_profitable,
        highest_loss_product=highest_loss,
        total_receivables_pending=quantize_money(pending_debt_total(debts, DEBT_TYPE_RECEIVABLE)),
        total_payables_pending=quantize_money(pending_debt_total(debts, DEBT_TYPE_PAYABLE)),
        recorded_profit=quantize_money(recorded_profit),
        warnings=warnings,
    )


def build_analysis_snapshot(products: Iterable[Product], debts: Iterable[Debt]) -> AnalysisSnapshot:
    debts = list(debts)
    assets = quantize_money(stock_valuation(products))
    payables = quantize_money(pending_debt_total(debts, DEBT_TYPE_PAYABLE))
    receivables = quantize_money(pending_debt_total(debts, DEBT_TYPE_RECEIVABLE))
    return AnalysisSnapshot(
        approx_assets=assets,
        approx_liabilities=payables,
        approx_net_worth=assets - payables,
        total_receivables_pending=receivables,
        total_payables_pending=payables,
    )


def summary_report() -> dict:
    """Load the current collections and aggregate them."""
    report = build_report(all_products(), all_sales(), all_debts())
    payload = report.to_dict()
    payload["generated_at"] = to_utc_z(utcnow())
    return payload
