# Overview: Builds the input document for the AI financial analysis flow.

"""
The analysis flow itself (prompt + model call) lives outside this service.
This module only assembles what it consumes: the raw collections, the
currency label and the pre-aggregated balance-sheet figures.
"""

from __future__ import annotations

from flask import current_app

from ..currencies import DEFAULT_CURRENCY_CODE, currency_symbol, get_currency_config
from ..validation import ValidationError
from .debt_service import all_debts
from .products_service import all_products
from .reporting_service import build_analysis_snapshot
from .sales_service import all_sales


def resolve_currency(code: str | None) -> str:
    if code is None or not code.strip():
        return current_app.config.get("DEFAULT_CURRENCY", DEFAULT_CURRENCY_CODE)
    config = get_currency_config(code)
    if config is None:
        raise ValidationError(f"Unsupported currency: {code}")
    return config.code


def analysis_input(currency_code: str | None = None) -> dict:
    code = resolve_currency(currency_code)
    products = all_products()
    sales = all_sales()
    debts = all_debts()

    snapshot = build_analysis_snapshot(products, debts)
    return {
        "products": [p.to_dict() for p in products],
        "sales": [s.to_dict() for s in sales],
        "debts": [d.to_dict() for d in debts],
        "currency_code": code,
        "currency_symbol": currency_symbol(code),
        "calculated": snapshot.to_dict(),
    }
