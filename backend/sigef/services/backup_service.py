# Overview: Service-layer operations for JSON export/import of all collections.

"""
Backup document format (version 1):

    {
      "products": [...], "sales": [...], "debts": [...],
      "exportedAt": "2026-01-01T00:00:00Z",
      "version": 1
    }

Entity keys use the camelCase names of the original web client
(acquisitionValue, quantitySold, amountPaid, ...). Money is written as
decimal strings and read from strings or numbers. Every column is exported,
so export -> import restores the same rows.

Import has replace semantics: all three tables are cleared and refilled in
one transaction. Stock is restored as-is; sales in the document are NOT
replayed against it. Debt status/paid_at are re-derived through
debt_service.recompute_status, keeping the document's paidAt.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, Callable

from flask import current_app

from ..extensions import db
from ..models import Debt, Product, Sale, DEBT_TYPES
from ..models.common import money_str, new_id
from ..time_utils import parse_iso_datetime, to_utc_z, utcnow
from ..validation import ValidationError, coerce_money
from .concurrency import atomic
from .debt_service import all_debts, recompute_status
from .products_service import all_products
from .sales_service import all_sales

DATA_VERSION = 1


class BackupError(ValidationError):
    """Raised when a backup document cannot be imported."""


# (document key, model attribute, kind)
PRODUCT_FIELDS = (
    ("id", "id", "id"),
    ("name", "name", "text"),
    ("acquisitionValue", "acquisition_value", "money"),
    ("quantity", "quantity", "int"),
    ("initialQuantity", "initial_quantity", "int?"),
    ("createdAt", "created_at", "datetime"),
)

SALE_FIELDS = (
    ("id", "id", "id"),
    ("productId", "product_id", "text"),
    ("productName", "product_name", "text"),
    ("quantitySold", "quantity_sold", "int"),
    ("saleValue", "sale_value", "money"),
    ("isLoss", "is_loss", "bool"),
    ("lossReason", "loss_reason", "text?"),
    ("profit", "profit", "money"),
    ("createdAt", "created_at", "datetime"),
)

DEBT_FIELDS = (
    ("id", "id", "id"),
    ("type", "type", "text"),
    ("description", "description", "text"),
    ("amount", "amount", "money"),
    ("amountPaid", "amount_paid", "money"),
    ("dueDate", "due_date", "datetime?"),
    ("status", "status", "derived"),
    ("contactName", "contact_name", "text?"),
    ("createdAt", "created_at", "datetime"),
    ("paidAt", "paid_at", "datetime?"),
    ("relatedSaleId", "related_sale_id", "text?"),
)


def _export_value(kind: str, value: Any) -> Any:
    if kind == "money":
        return money_str(value)
    if kind.startswith("datetime"):
        return to_utc_z(value)
    return value


def _export_row(row, fields) -> dict:
    return {key: _export_value(kind, getattr(row, attr)) for key, attr, kind in fields}


def export_data() -> dict:
    products = all_products()
    sales = all_sales()
    debts = all_debts()
    current_app.logger.info(
        "Exporting %d products, %d sales, %d debts", len(products), len(sales), len(debts)
    )
    return {
        "products": [_export_row(p, PRODUCT_FIELDS) for p in products],
        "sales": [_export_row(s, SALE_FIELDS) for s in sales],
        "debts": [_export_row(d, DEBT_FIELDS) for d in debts],
        "exportedAt": to_utc_z(utcnow()),
        "version": DATA_VERSION,
    }


def export_json(indent: int = 2) -> str:
    return json.dumps(export_data(), indent=indent, ensure_ascii=False)


def _parse_int(where: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise BackupError(f"{where} must be an integer")
    return value


def _parse_datetime(where: str, value: Any) -> datetime:
    if not isinstance(value, str):
        raise BackupError(f"{where} must be an ISO-8601 string")
    try:
        dt = parse_iso_datetime(value)
    except ValueError:
        raise BackupError(f"{where} must be an ISO-8601 string")
    if dt is None:
        raise BackupError(f"{where} must be an ISO-8601 string")
    return dt


def _parse_value(where: str, kind: str, value: Any) -> Any:
    optional = kind.endswith("?")
    if value is None or (optional and value == ""):
        if optional:
            return None
        if kind == "id":
            return new_id()
        if kind == "datetime":
            return utcnow()
        raise BackupError(f"{where} is required")

    base = kind.rstrip("?")
    if base in ("id", "text"):
        if not isinstance(value, str):
            raise BackupError(f"{where} must be a string")
        stripped = value.strip()
        if not stripped and not optional:
            if base == "id":
                return new_id()
            raise BackupError(f"{where} cannot be blank")
        return stripped
    if base == "money":
        try:
            return coerce_money(value, where)
        except ValidationError as exc:
            raise BackupError(str(exc))
    if base == "int":
        return _parse_int(where, value)
    if base == "bool":
        if not isinstance(value, bool):
            raise BackupError(f"{where} must be a boolean")
        return value
    if base == "datetime":
        return _parse_datetime(where, value)
    return value


def _build_rows(model: Callable, items: Any, fields, label: str) -> list:
    if not isinstance(items, list):
        raise BackupError(f"'{label}' must be an array")
    rows = []
    seen: set[str] = set()
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise BackupError(f"{label}[{index}] must be an object")
        values = {}
        for key, attr, kind in fields:
            if kind == "derived":
                continue
            values[attr] = _parse_value(f"{label}[{index}].{key}", kind, item.get(key))
        if values["id"] in seen:
            raise BackupError(f"{label}[{index}].id is duplicated: {values['id']}")
        seen.add(values["id"])
        rows.append(model(**values))
    return rows


def _check_references(products: list[Product], sales: list[Sale], debts: list[Debt]) -> None:
    product_ids = {p.id for p in products}
    sale_ids = {s.id for s in sales}
    for index, p in enumerate(products):
        if p.quantity < 0:
            raise BackupError(f"products[{index}].quantity must be >= 0")
        if p.initial_quantity is not None and p.initial_quantity < 0:
            raise BackupError(f"products[{index}].initialQuantity must be >= 0")
        if p.acquisition_value < 0:
            raise BackupError(f"products[{index}].acquisitionValue must be >= 0")
    for index, s in enumerate(sales):
        if s.product_id not in product_ids:
            raise BackupError(f"sales[{index}].productId references an unknown product")
        if s.quantity_sold <= 0:
            raise BackupError(f"sales[{index}].quantitySold must be > 0")
        if s.sale_value < 0:
            raise BackupError(f"sales[{index}].saleValue must be >= 0")
        if s.is_loss and not s.loss_reason:
            raise BackupError(f"sales[{index}].lossReason is required for a loss")
    for index, d in enumerate(debts):
        if d.type not in DEBT_TYPES:
            raise BackupError(f"debts[{index}].type must be one of: {', '.join(DEBT_TYPES)}")
        if d.amount <= 0:
            raise BackupError(f"debts[{index}].amount must be > 0")
        if d.amount_paid < 0 or d.amount_paid > d.amount:
            raise BackupError(f"debts[{index}].amountPaid must be between 0 and amount")
        if d.related_sale_id is not None and d.related_sale_id not in sale_ids:
            raise BackupError(f"debts[{index}].relatedSaleId references an unknown sale")


def import_data(document: Any) -> dict:
    """
    Replace all products, sales and debts with the document's contents.

    Returns counts of imported rows.

    Raises:
        BackupError: malformed document (nothing is written)
    """
    if not isinstance(document, dict):
        raise BackupError("Invalid file format: not a JSON object")
    if not isinstance(document.get("products"), list) or not isinstance(document.get("sales"), list):
        raise BackupError("Invalid file format: missing 'products' or 'sales' array")

    version = document.get("version")
    if version != DATA_VERSION:
        current_app.logger.warning(
            "Importing data from a different version (file: %s, app: %s)", version, DATA_VERSION
        )

    products = _build_rows(Product, document["products"], PRODUCT_FIELDS, "products")
    sales = _build_rows(Sale, document["sales"], SALE_FIELDS, "sales")
    debts = _build_rows(Debt, document.get("debts") or [], DEBT_FIELDS, "debts")
    _check_references(products, sales, debts)

    for debt in debts:
        recompute_status(debt, now=debt.paid_at or utcnow())

    def _op():
        db.session.query(Debt).delete()
        db.session.query(Sale).delete()
        db.session.query(Product).delete()
        db.session.add_all(products)
        db.session.flush()
        db.session.add_all(sales)
        db.session.flush()
        db.session.add_all(debts)
        db.session.flush()

    atomic(_op)
    counts = {"products": len(products), "sales": len(sales), "debts": len(debts)}
    current_app.logger.info(
        "Imported backup: %(products)d products, %(sales)d sales, %(debts)d debts", counts
    )
    return counts


def import_json(raw: str) -> dict:
    try:
        document = json.loads(raw)
    except json.JSONDecodeError:
        raise BackupError("Invalid JSON file. Please check the file content.")
    return import_data(document)
