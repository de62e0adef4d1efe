# Overview: Debt lifecycle; status/paid_at derivation under partial payments.

"""
SIGEF Debt Invariants (authoritative)

- status is a pure function of amount_paid vs amount:
    amount_paid <= 0            -> pending
    0 < amount_paid < amount    -> partially_paid
    amount_paid >= amount       -> paid
- paid_at is set the first time a debt reaches paid, kept while it stays
  paid, and cleared as soon as it leaves paid.
- recompute_status() is the ONLY writer of status and paid_at. It runs on
  every mutation path, even when amount_paid was not touched (raising
  amount alone can turn paid back into partially_paid).
- Overpayment is rejected with PaymentExceedsDebt; nothing is written.
- Deleting a debt never touches the related sale.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from flask import current_app

from ..extensions import db
from ..models import (
    Debt,
    Sale,
    DEBT_TYPES,
    DEBT_STATUS_PAID,
    DEBT_STATUS_PARTIALLY_PAID,
    DEBT_STATUS_PENDING,
)
from ..time_utils import utcnow
from ..validation import ValidationError, coerce_money
from .concurrency import atomic, lock_for_update
from .errors import DebtNotFound, PaymentExceedsDebt, SaleNotFound

DEBT_MUTABLE_FIELDS = {
    "type",
    "description",
    "amount",
    "amount_paid",
    "due_date",
    "contact_name",
    "related_sale_id",
}

# Derived or system-owned; callers may never write these
DEBT_PROTECTED_FIELDS = {"id", "status", "paid_at", "created_at", "version_id"}


def derive_status(amount, amount_paid) -> str:
    if amount_paid <= 0:
        return DEBT_STATUS_PENDING
    if amount_paid >= amount:
        return DEBT_STATUS_PAID
    return DEBT_STATUS_PARTIALLY_PAID


def recompute_status(debt: Debt, now: datetime | None = None) -> Debt:
    status = derive_status(debt.amount, debt.amount_paid)
    debt.status = status
    if status == DEBT_STATUS_PAID:
        if debt.paid_at is None:
            debt.paid_at = now or utcnow()
    else:
        debt.paid_at = None
    return debt


def _check_sale_exists(sale_id: str | None) -> None:
    if sale_id is None:
        return
    if db.session.query(Sale.id).filter_by(id=sale_id).first() is None:
        raise SaleNotFound(sale_id)


def _clean_updates(updates: dict) -> dict:
    protected = sorted(set(updates) & DEBT_PROTECTED_FIELDS)
    if protected:
        raise ValidationError(f"Field not allowed: {', '.join(protected)}")
    unknown = sorted(set(updates) - DEBT_MUTABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown field: {', '.join(unknown)}")

    cleaned = dict(updates)
    if "type" in cleaned and cleaned["type"] not in DEBT_TYPES:
        raise ValidationError(f"type must be one of: {', '.join(DEBT_TYPES)}")
    if "description" in cleaned:
        description = (cleaned["description"] or "").strip()
        if not description:
            raise ValidationError("description cannot be blank")
        cleaned["description"] = description
    if "amount" in cleaned:
        if cleaned["amount"] is None:
            raise ValidationError("amount cannot be null")
        cleaned["amount"] = coerce_money(cleaned["amount"], "amount")
        if cleaned["amount"] <= 0:
            raise ValidationError("amount must be > 0")
    if "amount_paid" in cleaned:
        if cleaned["amount_paid"] is None:
            raise ValidationError("amount_paid cannot be null")
        cleaned["amount_paid"] = coerce_money(cleaned["amount_paid"], "amount_paid")
        if cleaned["amount_paid"] < 0:
            raise ValidationError("amount_paid must be >= 0")
    return cleaned


def apply_update(debt: Debt, updates: dict, now: datetime | None = None) -> Debt:
    """
    Merge updates into debt and recompute status/paid_at.

    Works on the in-memory row only; callers persist it. Validation happens
    before any attribute is written, so a rejected update leaves the debt
    untouched.

    Raises:
        ValidationError: protected/unknown field or invalid value
        PaymentExceedsDebt: resulting amount_paid > amount
    """
    cleaned = _clean_updates(updates)

    new_amount = cleaned.get("amount", debt.amount)
    new_paid = cleaned.get("amount_paid", debt.amount_paid)
    if new_paid is None:
        new_paid = Decimal("0")
    if new_paid > new_amount:
        raise PaymentExceedsDebt(debt.id, new_amount, new_paid)

    for k, v in cleaned.items():
        setattr(debt, k, v)
    debt.amount_paid = new_paid

    return recompute_status(debt, now)


def create_debt(
    type: str,
    description: str,
    amount,
    due_date: datetime | None = None,
    contact_name: str | None = None,
    related_sale_id: str | None = None,
) -> Debt:
    """
    Create a debt with amount_paid = 0 and status pending.

    Raises:
        ValidationError: invalid type/description/amount
        SaleNotFound: related_sale_id given but unknown
    """
    fields = _clean_updates({"type": type, "description": description, "amount": amount})
    contact = (contact_name or "").strip() or None

    def _op():
        _check_sale_exists(related_sale_id)
        debt = Debt(
            type=fields["type"],
            description=fields["description"],
            amount=fields["amount"],
            amount_paid=Decimal("0.00"),
            due_date=due_date,
            contact_name=contact,
            related_sale_id=related_sale_id,
        )
        recompute_status(debt)
        db.session.add(debt)
        db.session.flush()
        return debt

    debt = atomic(_op)
    current_app.logger.info(
        "Created %s debt id=%s amount=%s", debt.type, debt.id, debt.amount
    )
    return debt


def _load_debt(debt_id: str, *, lock: bool = False) -> Debt:
    query = db.session.query(Debt).filter_by(id=debt_id)
    if lock:
        query = lock_for_update(query)
    debt = query.first()
    if debt is None:
        raise DebtNotFound(debt_id)
    return debt


def get_debt(debt_id: str) -> Debt:
    return _load_debt(debt_id)


def update_debt(debt_id: str, updates: dict) -> Debt:
    """
    Atomically load, update and persist a debt.

    Raises:
        DebtNotFound, ValidationError, PaymentExceedsDebt, SaleNotFound
    """
    def _op():
        debt = _load_debt(debt_id, lock=True)
        if updates.get("related_sale_id") is not None:
            _check_sale_exists(updates["related_sale_id"])
        return apply_update(debt, updates)

    debt = atomic(_op)
    current_app.logger.info(
        "Updated debt id=%s status=%s amount_paid=%s/%s",
        debt.id,
        debt.status,
        debt.amount_paid,
        debt.amount,
    )
    return debt


def register_payment(debt_id: str, payment) -> Debt:
    """
    Add a partial payment on top of what was already paid.

    Raises:
        ValidationError: payment <= 0
        PaymentExceedsDebt: the payment would overpay the debt
    """
    value = coerce_money(payment, "payment")
    if value <= 0:
        raise ValidationError("payment must be > 0")

    def _op():
        debt = _load_debt(debt_id, lock=True)
        return apply_update(debt, {"amount_paid": (debt.amount_paid or 0) + value})

    debt = atomic(_op)
    current_app.logger.info(
        "Registered payment of %s on debt id=%s (status=%s)", value, debt.id, debt.status
    )
    return debt


def mark_debt_paid(debt_id: str) -> Debt:
    def _op():
        debt = _load_debt(debt_id, lock=True)
        return apply_update(debt, {"amount_paid": debt.amount})

    debt = atomic(_op)
    current_app.logger.info("Marked debt id=%s as paid", debt.id)
    return debt


def delete_debt(debt_id: str) -> None:
    """
    Remove a debt. No cascading effects.

    Raises:
        DebtNotFound
    """
    def _op():
        debt = _load_debt(debt_id, lock=True)
        db.session.delete(debt)

    atomic(_op)
    current_app.logger.info("Deleted debt id=%s", debt_id)


def all_debts() -> list[Debt]:
    return db.session.query(Debt).order_by(Debt.created_at.asc(), Debt.id.asc()).all()


def list_debts(*, type: str | None = None, status: str | None = None) -> dict:
    query = db.session.query(Debt)
    if type is not None:
        query = query.filter(Debt.type == type)
    if status is not None:
        query = query.filter(Debt.status == status)
    debts = query.order_by(Debt.created_at.asc(), Debt.id.asc()).all()
    return {
        "items": [d.to_dict() for d in debts],
        "count": len(debts),
    }
