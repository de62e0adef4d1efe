# Overview: Pytest coverage for debt status derivation and the debt service.

from datetime import datetime
from decimal import Decimal

import pytest

from sigef.models import Debt
from sigef.services import debt_service
from sigef.services.debt_service import apply_update, derive_status, recompute_status
from sigef.services.errors import DebtNotFound, PaymentExceedsDebt, SaleNotFound
from sigef.validation import ValidationError

T1 = datetime(2026, 3, 1, 10, 0, 0)
T2 = datetime(2026, 3, 5, 16, 30, 0)


def _debt(amount="100.00", amount_paid="0.00"):
    debt = Debt(
        id="d-1",
        type="payable",
        description="Fornecedor",
        amount=Decimal(amount),
        amount_paid=Decimal(amount_paid),
    )
    return recompute_status(debt)


class TestDeriveStatus:
    @pytest.mark.parametrize("paid, expected", [
        ("0", "pending"),
        ("0.01", "partially_paid"),
        ("99.99", "partially_paid"),
        ("100", "paid"),
    ])
    def test_status_function(self, paid, expected):
        assert derive_status(Decimal("100"), Decimal(paid)) == expected


class TestApplyUpdate:
    def test_partial_then_full_payment(self):
        debt = _debt()
        assert debt.status == "pending"

        apply_update(debt, {"amount_paid": 40}, now=T1)
        assert debt.status == "partially_paid"
        assert debt.paid_at is None

        apply_update(debt, {"amount_paid": 100}, now=T2)
        assert debt.status == "paid"
        assert debt.paid_at == T2

    def test_paid_at_kept_while_paid(self):
        debt = _debt()
        apply_update(debt, {"amount_paid": "100"}, now=T1)
        apply_update(debt, {"description": "Fornecedor (renegociado)"}, now=T2)
        assert debt.paid_at == T1

    def test_paid_at_cleared_when_leaving_paid(self):
        debt = _debt()
        apply_update(debt, {"amount_paid": "100"}, now=T1)
        apply_update(debt, {"amount_paid": "60"}, now=T2)
        assert debt.status == "partially_paid"
        assert debt.paid_at is None

    def test_raising_amount_alone_reopens_debt(self):
        debt = _debt()
        apply_update(debt, {"amount_paid": "100"}, now=T1)
        apply_update(debt, {"amount": "150"}, now=T2)
        assert debt.status == "partially_paid"
        assert debt.paid_at is None

    def test_lowering_amount_to_paid_closes_debt(self):
        debt = _debt(amount_paid="60.00")
        apply_update(debt, {"amount": "60"}, now=T2)
        assert debt.status == "paid"
        assert debt.paid_at == T2

    def test_overpayment_rejected_without_changes(self):
        debt = _debt(amount_paid="40.00")
        with pytest.raises(PaymentExceedsDebt):
            apply_update(debt, {"amount_paid": "120", "description": "x"})
        assert debt.amount_paid == Decimal("40.00")
        assert debt.description == "Fornecedor"

    @pytest.mark.parametrize("field", ["status", "paid_at", "id", "created_at"])
    def test_protected_fields(self, field):
        with pytest.raises(ValidationError):
            apply_update(_debt(), {field: "paid"})

    @pytest.mark.parametrize("updates", [
        {"amount": 0},
        {"amount": "-5"},
        {"amount_paid": "-1"},
        {"type": "loan"},
        {"description": "   "},
        {"unknown": 1},
    ])
    def test_invalid_values(self, updates):
        with pytest.raises(ValidationError):
            apply_update(_debt(), updates)


class TestDebtService:
    def test_create_defaults(self, make_debt):
        debt = make_debt(contact_name="  João  ")
        assert debt.status == "pending"
        assert debt.amount_paid == Decimal("0.00")
        assert debt.paid_at is None
        assert debt.contact_name == "João"

    def test_create_with_unknown_sale(self, make_debt):
        with pytest.raises(SaleNotFound):
            make_debt(related_sale_id="missing")

    def test_update_persists_status(self, make_debt):
        debt = make_debt()
        debt_service.update_debt(debt.id, {"amount_paid": Decimal("40")})
        loaded = debt_service.get_debt(debt.id)
        assert loaded.status == "partially_paid"
        assert loaded.amount_paid == Decimal("40.00")

    def test_register_payment_accumulates(self, make_debt):
        debt = make_debt()
        debt_service.register_payment(debt.id, "30")
        debt = debt_service.register_payment(debt.id, Decimal("70"))
        assert debt.status == "paid"
        assert debt.paid_at is not None

    def test_register_payment_rejects_overpayment(self, make_debt):
        debt = make_debt()
        debt_service.register_payment(debt.id, "90")
        with pytest.raises(PaymentExceedsDebt):
            debt_service.register_payment(debt.id, "20")
        assert debt_service.get_debt(debt.id).amount_paid == Decimal("90.00")

    @pytest.mark.parametrize("payment", [0, "-10"])
    def test_register_payment_requires_positive(self, make_debt, payment):
        debt = make_debt()
        with pytest.raises(ValidationError):
            debt_service.register_payment(debt.id, payment)

    def test_mark_paid(self, make_debt):
        debt = debt_service.mark_debt_paid(make_debt(amount="250.50").id)
        assert debt.amount_paid == Decimal("250.50")
        assert debt.status == "paid"

    def test_delete(self, make_debt):
        debt = make_debt()
        debt_service.delete_debt(debt.id)
        with pytest.raises(DebtNotFound):
            debt_service.get_debt(debt.id)

    def test_delete_unknown(self, db_session):
        with pytest.raises(DebtNotFound):
            debt_service.delete_debt("missing")

    def test_list_filters(self, make_debt):
        make_debt(type="receivable")
        paid = make_debt(type="payable")
        debt_service.mark_debt_paid(paid.id)

        assert debt_service.list_debts()["count"] == 2
        assert debt_service.list_debts(type="payable")["count"] == 1
        assert debt_service.list_debts(status="paid")["items"][0]["id"] == paid.id
        assert debt_service.list_debts(type="receivable", status="paid")["count"] == 0
