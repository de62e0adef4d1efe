# Overview: Pytest coverage for the report aggregator and analysis input.

from decimal import Decimal

import pytest

from sigef.models import Debt, Product, Sale
from sigef.services import debt_service, sales_service
from sigef.services.analysis_service import analysis_input
from sigef.services.products_service import update_product
from sigef.services.reporting_service import build_analysis_snapshot, build_report, summary_report
from sigef.validation import ValidationError


def _product(pid, name="Feijão", acquisition_value="150", quantity=35, initial_quantity=50):
    return Product(id=pid, name=name, acquisition_value=Decimal(acquisition_value),
                   quantity=quantity, initial_quantity=initial_quantity)


def _sale(sid, product_id, qty, value="0", is_loss=False, profit="0"):
    return Sale(id=sid, product_id=product_id, product_name="x", quantity_sold=qty,
                sale_value=Decimal(value), is_loss=is_loss,
                loss_reason="damaged" if is_loss else None, profit=Decimal(profit))


def _debt(did, type, amount, paid="0", status="pending"):
    return Debt(id=did, type=type, description="d", amount=Decimal(amount),
                amount_paid=Decimal(paid), status=status)


class TestBuildReport:
    def test_after_sale_and_loss(self):
        p = _product("p1")
        sales = [
            _sale("s1", "p1", 10, value="50", profit="20"),
            _sale("s2", "p1", 5, is_loss=True, profit="-15"),
        ]
        report = build_report([p], sales, [])

        assert report.total_products == 1
        assert report.total_sales == 2
        assert report.total_investment == Decimal("105.00")
        assert report.total_revenue == Decimal("50.00")
        assert report.total_loss_value == Decimal("15.00")
        assert report.total_profit == Decimal("5.00")
        assert report.recorded_profit == Decimal("5.00")
        assert report.most_profitable_product.product_id == "p1"
        assert report.most_profitable_product.value == Decimal("5.00")
        assert report.highest_loss_product.value == Decimal("15.00")
        assert report.warnings == []

    def test_empty(self):
        report = build_report([], [], [])
        assert report.total_profit == Decimal("0")
        assert report.most_profitable_product is None
        assert report.highest_loss_product is None

    def test_profit_is_live_and_recorded_profit_is_snapshot(self):
        # acquisition value corrected from 150 to 300 after the sale
        p = _product("p1", acquisition_value="300", quantity=40)
        report = build_report([p], [_sale("s1", "p1", 10, value="50", profit="20")], [])
        assert report.total_profit == Decimal("-10.00")
        assert report.recorded_profit == Decimal("20.00")

    def test_rankings_need_positive_values_and_first_wins_ties(self):
        a = _product("a", name="A", acquisition_value="10", quantity=10, initial_quantity=10)
        b = _product("b", name="B", acquisition_value="10", quantity=10, initial_quantity=10)
        c = _product("c", name="C", acquisition_value="10", quantity=10, initial_quantity=10)
        sales = [
            _sale("s1", "a", 1, value="6"),   # +5
            _sale("s2", "b", 1, value="6"),   # +5, ties with a
            _sale("s3", "c", 1, value="0"),   # -1
        ]
        report = build_report([a, b, c], sales, [])
        assert report.most_profitable_product.product_id == "a"
        assert report.highest_loss_product is None

        report = build_report([b, a, c], sales, [])
        assert report.most_profitable_product.product_id == "b"

    def test_only_losing_products_have_no_best(self):
        p = _product("p1")
        report = build_report([p], [_sale("s1", "p1", 2, is_loss=True)], [])
        assert report.most_profitable_product is None
        assert report.highest_loss_product.product_id == "p1"

    def test_pending_debts_by_type(self):
        debts = [
            _debt("d1", "receivable", "100", paid="40", status="partially_paid"),
            _debt("d2", "receivable", "50"),
            _debt("d3", "receivable", "80", paid="80", status="paid"),
            _debt("d4", "payable", "30.10"),
        ]
        report = build_report([], [], debts)
        assert report.total_receivables_pending == Decimal("110.00")
        assert report.total_payables_pending == Decimal("30.10")

    def test_bad_rows_cost_zero_and_are_reported(self):
        broken = _product("p1", quantity=0, initial_quantity=None)
        sales = [
            _sale("s1", "p1", 2, value="10"),
            _sale("s2", "gone", 1, value="4"),
        ]
        report = build_report([broken], sales, [])

        assert report.total_revenue == Decimal("14.00")
        assert report.total_profit == Decimal("14.00")
        assert report.total_investment == Decimal("0.00")
        assert [w.get("product_id") for w in report.warnings] == ["p1", "gone"]

    def test_totals_rounded_after_summing(self):
        p = _product("p1", acquisition_value="10", quantity=3, initial_quantity=3)
        sales = [_sale(f"s{i}", "p1", 1, value="0") for i in range(3)]
        report = build_report([p], sales, [])
        assert report.total_profit == Decimal("-10.00")

    def test_to_dict(self):
        payload = build_report([_product("p1")], [], []).to_dict()
        assert payload["total_investment"] == "105.00"
        assert payload["most_profitable_product"] is None
        assert payload["warnings"] == []


class TestAnalysisSnapshot:
    def test_net_worth(self):
        snapshot = build_analysis_snapshot(
            [_product("p1")],
            [_debt("d1", "payable", "40"), _debt("d2", "receivable", "25")],
        )
        assert snapshot.approx_assets == Decimal("105.00")
        assert snapshot.approx_liabilities == Decimal("40.00")
        assert snapshot.approx_net_worth == Decimal("65.00")
        assert snapshot.total_receivables_pending == Decimal("25.00")


class TestLoadedReports:
    def test_summary_report_from_database(self, product, make_debt):
        sales_service.record_sale(product.id, 10, sale_value=Decimal("50"))
        sales_service.record_sale(product.id, 5, is_loss=True, loss_reason="damaged")
        debt = make_debt(type="payable", amount="20")
        debt_service.register_payment(debt.id, "5")

        report = summary_report()

        assert report["total_investment"] == "105.00"
        assert report["total_profit"] == "5.00"
        assert report["total_payables_pending"] == "15.00"
        assert report["generated_at"].endswith("Z")

    def test_summary_follows_product_corrections(self, product):
        sales_service.record_sale(product.id, 10, sale_value=Decimal("50"))
        update_product(product_id=product.id, patch={"acquisition_value": Decimal("300")})

        report = summary_report()
        assert report["total_profit"] == "-10.00"
        assert report["recorded_profit"] == "20.00"

    def test_analysis_input_default_currency(self, product):
        payload = analysis_input()
        assert payload["currency_code"] == "MZN"
        assert payload["currency_symbol"] == "MT"
        assert payload["calculated"]["approx_assets"] == "150.00"
        assert len(payload["products"]) == 1

    def test_analysis_input_currency(self, db_session):
        assert analysis_input("brl")["currency_symbol"] == "R$"
        with pytest.raises(ValidationError):
            analysis_input("XYZ")
