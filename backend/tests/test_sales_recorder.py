# Overview: Pytest coverage for recording and reversing sales and losses.

"""
Sales recorder tests.

Walks one product through a sale, a loss and a rejected oversell, and
checks that deleting a row restores exactly the stock it took.
"""

from decimal import Decimal

import pytest
from sqlalchemy import text

from sigef.extensions import db
from sigef.models import Debt, Product, Sale
from sigef.services import debt_service, sales_service
from sigef.services.errors import (
    InsufficientStock,
    InvalidLossReason,
    InvalidQuantity,
    ProductNotFound,
    SaleNotFound,
)
from sigef.services.products_service import delete_product, update_product
from sigef.validation import ValidationError


def _quantity(product_id):
    db.session.expire_all()
    return db.session.get(Product, product_id).quantity


class TestRecordSale:
    def test_sale_profit_and_stock(self, product):
        sale = sales_service.record_sale(product.id, 10, sale_value=Decimal("50"))

        assert sale.profit == Decimal("20.00")
        assert sale.is_loss is False
        assert sale.loss_reason is None
        assert sale.product_name == "Arroz 25kg"
        assert _quantity(product.id) == 40

    def test_loss_profit_and_stock(self, product):
        sales_service.record_sale(product.id, 10, sale_value=Decimal("50"))
        loss = sales_service.record_sale(product.id, 5, is_loss=True, loss_reason="damaged")

        assert loss.profit == Decimal("-15.00")
        assert loss.sale_value == Decimal("0.00")
        assert loss.loss_reason == "damaged"
        assert _quantity(product.id) == 35

    def test_loss_stores_zero_sale_value(self, product):
        loss = sales_service.record_sale(
            product.id, 2, sale_value=Decimal("99"), is_loss=True, loss_reason="stolen"
        )
        assert loss.sale_value == Decimal("0.00")
        assert loss.profit == Decimal("-6.00")

    def test_oversell_is_rejected_and_stock_kept(self, product):
        sales_service.record_sale(product.id, 15, sale_value=Decimal("75"))

        with pytest.raises(InsufficientStock):
            sales_service.record_sale(product.id, 1000, sale_value=Decimal("1"))

        assert _quantity(product.id) == 35
        assert db.session.query(Sale).count() == 1

    def test_sell_entire_stock(self, product):
        sales_service.record_sale(product.id, 50, sale_value=Decimal("200"))
        assert _quantity(product.id) == 0

    def test_loss_requires_reason(self, product):
        with pytest.raises(InvalidLossReason):
            sales_service.record_sale(product.id, 1, is_loss=True, loss_reason="   ")
        assert _quantity(product.id) == 50

    @pytest.mark.parametrize("qty", [0, -3, 2.5])
    def test_invalid_quantity(self, product, qty):
        with pytest.raises(InvalidQuantity):
            sales_service.record_sale(product.id, qty, sale_value=Decimal("1"))

    def test_negative_sale_value(self, product):
        with pytest.raises(ValidationError):
            sales_service.record_sale(product.id, 1, sale_value=Decimal("-1"))

    def test_unknown_product(self, db_session):
        with pytest.raises(ProductNotFound):
            sales_service.record_sale("missing", 1, sale_value=Decimal("1"))

    def test_profit_uses_current_quantity_when_initial_unset(self, make_product):
        p = make_product(acquisition_value="100", quantity=20)
        update_product(product_id=p.id, patch={"initial_quantity": None})

        # cost taken before the stock moves: 100 / 20 = 5 per unit
        sale = sales_service.record_sale(p.id, 4, sale_value=Decimal("40"))
        assert sale.profit == Decimal("20.00")

    def test_profit_is_a_snapshot(self, product):
        sale = sales_service.record_sale(product.id, 10, sale_value=Decimal("50"))
        update_product(product_id=product.id, patch={"acquisition_value": Decimal("500")})

        db.session.expire_all()
        assert db.session.get(Sale, sale.id).profit == Decimal("20.00")


class TestDeleteSale:
    def test_reversal_restores_stock(self, product):
        sale = sales_service.record_sale(product.id, 10, sale_value=Decimal("50"))
        loss = sales_service.record_sale(product.id, 5, is_loss=True, loss_reason="expired")

        sales_service.delete_sale(loss.id)
        assert _quantity(product.id) == 40
        sales_service.delete_sale(sale.id)
        assert _quantity(product.id) == 50
        assert db.session.query(Sale).count() == 0

    def test_returns_deleted_row(self, product):
        sale = sales_service.record_sale(product.id, 3, sale_value=Decimal("12"))
        deleted = sales_service.delete_sale(sale.id)
        assert deleted["id"] == sale.id
        assert deleted["quantity_sold"] == 3

    def test_unknown_sale(self, db_session):
        with pytest.raises(SaleNotFound):
            sales_service.delete_sale("missing")

    def test_clears_debt_link(self, product, make_debt):
        sale = sales_service.record_sale(product.id, 2, sale_value=Decimal("10"))
        debt = make_debt(related_sale_id=sale.id)

        sales_service.delete_sale(sale.id)

        db.session.expire_all()
        kept = db.session.get(Debt, debt.id)
        assert kept is not None
        assert kept.related_sale_id is None

    def test_orphan_sale_is_deleted_without_stock_change(self, product):
        sale = sales_service.record_sale(product.id, 2, sale_value=Decimal("10"))
        # Simulate a row left behind by a database without cascading deletes
        db.session.execute(
            text("UPDATE sales SET product_id = :pid WHERE id = :sid"),
            {"pid": "gone", "sid": sale.id},
        )
        db.session.commit()

        deleted = sales_service.delete_sale(sale.id)
        assert deleted["product_id"] == "gone"
        assert _quantity(product.id) == 48


class TestListing:
    def test_filters(self, product):
        sales_service.record_sale(product.id, 1, sale_value=Decimal("5"))
        sales_service.record_sale(product.id, 1, is_loss=True, loss_reason="broken")

        assert sales_service.list_sales()["count"] == 2
        assert sales_service.list_sales(is_loss=True)["count"] == 1
        assert sales_service.list_sales(is_loss=False)["items"][0]["sale_value"] == "5.00"
        assert sales_service.list_sales(product_id="other")["count"] == 0

    def test_delete_product_cascades_sales(self, product, make_debt):
        sale = sales_service.record_sale(product.id, 1, sale_value=Decimal("5"))
        debt = make_debt(related_sale_id=sale.id)

        delete_product(product_id=product.id)

        db.session.expire_all()
        assert db.session.query(Sale).count() == 0
        assert db.session.get(Debt, debt.id).related_sale_id is None
        assert debt_service.get_debt(debt.id).status == "pending"
