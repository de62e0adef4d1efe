from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import MONEY, money_str, new_id


class Sale(db.Model):
    """
    Sale or loss record (same entity, two modes selected by is_loss).

    WHY one table: a loss is a stock exit with no revenue; it shares every
    column with a sale except sale_value (0) and loss_reason (required).

    profit is a snapshot taken when the row is created, from the product's
    unit cost at that moment. It is never recomputed, even if the product's
    acquisition_value is edited later. Rows are immutable: they are created
    together with a stock decrement and deleted together with the matching
    stock increment.
    """
    __tablename__ = "sales"
    __table_args__ = (
        db.CheckConstraint("quantity_sold > 0", name="ck_sales_quantity_positive"),
        db.Index("ix_sales_product_created", "product_id", "created_at"),
        db.Index("ix_sales_created", "created_at", "id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    product_id = db.Column(
        db.String(36),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Denormalized at creation time; not kept in sync with Product.name
    product_name = db.Column(db.String(255), nullable=False)

    quantity_sold = db.Column(db.Integer, nullable=False)
    sale_value = db.Column(MONEY, nullable=False, default=0)

    is_loss = db.Column(db.Boolean, nullable=False, default=False, index=True)
    loss_reason = db.Column(db.Text, nullable=True)

    profit = db.Column(MONEY, nullable=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    product = db.relationship("Product", back_populates="sales")

    def __repr__(self) -> str:
        kind = "loss" if self.is_loss else "sale"
        return f"<Sale id={self.id} {kind} product_id={self.product_id} qty={self.quantity_sold}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity_sold": self.quantity_sold,
            "sale_value": money_str(self.sale_value),
            "is_loss": self.is_loss,
            "loss_reason": self.loss_reason,
            "profit": money_str(self.profit),
            "created_at": to_utc_z(self.created_at),
        }
