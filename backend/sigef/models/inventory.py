from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import MONEY, money_str, new_id


class Product(db.Model):
    """
    Product master data and current stock.

    STOCK DESIGN DECISION:
    Product.quantity is a mutable on-hand counter, not a ledger sum.
    - Only services.inventory_service.reserve/release change it during
      sale, loss and reversal flows.
    - quantity >= 0 is enforced by a CHECK constraint and by reserve().

    UNIT COST:
    acquisition_value is the total paid for the initial batch.
    initial_quantity is the fixed denominator for unit cost; it defaults to
    quantity at creation and is never touched by stock movements.
    """
    __tablename__ = "products"
    __table_args__ = (
        db.CheckConstraint("quantity >= 0", name="ck_products_quantity_nonnegative"),
        db.Index("ix_products_created", "created_at", "id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(255), nullable=False)

    acquisition_value = db.Column(MONEY, nullable=False, default=0)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    initial_quantity = db.Column(db.Integer, nullable=True)

    version_id = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)

    sales = db.relationship(
        "Sale",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy=True,
    )
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Product id={self.id} name={self.name!r} quantity={self.quantity}>"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "acquisition_value": money_str(self.acquisition_value),
            "quantity": self.quantity,
            "initial_quantity": self.initial_quantity,
            "version_id": self.version_id,
            "created_at": to_utc_z(self.created_at),
        }
