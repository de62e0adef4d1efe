from __future__ import annotations

from ..extensions import db
from ..time_utils import to_utc_z, utcnow
from .common import MONEY, money_str, new_id


DEBT_TYPE_RECEIVABLE = "receivable"
DEBT_TYPE_PAYABLE = "payable"
DEBT_TYPES = (DEBT_TYPE_RECEIVABLE, DEBT_TYPE_PAYABLE)

DEBT_STATUS_PENDING = "pending"
DEBT_STATUS_PARTIALLY_PAID = "partially_paid"
DEBT_STATUS_PAID = "paid"
DEBT_STATUSES = (DEBT_STATUS_PENDING, DEBT_STATUS_PARTIALLY_PAID, DEBT_STATUS_PAID)


class Debt(db.Model):
    """
    Receivable (owed to the business) or payable (owed by the business).

    status and paid_at are derived from amount_paid vs amount and are only
    written by services.debt_service.recompute_status. They are stored so
    that listings and reports can filter on them without recomputation.

    related_sale_id is a traceability link only: deleting the debt never
    touches the sale, and deleting the sale only clears the link.
    """
    __tablename__ = "debts"
    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_debts_amount_positive"),
        db.CheckConstraint("amount_paid >= 0", name="ck_debts_amount_paid_nonnegative"),
        db.Index("ix_debts_type_status", "type", "status"),
        db.Index("ix_debts_created", "created_at", "id"),
    )

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    type = db.Column(db.String(16), nullable=False)
    description = db.Column(db.Text, nullable=False)

    amount = db.Column(MONEY, nullable=False)
    amount_paid = db.Column(MONEY, nullable=False, default=0)

    status = db.Column(db.String(16), nullable=False, default=DEBT_STATUS_PENDING)

    due_date = db.Column(db.DateTime(timezone=True), nullable=True)
    contact_name = db.Column(db.String(255), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=utcnow)
    paid_at = db.Column(db.DateTime(timezone=True), nullable=True)

    related_sale_id = db.Column(
        db.String(36),
        db.ForeignKey("sales.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    version_id = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version_id}

    def __repr__(self) -> str:
        return f"<Debt id={self.id} type={self.type} status={self.status} amount={self.amount}>"

    @property
    def remaining(self):
        return (self.amount or 0) - (self.amount_paid or 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "description": self.description,
            "amount": money_str(self.amount),
            "amount_paid": money_str(self.amount_paid),
            "remaining": money_str(self.remaining),
            "status": self.status,
            "due_date": to_utc_z(self.due_date) if self.due_date else None,
            "contact_name": self.contact_name,
            "created_at": to_utc_z(self.created_at),
            "paid_at": to_utc_z(self.paid_at) if self.paid_at else None,
            "related_sale_id": self.related_sale_id,
            "version_id": self.version_id,
        }
