from .inventory import Product
from .sales import Sale
from .debts import (
    Debt,
    DEBT_TYPES,
    DEBT_TYPE_RECEIVABLE,
    DEBT_TYPE_PAYABLE,
    DEBT_STATUSES,
    DEBT_STATUS_PENDING,
    DEBT_STATUS_PARTIALLY_PAID,
    DEBT_STATUS_PAID,
)

__all__ = [
    'Product',
    'Sale',
    'Debt', 'DEBT_TYPES', 'DEBT_TYPE_RECEIVABLE', 'DEBT_TYPE_PAYABLE',
    'DEBT_STATUSES', 'DEBT_STATUS_PENDING', 'DEBT_STATUS_PARTIALLY_PAID', 'DEBT_STATUS_PAID',
]
