# Overview: Domain error kinds raised by the service layer.

"""
Every error carries a stable ``code`` so that callers (routes, CLI, tests)
can tell kinds apart without parsing messages, and a ``details`` dict with
the values that caused it.
"""

from __future__ import annotations


class SigefError(Exception):
    """Base class for domain rule violations."""

    code = "SIGEF_ERROR"

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}

    def to_dict(self) -> dict:
        return {"error": str(self), "code": self.code, "details": self.details}


class NotFoundError(SigefError):
    code = "NOT_FOUND"


class ProductNotFound(NotFoundError):
    code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str):
        super().__init__("Product not found", details={"product_id": product_id})


class SaleNotFound(NotFoundError):
    code = "SALE_NOT_FOUND"

    def __init__(self, sale_id: str):
        super().__init__("Sale not found", details={"sale_id": sale_id})


class DebtNotFound(NotFoundError):
    code = "DEBT_NOT_FOUND"

    def __init__(self, debt_id: str):
        super().__init__("Debt not found", details={"debt_id": debt_id})


class InsufficientStock(SigefError):
    """Requested quantity exceeds the product's current stock."""

    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: str, requested: int, available: int):
        super().__init__(
            "Insufficient stock for sale/loss",
            details={
                "product_id": product_id,
                "requested_quantity": requested,
                "on_hand": available,
            },
        )


class InvalidLossReason(SigefError):
    code = "INVALID_LOSS_REASON"

    def __init__(self):
        super().__init__("A loss requires a non-empty loss_reason")


class InvalidQuantity(SigefError):
    code = "INVALID_QUANTITY"


class PaymentExceedsDebt(SigefError):
    code = "PAYMENT_EXCEEDS_DEBT"

    def __init__(self, debt_id: str | None, amount, amount_paid):
        super().__init__(
            "amount_paid cannot exceed the debt amount",
            details={
                "debt_id": debt_id,
                "amount": str(amount),
                "amount_paid": str(amount_paid),
            },
        )
