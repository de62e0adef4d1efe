# Overview: Shared error-to-response mapping for the API blueprints.

from __future__ import annotations

from ..services.errors import (
    InsufficientStock,
    InvalidLossReason,
    InvalidQuantity,
    NotFoundError,
    PaymentExceedsDebt,
    SigefError,
)

_STATUS_BY_ERROR = (
    (NotFoundError, 404),
    (InsufficientStock, 409),
    (PaymentExceedsDebt, 409),
    (InvalidLossReason, 400),
    (InvalidQuantity, 400),
)


def domain_error_response(exc: SigefError):
    for kind, status in _STATUS_BY_ERROR:
        if isinstance(exc, kind):
            return exc.to_dict(), status
    return exc.to_dict(), 400
