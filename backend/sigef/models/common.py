from __future__ import annotations

import uuid
from decimal import Decimal

from ..extensions import db


# Money columns: two decimal places, stored exactly (never float)
MONEY = db.Numeric(14, 2, asdecimal=True)


def new_id() -> str:
    return str(uuid.uuid4())


def money_str(value) -> str | None:
    """Serialize a money value as a plain decimal string ("150.00")."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return format(value, "f")
