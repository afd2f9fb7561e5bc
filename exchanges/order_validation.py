"""
Order argument checks executed before any nonce is consumed or request sent.
"""

from __future__ import annotations

import math
from typing import List, Optional, Sequence

from exchanges.schemas import OrderType


class OrderValidationError(ValueError):
    """Raised when order arguments fail validation."""

    def __init__(self, violations: Sequence[str]) -> None:
        super().__init__("; ".join(violations))
        self.violations = list(violations)


def ensure_valid_order(order_type: OrderType, quantity: float, price: Optional[float]) -> None:
    """
    Check quantity and price for `order_type`. Limit orders need a positive
    price; market orders ignore `price` entirely.
    """
    violations: List[str] = []

    if not isinstance(order_type, OrderType):
        violations.append(f"Unsupported order type {order_type!r}.")

    if quantity is None or not math.isfinite(quantity) or quantity <= 0:
        violations.append("Order quantity must be greater than zero.")

    if isinstance(order_type, OrderType) and order_type.is_limit:
        if price is None:
            violations.append("Limit order requires an explicit price.")
        elif not math.isfinite(price) or price <= 0:
            violations.append("Limit price must be greater than zero.")

    if violations:
        raise OrderValidationError(violations)
