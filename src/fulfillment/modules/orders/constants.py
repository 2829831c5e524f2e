"""Order domain constants.

Defines status choices and valid status transitions for the order
state machine.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from fulfillment.shared.domain.exceptions import ValidationError


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    def __str__(self) -> str:
        return self.value


VALID_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[OrderStatus] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

# Only orders that have not been paid may be cancelled through cancel_order.
CANCELLABLE_STATES: set[OrderStatus] = {OrderStatus.PENDING}


def parse_status(status: Union[OrderStatus, str, None]) -> OrderStatus:
    """Resolve *status* (enum or case-insensitive name) or raise ``ValidationError``."""
    if isinstance(status, OrderStatus):
        return status
    if status is None or not str(status).strip():
        raise ValidationError("Order status must not be blank.")
    try:
        return OrderStatus(str(status).strip().upper())
    except ValueError:
        raise ValidationError(f"Unknown order status: {status!r}.") from None


def optional_status(status: Union[OrderStatus, str, None]) -> Optional[OrderStatus]:
    """Like ``parse_status`` but maps ``None``/blank to ``None``."""
    if status is None or (isinstance(status, str) and not status.strip()):
        return None
    return parse_status(status)
