"""Order domain exceptions.

Raised by ``OrderProcessor`` when business rules are violated.  Stock
errors raised while reserving or releasing come from
``fulfillment.modules.inventory.exceptions`` and are re-exported here for
convenience.
"""

from __future__ import annotations

from fulfillment.modules.inventory.exceptions import InsufficientStock, OverCapacity
from fulfillment.modules.products.exceptions import ProductNotFound
from fulfillment.shared.domain.exceptions import BusinessError, ValidationError

__all__ = [
    "InsufficientStock",
    "InvalidOrderStatus",
    "OrderAlreadyExists",
    "OrderNotCancellable",
    "OrderNotFound",
    "OverCapacity",
    "ProductNotFound",
]


class OrderNotFound(ValidationError):
    """The requested order does not exist."""


class OrderAlreadyExists(ValidationError):
    """An order with the same id already exists."""


class InvalidOrderStatus(BusinessError):
    """An invalid status transition was attempted."""


class OrderNotCancellable(BusinessError):
    """Only pending (unpaid) orders may be cancelled."""
