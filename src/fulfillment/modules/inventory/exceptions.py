"""Inventory domain exceptions.

Raised by ``InventoryLedger`` when preconditions or stock rules are
violated.  Messages of the two stock rules start with the lowercase rule
name ("insufficient stock", "over capacity") so callers can match on it.
"""

from __future__ import annotations

from fulfillment.shared.domain.exceptions import BusinessError, ValidationError


class InventoryNotFound(ValidationError):
    """No inventory record exists for the product."""


class InventoryAlreadyExists(ValidationError):
    """An inventory record already exists for the product."""


class InsufficientStock(BusinessError):
    """The requested quantity exceeds the quantity on hand."""


class OverCapacity(BusinessError):
    """The increase would push the quantity above ``max_capacity``."""
