"""Product domain exceptions.

Raised by ``ProductCatalog`` when preconditions are violated.
"""

from __future__ import annotations

from fulfillment.shared.domain.exceptions import ValidationError


class ProductAlreadyExists(ValidationError):
    """A product with the same id already exists."""


class ProductNotFound(ValidationError):
    """The requested product does not exist."""
