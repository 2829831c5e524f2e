"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups used by catalog search.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional

from fulfillment.modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from fulfillment.modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def search(
        self,
        keyword: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Product]:
        """Products matching every supplied filter, in insertion order."""
