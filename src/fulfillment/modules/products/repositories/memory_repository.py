"""In-memory implementation of the Product repository."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from fulfillment.modules.core.repositories.memory import InMemoryRepository
from fulfillment.modules.products.models import Product
from fulfillment.modules.products.repositories.interfaces import IProductRepository


class ProductMemoryRepository(InMemoryRepository[Product], IProductRepository):
    """Concrete Product repository backed by a dict."""

    def key_of(self, entity: Product) -> str:
        return entity.id

    def search(
        self,
        keyword: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Product]:
        """Filter products; ``None`` or blank filters are not applied.

        Examples::

            repo.search(keyword="phone")
            repo.search(category="Books", max_price=Decimal("20"))
        """
        needle = keyword.strip().lower() if keyword and keyword.strip() else None
        category = category.strip() if category and category.strip() else None

        def matches(product: Product) -> bool:
            if needle is not None and needle not in product.name.lower():
                return False
            if category is not None and product.category != category:
                return False
            if min_price is not None and product.price < min_price:
                return False
            if max_price is not None and product.price > max_price:
                return False
            return True

        return self.list(matches)
