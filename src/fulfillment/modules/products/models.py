"""Product entity.

Business rules implemented:
- ``id`` is unique and never changes after creation.
- Price must be greater than zero; name and category must not be blank
  (enforced by ``ProductCatalog``).
- ``stock`` is not stored on the product: it reads through to the stock
  source (the inventory ledger), so product stock and inventory quantity
  can never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional, Protocol


class StockSource(Protocol):
    def quantity_of(self, product_id: str) -> int: ...


@dataclass(eq=False)
class Product:
    id: str
    name: str
    price: Decimal
    category: str
    stock_source: Optional[StockSource] = field(
        default=None, repr=False, compare=False
    )

    @property
    def stock(self) -> int:
        """Units on hand; 0 until the product is bound to a stock source."""
        if self.stock_source is None:
            return 0
        return self.stock_source.quantity_of(self.id)

    def __str__(self) -> str:
        return f"{self.id} - {self.name}"
