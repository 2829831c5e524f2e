"""In-memory implementation of the Inventory repository."""

from __future__ import annotations

from typing import List

from fulfillment.modules.core.repositories.memory import InMemoryRepository
from fulfillment.modules.inventory.models import Inventory
from fulfillment.modules.inventory.repositories.interfaces import (
    IInventoryRepository,
)


class InventoryMemoryRepository(InMemoryRepository[Inventory], IInventoryRepository):
    """Concrete Inventory repository backed by a dict."""

    def key_of(self, entity: Inventory) -> str:
        return entity.product_id

    def get_low_stock_items(self) -> List[Inventory]:
        return self.list(lambda inv: inv.needs_warning())

    def find_by_quantity_range(self, low: int, high: int) -> List[Inventory]:
        return self.list(lambda inv: low <= inv.quantity <= high)
