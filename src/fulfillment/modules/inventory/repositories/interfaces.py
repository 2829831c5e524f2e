"""Inventory repository interface.

Extends ``IRepository[Inventory]`` with the look-ups used by low-stock
monitoring.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, List

from fulfillment.modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from fulfillment.modules.inventory.models import Inventory


class IInventoryRepository(IRepository["Inventory"]):
    """Repository contract for inventory records keyed by product id."""

    @abstractmethod
    def get_low_stock_items(self) -> List[Inventory]:
        """Records whose quantity is below their minimum threshold."""

    @abstractmethod
    def find_by_quantity_range(self, low: int, high: int) -> List[Inventory]:
        """Records whose quantity lies in ``[low, high]``."""
