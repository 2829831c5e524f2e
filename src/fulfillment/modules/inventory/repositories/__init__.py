"""Inventory repositories package."""

from fulfillment.modules.inventory.repositories.interfaces import IInventoryRepository
from fulfillment.modules.inventory.repositories.memory_repository import (
    InventoryMemoryRepository,
)

__all__ = ["IInventoryRepository", "InventoryMemoryRepository"]
