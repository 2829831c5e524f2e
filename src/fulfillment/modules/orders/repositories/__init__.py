"""Order repositories package."""

from fulfillment.modules.orders.repositories.interfaces import IOrderRepository
from fulfillment.modules.orders.repositories.memory_repository import (
    OrderMemoryRepository,
)

__all__ = ["IOrderRepository", "OrderMemoryRepository"]
