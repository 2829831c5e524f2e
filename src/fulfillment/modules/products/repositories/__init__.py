"""Product repositories package."""

from fulfillment.modules.products.repositories.interfaces import IProductRepository
from fulfillment.modules.products.repositories.memory_repository import (
    ProductMemoryRepository,
)

__all__ = ["IProductRepository", "ProductMemoryRepository"]
