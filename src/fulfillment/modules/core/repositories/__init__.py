"""Generic repository contract and in-memory implementation."""

from fulfillment.modules.core.repositories.interfaces import IRepository
from fulfillment.modules.core.repositories.memory import InMemoryRepository

__all__ = ["IRepository", "InMemoryRepository"]
