"""Generic repository interface (Dependency Inversion Principle).

Provides ``IRepository[T]``, the base abstract class that all
domain-specific repository interfaces extend.  Service-layer code
depends on this abstraction, never on a concrete store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the domain entity managed by the
    repository (e.g. ``Product``, ``Inventory``).  Entities are keyed by a
    string identifier.
    """

    @abstractmethod
    def add(self, entity: T) -> bool:
        """Store a new entity; return ``False`` if its key is already taken."""

    @abstractmethod
    def update(self, entity: T) -> bool:
        """Replace an existing entity; return ``False`` if its key is unknown."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an entity by ID; return ``False`` if nothing was removed."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an entity by its key."""

    @abstractmethod
    def list(
        self, predicate: Optional[Callable[[T], bool]] = None
    ) -> List[T]:
        """List entities in insertion order, optionally filtered."""

    @abstractmethod
    def exists(self, id: str) -> bool:
        """Return ``True`` if an entity is stored under *id*."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored entities."""
