"""Volatile, dict-backed implementation of ``IRepository``.

State lives in process memory only.  A durable store can replace these
classes behind the same interfaces without touching the services.
"""

from __future__ import annotations

import threading
from typing import Callable, Dict, Generic, List, Optional, TypeVar

from fulfillment.modules.core.repositories.interfaces import IRepository

T = TypeVar("T")


class InMemoryRepository(IRepository[T], Generic[T]):
    """Thread-safe map of ``key -> entity`` preserving insertion order.

    Subclasses supply ``key_of`` to extract the identifier from an entity.
    """

    def __init__(self) -> None:
        self._items: Dict[str, T] = {}
        self._lock = threading.RLock()

    def key_of(self, entity: T) -> str:
        raise NotImplementedError

    def add(self, entity: T) -> bool:
        key = self.key_of(entity)
        with self._lock:
            if key in self._items:
                return False
            self._items[key] = entity
            return True

    def update(self, entity: T) -> bool:
        key = self.key_of(entity)
        with self._lock:
            if key not in self._items:
                return False
            self._items[key] = entity
            return True

    def delete(self, id: str) -> bool:
        with self._lock:
            return self._items.pop(id, None) is not None

    def get_by_id(self, id: str) -> Optional[T]:
        with self._lock:
            return self._items.get(id)

    def list(self, predicate: Optional[Callable[[T], bool]] = None) -> List[T]:
        with self._lock:
            items = list(self._items.values())
        if predicate is None:
            return items
        return [item for item in items if predicate(item)]

    def exists(self, id: str) -> bool:
        with self._lock:
            return id in self._items

    def count(self) -> int:
        with self._lock:
            return len(self._items)
