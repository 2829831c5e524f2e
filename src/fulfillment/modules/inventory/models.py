"""Inventory record: quantity on hand plus its threshold and capacity.

Business rules implemented:
- Quantity never negative and never above ``max_capacity``.
- ``max_capacity`` strictly greater than ``min_threshold``.
- Low stock means ``quantity < min_threshold``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_MIN_THRESHOLD = 10
DEFAULT_MAX_CAPACITY = 1000


@dataclass
class Inventory:
    product_id: str
    quantity: int = 0
    min_threshold: int = DEFAULT_MIN_THRESHOLD
    max_capacity: int = DEFAULT_MAX_CAPACITY

    def needs_warning(self) -> bool:
        return self.quantity < self.min_threshold

    def is_over_capacity(self, add_amount: int) -> bool:
        return self.quantity + add_amount > self.max_capacity

    def snapshot(self) -> Inventory:
        return replace(self)

    def __str__(self) -> str:
        return (
            f"{self.product_id}: {self.quantity} "
            f"(min {self.min_threshold}, max {self.max_capacity})"
        )
