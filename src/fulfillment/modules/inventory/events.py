"""Domain events for the Inventory bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from fulfillment.shared.domain.events import DomainEvent


@dataclass(frozen=True)
class LowStockDetected(DomainEvent):
    """Raised when a decrease leaves a record below its minimum threshold.

    ``aggregate_id`` is the product id.
    """

    quantity: int = 0
    min_threshold: int = 0
