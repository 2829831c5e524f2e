"""Inventory DTOs returned by the ledger's reporting queries."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class InventoryStatisticsDTO(BaseModel):
    """Immutable aggregate over every inventory record.

    ``average_quantity`` is integer-truncated and 0 when there are no records.
    """

    model_config = ConfigDict(frozen=True)

    total_items: int
    total_quantity: int
    low_stock_count: int
    average_quantity: int
