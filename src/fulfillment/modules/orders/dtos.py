"""Order DTOs returned by the processor's reporting queries.

- ``OrderStatisticsDTO``: totals over every order.
- ``ProductSalesDTO``: units sold per product.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from pydantic import BaseModel, ConfigDict


class OrderStatisticsDTO(BaseModel):
    """Immutable aggregate over all orders, whatever their status.

    ``status_counts`` has an entry (possibly 0) for every status.
    ``average_order_amount`` is rounded to cents and 0 with no orders.
    """

    model_config = ConfigDict(frozen=True)

    total_orders: int
    total_sales: Decimal
    status_counts: Dict[str, int]
    average_order_amount: Decimal


class ProductSalesDTO(BaseModel):
    """Units of one product sold across all orders."""

    model_config = ConfigDict(frozen=True)

    product_id: str
    product_name: str
    quantity_sold: int
