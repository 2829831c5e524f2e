"""Order repository interface.

Extends ``IRepository[Order]`` with the look-ups used by order search and
reporting.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, List, Optional

from fulfillment.modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from fulfillment.modules.orders.constants import OrderStatus
    from fulfillment.modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def find_by_customer(self, customer_id: str) -> List[Order]:
        """Orders placed by *customer_id*."""

    @abstractmethod
    def find_by_status(self, status: OrderStatus) -> List[Order]:
        """Orders currently in *status*."""

    @abstractmethod
    def search(
        self,
        customer_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        """Orders matching every supplied filter."""

    @abstractmethod
    def status_counts(self) -> Dict[OrderStatus, int]:
        """Number of orders per status (statuses without orders omitted)."""
