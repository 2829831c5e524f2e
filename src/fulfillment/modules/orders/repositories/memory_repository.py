"""In-memory implementation of the Order repository.

Orders are stored by reference: the aggregate keeps pointing at the
caller's ``Customer`` so spending updates are visible to every holder.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, List, Optional

from fulfillment.modules.core.repositories.memory import InMemoryRepository
from fulfillment.modules.orders.constants import OrderStatus
from fulfillment.modules.orders.models import Order
from fulfillment.modules.orders.repositories.interfaces import IOrderRepository


class OrderMemoryRepository(InMemoryRepository[Order], IOrderRepository):
    """Concrete Order repository backed by a dict."""

    def key_of(self, entity: Order) -> str:
        return entity.order_id

    def find_by_customer(self, customer_id: str) -> List[Order]:
        return self.search(customer_id=customer_id)

    def find_by_status(self, status: OrderStatus) -> List[Order]:
        return self.search(status=status)

    def search(
        self,
        customer_id: Optional[str] = None,
        status: Optional[OrderStatus] = None,
    ) -> List[Order]:
        def matches(order: Order) -> bool:
            if customer_id is not None and order.customer_id != customer_id:
                return False
            if status is not None and order.status != status:
                return False
            return True

        return self.list(matches)

    def status_counts(self) -> Dict[OrderStatus, int]:
        return dict(Counter(order.status for order in self.list()))
