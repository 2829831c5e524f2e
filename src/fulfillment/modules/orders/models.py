"""Order, OrderItem, and StatusChange models.

Business rules implemented:
- Status transitions follow ``VALID_TRANSITIONS``; anything else raises
  ``InvalidOrderStatus`` and leaves the status unchanged.
- Each status change appends a ``StatusChange`` record to ``history``.
- OrderItem snapshots product name and price at order time.
- OrderItem subtotal is always ``quantity * price`` (derived, never stored).
- Order total is always the sum of item subtotals (derived, never stored).
- ``created_at`` is set once at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional

from fulfillment.modules.orders.constants import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    OrderStatus,
)
from fulfillment.modules.orders.exceptions import InvalidOrderStatus
from fulfillment.shared.domain.events import DomainEventMixin

if TYPE_CHECKING:
    from fulfillment.modules.customers.models import Customer


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class OrderItem:
    """Line item of an order.

    ``product_name`` and ``price`` may be left unset by the caller; the
    processor stamps them from the catalog when the order is created.
    """

    product_id: str
    quantity: int
    product_name: Optional[str] = None
    price: Optional[Decimal] = None

    @property
    def subtotal(self) -> Decimal:
        if self.price is None:
            return Decimal("0.00")
        return self.price * self.quantity

    def __str__(self) -> str:
        label = self.product_name or self.product_id
        return f"{label} x{self.quantity} ({self.subtotal})"


@dataclass(frozen=True)
class StatusChange:
    """Append-only audit record of one status transition.

    ``old_status`` is ``None`` for the record written at creation.
    """

    old_status: Optional[OrderStatus]
    new_status: OrderStatus
    notes: str = ""
    changed_at: datetime = field(default_factory=_now)


class Order(DomainEventMixin):
    """Order aggregate root.

    Holds a reference to its ``Customer`` without owning it.
    """

    def __init__(
        self,
        order_id: str,
        customer: Optional[Customer],
        items: Optional[List[OrderItem]] = None,
        status: OrderStatus = OrderStatus.PENDING,
        created_at: Optional[datetime] = None,
    ) -> None:
        self.order_id = order_id
        self.customer = customer
        self.items: List[OrderItem] = list(items or [])
        self.status = status
        self._created_at = created_at or _now()
        self.history: List[StatusChange] = []

    # ------------------------------------------------------------------
    # Items & totals
    # ------------------------------------------------------------------

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def total_amount(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0.00"))

    def add_item(self, item: OrderItem) -> None:
        self.items.append(item)

    def remove_item(self, product_id: str) -> bool:
        """Drop every item of *product_id*; return whether any was removed."""
        remaining = [item for item in self.items if item.product_id != product_id]
        removed = len(remaining) != len(self.items)
        self.items = remaining
        return removed

    def quantities_by_product(self) -> Dict[str, int]:
        """Total quantity per product id, summing repeated items."""
        quantities: Dict[str, int] = {}
        for item in self.items:
            quantities[item.product_id] = (
                quantities.get(item.product_id, 0) + item.quantity
            )
        return quantities

    @property
    def customer_id(self) -> Optional[str]:
        return self.customer.id if self.customer is not None else None

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: OrderStatus) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    def transition_to(self, new_status: OrderStatus, notes: str = "") -> StatusChange:
        """Move to *new_status* and record it in ``history``.

        Raises:
            InvalidOrderStatus: the transition is not allowed.
        """
        if not self.can_transition_to(new_status):
            raise InvalidOrderStatus(
                f"Cannot transition from {self.status} to {new_status}."
            )
        change = StatusChange(
            old_status=self.status, new_status=new_status, notes=notes
        )
        self.status = new_status
        self.history.append(change)
        return change

    def mark_created(self, notes: str = "Order created") -> None:
        """Reset to ``PENDING`` and write the initial history record."""
        self.status = OrderStatus.PENDING
        self.history = [
            StatusChange(old_status=None, new_status=OrderStatus.PENDING, notes=notes)
        ]

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __repr__(self) -> str:
        return (
            f"Order(order_id={self.order_id!r}, status={self.status.value}, "
            f"items={len(self.items)}, total={self.total_amount})"
        )

    def __str__(self) -> str:
        return f"{self.order_id} ({self.status})"
