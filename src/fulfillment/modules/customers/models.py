"""Customer entity.

Customers are referenced by orders but their lifecycle is managed outside
the fulfillment core.  ``total_spent`` only ever grows: every created order
adds its total, cancellations do not refund it.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from fulfillment.shared.domain.exceptions import ValidationError


@dataclass(eq=False)
class Customer:
    id: str
    name: str
    phone: str = ""
    address: Optional[str] = None
    total_spent: Decimal = Decimal("0.00")
    _lock: threading.Lock = field(
        default_factory=threading.Lock, init=False, repr=False, compare=False
    )

    def add_spent(self, amount: Decimal) -> Decimal:
        """Add *amount* to ``total_spent`` and return the new total."""
        if amount < 0:
            raise ValidationError("Spent amount cannot be negative.")
        with self._lock:
            self.total_spent += amount
            return self.total_spent

    def __str__(self) -> str:
        return f"{self.id} - {self.name}"
