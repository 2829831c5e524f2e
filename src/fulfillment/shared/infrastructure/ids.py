"""Identifier generation.

Identifiers only need to be unique; the formats below mirror the
human-readable ones used on the sales floor:

- products:  ``P-YYYYMMDD-NNNN``
- orders:    ``O-YYYYMMDDHHMMSS-NNNNN``
- customers: ``C-xxxxxxxx`` (8 random hex chars)
"""

from __future__ import annotations

import itertools
import secrets
import threading
from datetime import datetime
from typing import Callable, Optional, Protocol, Set

PRODUCT_SEQUENCE_START = 1000
ORDER_SEQUENCE_START = 10000
CUSTOMER_ID_MAX_RETRIES = 5


class IIdGenerator(Protocol):
    def new_product_id(self) -> str: ...

    def new_order_id(self) -> str: ...

    def new_customer_id(self) -> str: ...


class SequentialIdGenerator(IIdGenerator):
    """Thread-safe generator backed by process-local counters."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        self._clock = clock or datetime.now
        self._products = itertools.count(PRODUCT_SEQUENCE_START)
        self._orders = itertools.count(ORDER_SEQUENCE_START)
        self._issued_customers: Set[str] = set()
        self._lock = threading.Lock()

    def new_product_id(self) -> str:
        with self._lock:
            seq = next(self._products)
        return f"P-{self._clock():%Y%m%d}-{seq:04d}"

    def new_order_id(self) -> str:
        with self._lock:
            seq = next(self._orders)
        return f"O-{self._clock():%Y%m%d%H%M%S}-{seq:05d}"

    def new_customer_id(self) -> str:
        with self._lock:
            for _ in range(CUSTOMER_ID_MAX_RETRIES):
                candidate = f"C-{secrets.token_hex(4)}"
                if candidate not in self._issued_customers:
                    self._issued_customers.add(candidate)
                    return candidate
        raise RuntimeError(
            f"Failed to generate unique customer id after "
            f"{CUSTOMER_ID_MAX_RETRIES} attempts"
        )
