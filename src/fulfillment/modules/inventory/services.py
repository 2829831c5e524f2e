"""Inventory ledger (Use Cases).

The ledger is the single owner of stock quantities.  Product stock is a
read-through to ``quantity_of`` so there is exactly one number per product.

Every mutation of a record happens while holding that product's lock, so
"check the rule" and "apply the change" are atomic with respect to other
writers of the same product.  Multi-product operations (``reserve`` /
``release``) take the locks in sorted order and validate every record
before mutating any of them.

Business rules enforced:
- Quantity is never negative.  Receipts never push it above
  ``max_capacity``; returning reserved units (``release`` with
  ``enforce_capacity=False``) restores it even past capacity.
- ``max_capacity`` must exceed ``min_threshold``; neither may be negative.
- One inventory record per product id.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Mapping, Optional, Union

import structlog

from fulfillment.modules.inventory.constants import StockOperation, parse_operation
from fulfillment.modules.inventory.dtos import InventoryStatisticsDTO
from fulfillment.modules.inventory.events import LowStockDetected
from fulfillment.modules.inventory.exceptions import (
    InsufficientStock,
    InventoryAlreadyExists,
    InventoryNotFound,
    OverCapacity,
)
from fulfillment.shared.domain.exceptions import ValidationError
from fulfillment.shared.domain.validation import (
    is_not_blank,
    require_int,
    require_not_blank,
)
from fulfillment.shared.infrastructure.locks import KeyedLock

if TYPE_CHECKING:
    from fulfillment.modules.inventory.models import Inventory
    from fulfillment.modules.inventory.repositories.interfaces import (
        IInventoryRepository,
    )
    from fulfillment.shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class InventoryLedger:
    """Application service for inventory bookkeeping.

    Receives an ``IInventoryRepository`` (and optionally an event bus) via
    constructor injection.
    """

    def __init__(
        self,
        repository: IInventoryRepository,
        event_bus: Optional[IEventBus] = None,
        locks: Optional[KeyedLock] = None,
    ) -> None:
        self._repo = repository
        self._event_bus = event_bus
        self._locks = locks or KeyedLock()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_inventory(self, inventory: Inventory) -> Inventory:
        """Register the inventory record of a product.

        Raises:
            ValidationError: invalid fields.
            InventoryAlreadyExists: the product already has a record.
        """
        self._validate(inventory)
        record = inventory.snapshot()

        with self._locks.hold(record.product_id):
            if not self._repo.add(record):
                raise InventoryAlreadyExists(
                    f"Inventory record already exists: {record.product_id}"
                )

        logger.info(
            "inventory.added",
            product_id=record.product_id,
            quantity=record.quantity,
        )
        return record.snapshot()

    def update_inventory(self, inventory: Inventory) -> Inventory:
        """Overwrite quantity, threshold and capacity of an existing record.

        Raises:
            ValidationError: invalid fields.
            InventoryNotFound: the product has no record.
        """
        self._validate(inventory)
        record = inventory.snapshot()

        with self._locks.hold(record.product_id):
            if not self._repo.update(record):
                raise InventoryNotFound(
                    f"Inventory record not found: {record.product_id}"
                )

        logger.info(
            "inventory.updated",
            product_id=record.product_id,
            quantity=record.quantity,
        )
        return record.snapshot()

    def adjust(
        self,
        product_id: str,
        amount: int,
        operation: Union[StockOperation, str],
    ) -> Inventory:
        """Increase or decrease the quantity of one product.

        Returns a snapshot of the updated record.

        Raises:
            ValidationError: blank id, non-positive amount or unknown operation.
            InventoryNotFound: the product has no record.
            OverCapacity: an increase would exceed ``max_capacity``.
            InsufficientStock: a decrease exceeds the quantity on hand.
        """
        require_not_blank(product_id, "Product id must not be blank.")
        self._require_amount(amount)
        op = parse_operation(operation)
        log = logger.bind(product_id=product_id, amount=amount, operation=op.value)

        with self._locks.hold(product_id):
            record = self._get_record(product_id)
            if op is StockOperation.INCREASE:
                self._check_capacity(record, amount)
                record.quantity += amount
            else:
                self._check_available(record, amount)
                record.quantity -= amount
            self._repo.update(record)
            result = record.snapshot()

        log.info("inventory.adjusted", quantity=result.quantity)
        if op is StockOperation.DECREASE:
            self._warn_if_low(result)
        return result

    def reserve(
        self,
        quantities: Mapping[str, int],
        notify: bool = True,
    ) -> Dict[str, int]:
        """Decrease several products as one all-or-nothing unit.

        Returns the remaining quantity per product.  With ``notify=False``
        no ``LowStockDetected`` is published; callers holding locks of their
        own use ``publish_low_stock`` once those are released.

        Raises:
            ValidationError: blank id or non-positive amount.
            InventoryNotFound: a product has no record.
            InsufficientStock: any product lacks stock (nothing is changed).
        """
        self._validate_quantities(quantities)

        with self._locks.hold(*quantities):
            records = {pid: self._get_record(pid) for pid in quantities}
            for pid, amount in quantities.items():
                self._check_available(records[pid], amount)
            for pid, amount in quantities.items():
                records[pid].quantity -= amount
                self._repo.update(records[pid])
            result = {pid: record.snapshot() for pid, record in records.items()}

        logger.info(
            "inventory.reserved",
            quantities=dict(quantities),
            remaining={pid: r.quantity for pid, r in result.items()},
        )
        if notify:
            for record in result.values():
                self._warn_if_low(record)
        return {pid: r.quantity for pid, r in result.items()}

    def publish_low_stock(self, product_ids: Iterable[str]) -> None:
        """Publish ``LowStockDetected`` for each tracked product now below threshold."""
        for product_id in product_ids:
            with self._locks.hold(product_id):
                record = self._repo.get_by_id(product_id)
                snapshot = record.snapshot() if record else None
            if snapshot is not None:
                self._warn_if_low(snapshot)

    def release(
        self,
        quantities: Mapping[str, int],
        enforce_capacity: bool = True,
    ) -> Dict[str, int]:
        """Increase several products as one all-or-nothing unit.

        Returns the resulting quantity per product.  Pass
        ``enforce_capacity=False`` when handing back units taken by
        ``reserve``: a reversal is not a receipt and must not be refused.

        Raises:
            ValidationError: blank id or non-positive amount.
            InventoryNotFound: a product has no record.
            OverCapacity: with ``enforce_capacity``, any product would exceed
                its capacity (nothing is changed).
        """
        self._validate_quantities(quantities)

        with self._locks.hold(*quantities):
            records = {pid: self._get_record(pid) for pid in quantities}
            if enforce_capacity:
                for pid, amount in quantities.items():
                    self._check_capacity(records[pid], amount)
            for pid, amount in quantities.items():
                records[pid].quantity += amount
                self._repo.update(records[pid])
            result = {pid: record.quantity for pid, record in records.items()}
            over = sorted(
                pid for pid, r in records.items() if r.quantity > r.max_capacity
            )

        logger.info("inventory.released", quantities=dict(quantities), current=result)
        if over:
            logger.warning("inventory.over_capacity_after_release", product_ids=over)
        return result

    def delete(self, product_id: str) -> bool:
        """Remove the record of a product.

        Idempotent: deleting a missing record is a no-op returning ``False``.
        """
        if not is_not_blank(product_id):
            return False
        with self._locks.hold(product_id):
            removed = self._repo.delete(product_id)
        if removed:
            logger.info("inventory.deleted", product_id=product_id)
        else:
            logger.debug("inventory.delete_skipped", product_id=product_id)
        return removed

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_product_id(self, product_id: str) -> Inventory:
        """Return a snapshot of the record of *product_id*.

        Raises:
            ValidationError: blank id.
            InventoryNotFound: the product has no record.
        """
        require_not_blank(product_id, "Product id must not be blank.")
        with self._locks.hold(product_id):
            return self._get_record(product_id).snapshot()

    def get_all(self) -> List[Inventory]:
        return [self._snapshot(record) for record in self._repo.list()]

    def low_stock_items(self) -> List[Inventory]:
        return [self._snapshot(r) for r in self._repo.get_low_stock_items()]

    def find_by_quantity_range(self, low: int, high: int) -> List[Inventory]:
        return [self._snapshot(r) for r in self._repo.find_by_quantity_range(low, high)]

    def sorted_by_quantity(self, ascending: bool = True) -> List[Inventory]:
        """All records ordered by quantity; equal quantities keep insertion order."""
        records = self.get_all()
        if ascending:
            return sorted(records, key=lambda r: r.quantity)
        # negate instead of reverse=True so ties stay in insertion order
        return sorted(records, key=lambda r: -r.quantity)

    def statistics(self) -> InventoryStatisticsDTO:
        records = self.get_all()
        total_items = len(records)
        total_quantity = sum(r.quantity for r in records)
        return InventoryStatisticsDTO(
            total_items=total_items,
            total_quantity=total_quantity,
            low_stock_count=sum(1 for r in records if r.needs_warning()),
            average_quantity=total_quantity // total_items if total_items else 0,
        )

    def exists(self, product_id: str) -> bool:
        return self._repo.exists(product_id)

    def quantity_of(self, product_id: str) -> int:
        """Quantity on hand, 0 when the product has no record."""
        with self._locks.hold(product_id):
            record = self._repo.get_by_id(product_id)
            return record.quantity if record else 0

    def needs_warning(self, product_id: str) -> bool:
        return self.get_by_product_id(product_id).needs_warning()

    def can_stock_in(self, product_id: str, amount: int) -> bool:
        return not self.get_by_product_id(product_id).is_over_capacity(amount)

    def can_stock_out(self, product_id: str, amount: int) -> bool:
        return self.get_by_product_id(product_id).quantity >= amount

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _snapshot(self, record: Inventory) -> Inventory:
        with self._locks.hold(record.product_id):
            return record.snapshot()

    def _get_record(self, product_id: str) -> Inventory:
        record = self._repo.get_by_id(product_id)
        if record is None:
            raise InventoryNotFound(f"Inventory record not found: {product_id}")
        return record

    @staticmethod
    def _require_amount(amount: int) -> None:
        require_int(amount, "Amount must be an integer.")
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero.")

    def _validate_quantities(self, quantities: Mapping[str, int]) -> None:
        if not quantities:
            raise ValidationError("At least one product quantity is required.")
        for product_id, amount in quantities.items():
            require_not_blank(product_id, "Product id must not be blank.")
            self._require_amount(amount)

    @staticmethod
    def _check_available(record: Inventory, amount: int) -> None:
        if record.quantity < amount:
            raise InsufficientStock(
                f"insufficient stock for product {record.product_id}: "
                f"requested {amount}, available {record.quantity}."
            )

    @staticmethod
    def _check_capacity(record: Inventory, amount: int) -> None:
        if record.is_over_capacity(amount):
            raise OverCapacity(
                f"over capacity for product {record.product_id}: "
                f"{record.quantity} + {amount} exceeds {record.max_capacity}."
            )

    @staticmethod
    def _validate(inventory: Inventory) -> None:
        if inventory is None:
            raise ValidationError("Inventory must not be empty.")
        require_not_blank(inventory.product_id, "Product id must not be blank.")
        for name in ("quantity", "min_threshold", "max_capacity"):
            require_int(getattr(inventory, name), f"{name} must be an integer.")
        if inventory.quantity < 0:
            raise ValidationError("Quantity cannot be negative.")
        if inventory.min_threshold < 0:
            raise ValidationError("Minimum threshold cannot be negative.")
        if inventory.max_capacity <= inventory.min_threshold:
            raise ValidationError(
                "Maximum capacity must be greater than the minimum threshold."
            )
        if inventory.quantity > inventory.max_capacity:
            raise ValidationError("Quantity cannot exceed the maximum capacity.")

    def _warn_if_low(self, record: Inventory) -> None:
        if not record.needs_warning() or self._event_bus is None:
            return
        self._event_bus.publish(
            LowStockDetected(
                aggregate_id=record.product_id,
                quantity=record.quantity,
                min_threshold=record.min_threshold,
            )
        )
