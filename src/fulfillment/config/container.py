"""Composition root.

Builds every service exactly once and wires the event handlers.  Callers
receive the services through the returned ``Container`` and pass them on
explicitly; nothing in the package reaches for a global instance.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import structlog

from fulfillment.config.logging_config import configure_logging
from fulfillment.modules.inventory.events import LowStockDetected
from fulfillment.modules.inventory.handlers import low_stock_warning_handler
from fulfillment.modules.inventory.repositories import InventoryMemoryRepository
from fulfillment.modules.inventory.services import InventoryLedger
from fulfillment.modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from fulfillment.modules.orders.handlers import (
    order_cancelled_handler,
    order_created_handler,
    order_status_changed_handler,
)
from fulfillment.modules.orders.repositories import OrderMemoryRepository
from fulfillment.modules.orders.services import OrderProcessor
from fulfillment.modules.products.repositories import ProductMemoryRepository
from fulfillment.modules.products.services import ProductCatalog
from fulfillment.shared.infrastructure.bus import InMemoryEventBus
from fulfillment.shared.infrastructure.ids import IIdGenerator, SequentialIdGenerator

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Container:
    event_bus: InMemoryEventBus
    ids: IIdGenerator
    ledger: InventoryLedger
    catalog: ProductCatalog
    orders: OrderProcessor


def register_handlers(event_bus: InMemoryEventBus) -> None:
    event_bus.subscribe(LowStockDetected, low_stock_warning_handler)
    event_bus.subscribe(OrderCreated, order_created_handler)
    event_bus.subscribe(OrderCancelled, order_cancelled_handler)
    event_bus.subscribe(OrderStatusChanged, order_status_changed_handler)


def build_container(
    event_bus: Optional[InMemoryEventBus] = None,
    ids: Optional[IIdGenerator] = None,
) -> Container:
    """Wire repositories, services and handlers into a fresh ``Container``."""
    event_bus = event_bus or InMemoryEventBus()
    register_handlers(event_bus)

    ledger = InventoryLedger(InventoryMemoryRepository(), event_bus=event_bus)
    catalog = ProductCatalog(ProductMemoryRepository(), ledger)
    orders = OrderProcessor(
        OrderMemoryRepository(),
        catalog=catalog,
        ledger=ledger,
        event_bus=event_bus,
    )
    return Container(
        event_bus=event_bus,
        ids=ids or SequentialIdGenerator(),
        ledger=ledger,
        catalog=catalog,
        orders=orders,
    )


def bootstrap() -> Container:
    """Process entry point: configure logging, then build the container."""
    configure_logging()
    container = build_container()
    logger.info("fulfillment.started")
    return container
