"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from fulfillment.modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from fulfillment.shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info("order.event.created", order_id=event.aggregate_id)


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info("order.event.cancelled", order_id=event.aggregate_id)


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_created_handler = OrderCreatedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()
