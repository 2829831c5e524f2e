"""Event handlers for Inventory domain events."""

from __future__ import annotations

import structlog

from fulfillment.modules.inventory.events import LowStockDetected
from fulfillment.shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class LowStockWarningHandler(IEventHandler[LowStockDetected]):
    def handle(self, event: LowStockDetected) -> None:
        logger.warning(
            "inventory.low_stock",
            product_id=event.aggregate_id,
            quantity=event.quantity,
            min_threshold=event.min_threshold,
        )


low_stock_warning_handler = LowStockWarningHandler()
