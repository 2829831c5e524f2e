from __future__ import annotations

from decimal import Decimal

import pytest
from structlog.testing import capture_logs

from fulfillment.config.container import build_container
from fulfillment.modules.customers.models import Customer
from fulfillment.modules.orders.constants import OrderStatus
from fulfillment.modules.orders.models import Order, OrderItem
from fulfillment.modules.products.models import Product

pytestmark = pytest.mark.integration


class TestContainer:
    def test_services_share_one_ledger(self, container):
        assert container.catalog._ledger is container.ledger
        assert container.orders._ledger is container.ledger
        assert container.orders._catalog is container.catalog

    def test_containers_are_independent(self):
        first, second = build_container(), build_container()
        first.catalog.register_product(
            Product(id="P1", name="Widget", price=Decimal("1.00"), category="Tools"),
            quantity=5,
        )
        assert second.catalog.product_count() == 0
        assert second.ledger.quantity_of("P1") == 0

    def test_end_to_end_flow(self):
        container = build_container()
        ids = container.ids
        buyer = Customer(id=ids.new_customer_id(), name="Ana", phone="555-123-4567")

        product_id = ids.new_product_id()
        container.catalog.register_product(
            Product(id=product_id, name="Lamp", price=Decimal("19.9"), category="Home"),
            quantity=12,
            min_threshold=10,
        )

        with capture_logs() as logs:
            order = container.orders.create_order(
                Order(ids.new_order_id(), buyer, [OrderItem(product_id, 3)])
            )
        assert any(entry["event"] == "inventory.low_stock" for entry in logs)
        assert container.catalog.get_by_id(product_id).stock == 9

        container.orders.update_order_status(order.order_id, OrderStatus.PAID)
        container.orders.update_order_status(order.order_id, OrderStatus.SHIPPED)
        container.orders.update_order_status(order.order_id, OrderStatus.COMPLETED)

        stats = container.orders.statistics()
        assert stats.total_sales == Decimal("59.70")
        assert stats.status_counts["COMPLETED"] == 1
        assert buyer.total_spent == Decimal("59.70")
        assert [p.id for p in container.orders.hot_products(1)] == [product_id]
