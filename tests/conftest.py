from __future__ import annotations

from decimal import Decimal

import pytest

from fulfillment.config.container import build_container
from fulfillment.modules.customers.models import Customer
from fulfillment.modules.inventory.repositories import InventoryMemoryRepository
from fulfillment.modules.inventory.services import InventoryLedger
from fulfillment.modules.orders.models import Order, OrderItem
from fulfillment.modules.products.models import Product
from fulfillment.shared.infrastructure.bus import InMemoryEventBus


class CapturingHandler:
    """Event handler that records every event it receives."""

    def __init__(self) -> None:
        self.events = []

    def handle(self, event) -> None:
        self.events.append(event)


@pytest.fixture()
def event_bus():
    return InMemoryEventBus()


@pytest.fixture()
def container(event_bus):
    return build_container(event_bus=event_bus)


@pytest.fixture()
def ledger(container):
    return container.ledger


@pytest.fixture()
def catalog(container):
    return container.catalog


@pytest.fixture()
def processor(container):
    return container.orders


@pytest.fixture()
def standalone_ledger():
    """A ledger without event bus, for pure bookkeeping tests."""
    return InventoryLedger(InventoryMemoryRepository())


@pytest.fixture()
def customer():
    return Customer(id="C-test001", name="Test Customer", phone="13800000000")


@pytest.fixture()
def make_product(catalog):
    """Register a product with its inventory record and return it."""

    def _make(
        product_id: str,
        stock: int = 10,
        price: str = "10.00",
        name: str | None = None,
        category: str = "General",
        min_threshold: int = 10,
        max_capacity: int = 1000,
    ) -> Product:
        return catalog.register_product(
            Product(
                id=product_id,
                name=name or f"Product {product_id}",
                price=Decimal(price),
                category=category,
            ),
            quantity=stock,
            min_threshold=min_threshold,
            max_capacity=max_capacity,
        )

    return _make


@pytest.fixture()
def make_order(processor, customer):
    """Create an order through the processor from ``(product_id, qty)`` pairs."""
    counter = iter(range(1, 10_000))

    def _make(*lines: tuple[str, int], order_id: str | None = None, buyer=None):
        order = Order(
            order_id or f"O-test{next(counter):04d}",
            buyer or customer,
            [OrderItem(product_id=pid, quantity=qty) for pid, qty in lines],
        )
        return processor.create_order(order)

    return _make


@pytest.fixture()
def assert_stock_consistent(catalog, ledger):
    """Check that every product's stock equals its inventory quantity."""

    def _check() -> None:
        for product in catalog.get_all():
            if ledger.exists(product.id):
                assert product.stock == ledger.get_by_product_id(product.id).quantity

    return _check


@pytest.fixture()
def capturing_handler():
    return CapturingHandler()
