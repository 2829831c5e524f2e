"""Unit tests for InventoryLedger.

Covers:
- Record validation (negative values, capacity vs threshold).
- adjust() boundaries for both directions.
- reserve()/release() are all-or-nothing across products.
- Low-stock queries, sorting, statistics and idempotent delete.
"""

from __future__ import annotations

import pytest

from fulfillment.modules.inventory.constants import StockOperation
from fulfillment.modules.inventory.events import LowStockDetected
from fulfillment.modules.inventory.exceptions import (
    InsufficientStock,
    InventoryAlreadyExists,
    InventoryNotFound,
    OverCapacity,
)
from fulfillment.modules.inventory.models import Inventory
from fulfillment.modules.inventory.repositories import InventoryMemoryRepository
from fulfillment.modules.inventory.services import InventoryLedger
from fulfillment.shared.domain.exceptions import BusinessError, ValidationError
from fulfillment.shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


@pytest.fixture()
def ledger(standalone_ledger):
    standalone_ledger.add_inventory(Inventory("P1", quantity=50))
    return standalone_ledger


class TestAddInventory:
    def test_add_and_read_back(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("P9", 20, 5, 100))
        assert standalone_ledger.get_by_product_id("P9") == Inventory("P9", 20, 5, 100)

    def test_returned_record_is_a_copy(self, ledger):
        record = ledger.get_by_product_id("P1")
        record.quantity = 999
        assert ledger.quantity_of("P1") == 50

    def test_duplicate_rejected(self, ledger):
        with pytest.raises(InventoryAlreadyExists):
            ledger.add_inventory(Inventory("P1", quantity=1))
        assert ledger.quantity_of("P1") == 50

    def test_duplicate_is_a_validation_error(self, ledger):
        with pytest.raises(ValidationError):
            ledger.add_inventory(Inventory("P1"))

    @pytest.mark.parametrize(
        "record",
        [
            Inventory("", 1),
            Inventory("   ", 1),
            Inventory("P2", quantity=-1),
            Inventory("P2", quantity=1, min_threshold=-1),
            Inventory("P2", quantity=1, min_threshold=10, max_capacity=10),
            Inventory("P2", quantity=1, min_threshold=10, max_capacity=5),
            Inventory("P2", quantity=101, min_threshold=10, max_capacity=100),
        ],
    )
    def test_invalid_records_rejected(self, standalone_ledger, record):
        with pytest.raises(ValidationError):
            standalone_ledger.add_inventory(record)
        assert standalone_ledger.get_all() == []

    def test_none_rejected(self, standalone_ledger):
        with pytest.raises(ValidationError):
            standalone_ledger.add_inventory(None)

    def test_quantity_equal_to_capacity_accepted(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("P2", 100, 10, 100))
        assert standalone_ledger.quantity_of("P2") == 100


class TestUpdateInventory:
    def test_overwrites_all_fields(self, ledger):
        ledger.update_inventory(Inventory("P1", 30, 20, 500))
        assert ledger.get_by_product_id("P1") == Inventory("P1", 30, 20, 500)

    def test_unknown_product(self, standalone_ledger):
        with pytest.raises(InventoryNotFound):
            standalone_ledger.update_inventory(Inventory("missing", 1))

    def test_invalid_update_leaves_record(self, ledger):
        with pytest.raises(ValidationError):
            ledger.update_inventory(Inventory("P1", quantity=-5))
        assert ledger.quantity_of("P1") == 50


class TestAdjust:
    def test_increase(self, ledger):
        result = ledger.adjust("P1", 25, StockOperation.INCREASE)
        assert result.quantity == 75
        assert ledger.quantity_of("P1") == 75

    def test_decrease(self, ledger):
        ledger.adjust("P1", 20, StockOperation.DECREASE)
        assert ledger.quantity_of("P1") == 30

    def test_decrease_entire_quantity(self, ledger):
        ledger.adjust("P1", 50, StockOperation.DECREASE)
        assert ledger.quantity_of("P1") == 0

    def test_decrease_one_more_than_available(self, ledger):
        with pytest.raises(InsufficientStock) as exc_info:
            ledger.adjust("P1", 51, StockOperation.DECREASE)
        assert str(exc_info.value).startswith("insufficient stock")
        assert isinstance(exc_info.value, BusinessError)
        assert ledger.quantity_of("P1") == 50

    def test_increase_up_to_capacity(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("P2", 995, 10, 1000))
        standalone_ledger.adjust("P2", 5, StockOperation.INCREASE)
        assert standalone_ledger.quantity_of("P2") == 1000

    def test_increase_past_capacity(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("P2", 995, 10, 1000))
        with pytest.raises(OverCapacity) as exc_info:
            standalone_ledger.adjust("P2", 6, StockOperation.INCREASE)
        assert str(exc_info.value).startswith("over capacity")
        assert standalone_ledger.quantity_of("P2") == 995

    @pytest.mark.parametrize(
        ("operation", "expected"),
        [("increase", 51), ("IN", 51), ("decrease", 49), ("out", 49)],
    )
    def test_operation_names(self, ledger, operation, expected):
        ledger.adjust("P1", 1, operation)
        assert ledger.quantity_of("P1") == expected

    def test_unknown_operation(self, ledger):
        with pytest.raises(ValidationError):
            ledger.adjust("P1", 1, "sideways")

    @pytest.mark.parametrize("amount", [0, -1, True, 1.5])
    def test_invalid_amount(self, ledger, amount):
        with pytest.raises(ValidationError):
            ledger.adjust("P1", amount, StockOperation.INCREASE)
        assert ledger.quantity_of("P1") == 50

    def test_unknown_product(self, standalone_ledger):
        with pytest.raises(InventoryNotFound):
            standalone_ledger.adjust("missing", 1, StockOperation.INCREASE)

    def test_blank_product_id(self, ledger):
        with pytest.raises(ValidationError):
            ledger.adjust(" ", 1, StockOperation.INCREASE)


class TestReserveAndRelease:
    @pytest.fixture()
    def ledger(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("A", 5, 1, 10))
        standalone_ledger.add_inventory(Inventory("B", 2, 1, 10))
        return standalone_ledger

    def test_reserve_decrements_every_product(self, ledger):
        remaining = ledger.reserve({"A": 3, "B": 2})
        assert remaining == {"A": 2, "B": 0}

    def test_reserve_is_all_or_nothing(self, ledger):
        with pytest.raises(InsufficientStock):
            ledger.reserve({"A": 3, "B": 3})
        assert ledger.quantity_of("A") == 5
        assert ledger.quantity_of("B") == 2

    def test_reserve_unknown_product_changes_nothing(self, ledger):
        with pytest.raises(InventoryNotFound):
            ledger.reserve({"A": 1, "Z": 1})
        assert ledger.quantity_of("A") == 5

    def test_release_is_all_or_nothing(self, ledger):
        with pytest.raises(OverCapacity):
            ledger.release({"A": 1, "B": 9})
        assert ledger.quantity_of("A") == 5
        assert ledger.quantity_of("B") == 2

    def test_release_after_reserve_restores(self, ledger):
        ledger.reserve({"A": 4, "B": 1})
        assert ledger.release({"A": 4, "B": 1}) == {"A": 5, "B": 2}

    def test_release_without_capacity_check(self, ledger):
        ledger.reserve({"B": 2})
        ledger.adjust("B", 10, StockOperation.INCREASE)
        assert ledger.release({"B": 2}, enforce_capacity=False) == {"B": 12}

    def test_reserve_without_notify_defers_low_stock_event(
        self, capturing_handler
    ):
        bus = InMemoryEventBus()
        bus.subscribe(LowStockDetected, capturing_handler)
        ledger = InventoryLedger(InventoryMemoryRepository(), event_bus=bus)
        ledger.add_inventory(Inventory("A", 5, 3, 10))

        ledger.reserve({"A": 4}, notify=False)
        assert capturing_handler.events == []

        ledger.publish_low_stock(["A", "missing"])
        [event] = capturing_handler.events
        assert (event.aggregate_id, event.quantity) == ("A", 1)

    @pytest.mark.parametrize("quantities", [{}, {"A": 0}, {"": 1}])
    def test_invalid_quantities(self, ledger, quantities):
        with pytest.raises(ValidationError):
            ledger.reserve(quantities)


class TestDelete:
    def test_delete_is_idempotent(self, ledger):
        assert ledger.delete("P1") is True
        assert ledger.delete("P1") is False
        assert not ledger.exists("P1")

    def test_delete_blank_is_noop(self, ledger):
        assert ledger.delete("") is False
        assert ledger.exists("P1")

    def test_quantity_of_missing_is_zero(self, ledger):
        ledger.delete("P1")
        assert ledger.quantity_of("P1") == 0


class TestQueries:
    def test_low_stock_scenario(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("P1", 5, 10, 1000))
        assert standalone_ledger.needs_warning("P1")
        assert [r.product_id for r in standalone_ledger.low_stock_items()] == ["P1"]

        standalone_ledger.adjust("P1", 10, StockOperation.INCREASE)
        assert not standalone_ledger.needs_warning("P1")
        assert standalone_ledger.low_stock_items() == []

    def test_quantity_equal_to_threshold_is_not_low(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("P1", 10, 10, 1000))
        assert not standalone_ledger.needs_warning("P1")

    def test_find_by_quantity_range_is_inclusive(self, standalone_ledger):
        for pid, qty in [("A", 1), ("B", 5), ("C", 10), ("D", 11)]:
            standalone_ledger.add_inventory(Inventory(pid, qty))
        found = standalone_ledger.find_by_quantity_range(5, 10)
        assert [r.product_id for r in found] == ["B", "C"]

    def test_sorted_by_quantity_keeps_ties_in_insertion_order(self, standalone_ledger):
        for pid, qty in [("A", 5), ("B", 1), ("C", 5), ("D", 9)]:
            standalone_ledger.add_inventory(Inventory(pid, qty))
        ascending = [r.product_id for r in standalone_ledger.sorted_by_quantity()]
        descending = [
            r.product_id for r in standalone_ledger.sorted_by_quantity(ascending=False)
        ]
        assert ascending == ["B", "A", "C", "D"]
        assert descending == ["D", "A", "C", "B"]

    def test_statistics(self, standalone_ledger):
        standalone_ledger.add_inventory(Inventory("A", 5, 10, 1000))
        standalone_ledger.add_inventory(Inventory("B", 20, 10, 1000))
        standalone_ledger.add_inventory(Inventory("C", 0, 10, 1000))
        stats = standalone_ledger.statistics()
        assert stats.total_items == 3
        assert stats.total_quantity == 25
        assert stats.low_stock_count == 2
        assert stats.average_quantity == 8

    def test_statistics_empty(self, standalone_ledger):
        stats = standalone_ledger.statistics()
        assert stats.total_items == 0
        assert stats.average_quantity == 0

    def test_can_stock_in_and_out(self, ledger):
        assert ledger.can_stock_out("P1", 50)
        assert not ledger.can_stock_out("P1", 51)
        assert ledger.can_stock_in("P1", 950)
        assert not ledger.can_stock_in("P1", 951)


class TestLowStockEvent:
    def test_decrease_below_threshold_publishes_event(self, capturing_handler):
        bus = InMemoryEventBus()
        bus.subscribe(LowStockDetected, capturing_handler)
        ledger = InventoryLedger(InventoryMemoryRepository(), event_bus=bus)
        ledger.add_inventory(Inventory("P1", 12, 10, 100))

        ledger.adjust("P1", 1, StockOperation.DECREASE)
        assert capturing_handler.events == []

        ledger.adjust("P1", 2, StockOperation.DECREASE)
        [event] = capturing_handler.events
        assert event.aggregate_id == "P1"
        assert event.quantity == 9
        assert event.min_threshold == 10

    def test_increase_never_publishes(self, capturing_handler):
        bus = InMemoryEventBus()
        bus.subscribe(LowStockDetected, capturing_handler)
        ledger = InventoryLedger(InventoryMemoryRepository(), event_bus=bus)
        ledger.add_inventory(Inventory("P1", 1, 10, 100))
        ledger.adjust("P1", 1, StockOperation.INCREASE)
        assert capturing_handler.events == []
