"""Order processor (Use Cases).

Orchestrates order creation, status management and cancellation.  It is
the only service that spans the product catalog and the inventory ledger.

Business rules enforced:
- An order needs an id, a customer and at least one item with a positive
  quantity; order ids are unique.
- Every referenced product must exist and have enough stock.  All items
  are checked before any stock moves, and the decrement of every product
  happens as one unit (``InventoryLedger.reserve``), so a failing item
  never leaves earlier items reserved.
- Status transitions are validated against the state machine; each one is
  recorded in the order history.
- Only pending orders can be cancelled; cancellation releases stock.
- Customer spending grows by the order total and is never reduced.
"""

from __future__ import annotations

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING, Dict, List, Optional, Union

import structlog

from fulfillment.config import settings
from fulfillment.modules.orders.constants import (
    CANCELLABLE_STATES,
    OrderStatus,
    optional_status,
    parse_status,
)
from fulfillment.modules.orders.dtos import OrderStatisticsDTO, ProductSalesDTO
from fulfillment.modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderStatusChanged,
)
from fulfillment.modules.orders.exceptions import (
    InsufficientStock,
    InvalidOrderStatus,
    OrderAlreadyExists,
    OrderNotCancellable,
    OrderNotFound,
)
from fulfillment.shared.domain.exceptions import ValidationError
from fulfillment.shared.domain.validation import (
    is_not_blank,
    require_int,
    require_not_blank,
    to_decimal,
)
from fulfillment.shared.infrastructure.locks import KeyedLock

if TYPE_CHECKING:
    from fulfillment.modules.inventory.services import InventoryLedger
    from fulfillment.modules.orders.models import Order
    from fulfillment.modules.orders.repositories.interfaces import IOrderRepository
    from fulfillment.modules.products.models import Product
    from fulfillment.modules.products.services import ProductCatalog
    from fulfillment.shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")


class OrderProcessor:
    """Application service for Order use-cases.

    Receives its repository and the catalog/ledger services via constructor
    injection (DIP).  Commands on the same order id are serialized.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        catalog: ProductCatalog,
        ledger: InventoryLedger,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._catalog = catalog
        self._ledger = ledger
        self._event_bus = event_bus
        self._locks = KeyedLock()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, order: Order) -> Order:
        """Validate, reserve stock for and persist a new order.

        Steps:
        1. Validate order id, customer and items.
        2. Resolve every product and check its stock.
        3. Reserve the stock of all products as one unit.
        4. Stamp item name/price snapshots, persist in ``PENDING``.
        5. Add the order total to the customer's spending.

        Raises:
            ValidationError: blank id, missing customer, no items, bad item.
            OrderAlreadyExists: the order id is taken.
            ProductNotFound: an item references an unknown product.
            InsufficientStock: a product does not have enough stock.
        """
        self._validate_order(order)
        quantities = order.quantities_by_product()
        log = logger.bind(order_id=order.order_id, customer_id=order.customer_id)
        log.info("order.creation_started", items=len(order.items))

        with self._locks.hold(order.order_id):
            if self._order_repo.exists(order.order_id):
                log.warning("order.duplicate_id")
                raise OrderAlreadyExists(f"Order id already exists: {order.order_id}")

            products = {pid: self._catalog.get_by_id(pid) for pid in quantities}
            for pid, quantity in quantities.items():
                stock = products[pid].stock
                if stock < quantity:
                    log.warning(
                        "order.insufficient_stock",
                        product_id=pid,
                        requested=quantity,
                        available=stock,
                    )
                    raise InsufficientStock(
                        f"insufficient stock for product {products[pid].name}: "
                        f"requested {quantity}, available {stock}."
                    )

            remaining = self._ledger.reserve(quantities, notify=False)
            log.info("order.stock_reserved", remaining=remaining)

            try:
                self._stamp_items(order, products)
                order.mark_created()
                if not self._order_repo.add(order):
                    raise OrderAlreadyExists(
                        f"Order id already exists: {order.order_id}"
                    )
            except Exception:
                self._ledger.release(quantities, enforce_capacity=False)
                log.warning("order.creation_rolled_back")
                raise

            total = order.total_amount
            order.customer.add_spent(total)
            order.add_domain_event(OrderCreated(aggregate_id=order.order_id))

        log.info("order.created", total_amount=str(total))
        self._ledger.publish_low_stock(quantities)
        self._publish(order)
        return order

    def update_order_status(
        self,
        order_id: str,
        new_status: Union[OrderStatus, str],
        notes: str = "",
    ) -> Order:
        """Transition an order to a new status.

        A legal move into ``CANCELLED`` (from ``PENDING`` or ``PAID``)
        releases the order's stock exactly like ``cancel_order``.

        Raises:
            ValidationError: blank/unknown status.
            OrderNotFound: order does not exist.
            InvalidOrderStatus: transition is not allowed.
        """
        status = parse_status(new_status)

        with self._locks.hold(order_id):
            order = self._get(order_id)
            log = logger.bind(
                order_id=order_id,
                current_status=order.status.value,
                new_status=status.value,
            )

            if not order.can_transition_to(status):
                log.warning("order.invalid_transition")
                raise InvalidOrderStatus(
                    f"Cannot transition from {order.status} to {status}."
                )

            if status is OrderStatus.CANCELLED:
                self._cancel(order, notes)
            else:
                old_status = order.status
                order.transition_to(status, notes)
                order.add_domain_event(
                    OrderStatusChanged(
                        aggregate_id=order.order_id,
                        old_status=old_status.value,
                        new_status=status.value,
                    )
                )

        log.info("order.status_updated")
        self._publish(order)
        return order

    def cancel_order(self, order_id: str, notes: str = "") -> Order:
        """Cancel an unpaid order and release its stock.

        Raises:
            OrderNotFound: order does not exist.
            OrderNotCancellable: the order is not ``PENDING``.
        """
        with self._locks.hold(order_id):
            order = self._get(order_id)
            log = logger.bind(order_id=order_id, current_status=order.status.value)

            if order.status not in CANCELLABLE_STATES:
                log.warning("order.cancel_not_allowed")
                raise OrderNotCancellable(
                    f"Only pending orders can be cancelled; "
                    f"order {order_id} is {order.status}."
                )
            self._cancel(order, notes)

        log.info("order.cancelled")
        self._publish(order)
        return order

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by id.

        Raises:
            ValidationError: blank id.
            OrderNotFound: if the order does not exist.
        """
        require_not_blank(order_id, "Order id must not be blank.")
        return self._get(order_id)

    def get_all_orders(self) -> List[Order]:
        return self._order_repo.list()

    def search_orders(
        self,
        customer_id: Optional[str] = None,
        status: Union[OrderStatus, str, None] = None,
    ) -> List[Order]:
        """Orders matching every supplied filter; blank filters are ignored."""
        return self._order_repo.search(
            customer_id=customer_id if is_not_blank(customer_id) else None,
            status=optional_status(status),
        )

    def orders_by_customer(self, customer_id: str) -> List[Order]:
        return self._order_repo.find_by_customer(customer_id)

    def orders_by_status(self, status: Union[OrderStatus, str]) -> List[Order]:
        return self._order_repo.find_by_status(parse_status(status))

    def order_exists(self, order_id: str) -> bool:
        return self._order_repo.exists(order_id)

    def order_count(self) -> int:
        return self._order_repo.count()

    def order_item_count(self, order_id: str) -> int:
        return len(self.get_order(order_id).items)

    def statistics(self) -> OrderStatisticsDTO:
        """Order count, sales and per-status counts over all orders."""
        orders = self._order_repo.list()
        total_sales = sum((o.total_amount for o in orders), Decimal("0.00"))
        counted = self._order_repo.status_counts()
        status_counts = {s.value: counted.get(s, 0) for s in OrderStatus}
        average = (
            (total_sales / len(orders)).quantize(CENT, rounding=ROUND_HALF_UP)
            if orders
            else Decimal("0.00")
        )
        return OrderStatisticsDTO(
            total_orders=len(orders),
            total_sales=total_sales,
            status_counts=status_counts,
            average_order_amount=average,
        )

    def sales_ranking(self) -> List[ProductSalesDTO]:
        """Units sold per product over all orders, best sellers first.

        Ties are broken by product id.  Products deleted since keep their
        order-time name.
        """
        sold: Dict[str, int] = defaultdict(int)
        names: Dict[str, str] = {}
        for order in self._order_repo.list():
            for item in order.items:
                sold[item.product_id] += item.quantity
                names.setdefault(item.product_id, item.product_name or item.product_id)
        ranking = sorted(sold.items(), key=lambda kv: (-kv[1], kv[0]))
        return [
            ProductSalesDTO(product_id=pid, product_name=names[pid], quantity_sold=qty)
            for pid, qty in ranking
        ]

    def hot_products(self, limit: Optional[int] = None) -> List[Product]:
        """Best-selling products still in the catalog, at most *limit* of them.

        Raises:
            ValidationError: limit is negative.
        """
        if limit is None:
            limit = settings.HOT_PRODUCTS_DEFAULT_LIMIT
        require_int(limit, "Limit must be an integer.")
        if limit < 0:
            raise ValidationError("Limit cannot be negative.")

        hot: List[Product] = []
        for entry in self.sales_ranking():
            if len(hot) >= limit:
                break
            product = self._catalog.find(entry.product_id)
            if product is not None:
                hot.append(product)
        return hot

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(self, order_id: str) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise OrderNotFound(f"Order not found: {order_id}")
        return order

    def _cancel(self, order: Order, notes: str) -> None:
        """Release stock of still-tracked products and mark ``CANCELLED``.

        Caller holds the order lock.
        """
        quantities = {
            pid: qty
            for pid, qty in order.quantities_by_product().items()
            if self._ledger.exists(pid)
        }
        if quantities:
            current = self._ledger.release(quantities, enforce_capacity=False)
            logger.info(
                "order.stock_released", order_id=order.order_id, current=current
            )
        order.transition_to(OrderStatus.CANCELLED, notes or "Order cancelled")
        order.add_domain_event(OrderCancelled(aggregate_id=order.order_id))

    @staticmethod
    def _stamp_items(order: Order, products: Dict[str, Product]) -> None:
        for item in order.items:
            product = products[item.product_id]
            if item.product_name is None:
                item.product_name = product.name
            if item.price is None:
                item.price = product.price

    @staticmethod
    def _validate_order(order: Order) -> None:
        if order is None:
            raise ValidationError("Order must not be empty.")
        require_not_blank(order.order_id, "Order id must not be blank.")
        if order.customer is None:
            raise ValidationError("Order must reference a customer.")
        if not order.items:
            raise ValidationError("Order must contain at least one item.")
        for item in order.items:
            require_not_blank(item.product_id, "Item product id must not be blank.")
            require_int(item.quantity, "Item quantity must be an integer.")
            if item.quantity <= 0:
                raise ValidationError("Item quantity must be greater than zero.")
            if item.price is not None:
                item.price = to_decimal(item.price, "Item price must be a number.")
                if item.price <= 0:
                    raise ValidationError("Item price must be greater than zero.")

    def _publish(self, order: Order) -> None:
        events = order.pull_domain_events()
        if self._event_bus is None:
            return
        for event in events:
            self._event_bus.publish(event)
