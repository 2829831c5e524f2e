"""Product catalog service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository`` and stock to the
``InventoryLedger``.  The catalog knows nothing about orders.

Business rules enforced here:
- Product id must be unique and not blank.
- Name and category must not be blank.
- Price must be greater than zero.
- Stock movements must be for a positive amount.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING, Dict, List, Optional

import structlog

from fulfillment.config import settings
from fulfillment.modules.inventory.constants import StockOperation
from fulfillment.modules.inventory.exceptions import InsufficientStock
from fulfillment.modules.inventory.models import Inventory
from fulfillment.modules.products.exceptions import (
    ProductAlreadyExists,
    ProductNotFound,
)
from fulfillment.shared.domain.exceptions import ValidationError
from fulfillment.shared.domain.validation import (
    require_int,
    require_not_blank,
    to_decimal,
)

if TYPE_CHECKING:
    from fulfillment.modules.inventory.services import InventoryLedger
    from fulfillment.modules.products.models import Product
    from fulfillment.modules.products.repositories.interfaces import (
        IProductRepository,
    )

logger = structlog.get_logger(__name__)


class ProductCatalog:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` and the ``InventoryLedger`` via
    constructor injection (DIP).  Products handed out are copies bound to
    the ledger, so ``product.stock`` always reflects the current quantity.
    """

    def __init__(self, repository: IProductRepository, ledger: InventoryLedger) -> None:
        self._repo = repository
        self._ledger = ledger

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_product(self, product: Product) -> Product:
        """Store a new product.

        The paired inventory record is not created here; see
        ``register_product``.

        Raises:
            ValidationError: blank id/name/category or price <= 0.
            ProductAlreadyExists: the id is already taken.
        """
        record = self._validated(product)
        log = logger.bind(product_id=record.id)

        if not self._repo.add(record):
            log.warning("product.duplicate_id")
            raise ProductAlreadyExists(f"Product id already exists: {record.id}")

        log.info("product.created", name=record.name, category=record.category)
        return self._bound(record)

    def update_product(self, product: Product) -> Product:
        """Overwrite name, price and category of an existing product.

        Raises:
            ValidationError: blank name/category or price <= 0.
            ProductNotFound: the product does not exist.
        """
        if product is None:
            raise ValidationError("Product must not be empty.")
        if not self._repo.exists(product.id):
            raise ProductNotFound(f"Product not found: {product.id}")
        record = self._validated(product)

        if not self._repo.update(record):
            raise ProductNotFound(f"Product not found: {record.id}")

        logger.info("product.updated", product_id=record.id, price=str(record.price))
        return self._bound(record)

    def delete_product(self, product_id: str) -> None:
        """Remove a product.  Its inventory record is left untouched.

        Raises:
            ValidationError: blank id.
            ProductNotFound: the product does not exist.
        """
        require_not_blank(product_id, "Product id must not be blank.")
        if not self._repo.delete(product_id):
            raise ProductNotFound(f"Product not found: {product_id}")
        logger.info("product.deleted", product_id=product_id)

    def register_product(
        self,
        product: Product,
        quantity: int = 0,
        min_threshold: Optional[int] = None,
        max_capacity: Optional[int] = None,
    ) -> Product:
        """Add a product together with its inventory record.

        If the inventory record is rejected the product is removed again and
        the ledger's error propagates.
        """
        created = self.add_product(product)
        inventory = Inventory(
            product_id=created.id,
            quantity=quantity,
            min_threshold=(
                settings.INVENTORY_DEFAULT_MIN_THRESHOLD
                if min_threshold is None
                else min_threshold
            ),
            max_capacity=(
                settings.INVENTORY_DEFAULT_MAX_CAPACITY
                if max_capacity is None
                else max_capacity
            ),
        )
        try:
            self._ledger.add_inventory(inventory)
        except Exception:
            self._repo.delete(created.id)
            logger.warning("product.registration_rolled_back", product_id=created.id)
            raise
        return created

    def retire_product(self, product_id: str) -> None:
        """Delete a product and its inventory record."""
        self.delete_product(product_id)
        self._ledger.delete(product_id)

    def stock_in(self, product_id: str, amount: int) -> Product:
        """Receive *amount* units of a product.

        Raises:
            ValidationError: amount <= 0 or no inventory record.
            ProductNotFound: the product does not exist.
            OverCapacity: the increase would exceed the inventory capacity.
        """
        product = self.get_by_id(product_id)
        self._require_amount(amount, "Stock-in amount must be greater than zero.")
        self._ledger.adjust(product.id, amount, StockOperation.INCREASE)
        return product

    def stock_out(self, product_id: str, amount: int) -> bool:
        """Ship *amount* units of a product.

        Returns ``False`` (and changes nothing) when stock is insufficient.

        Raises:
            ValidationError: amount <= 0 or no inventory record.
            ProductNotFound: the product does not exist.
        """
        product = self.get_by_id(product_id)
        self._require_amount(amount, "Stock-out amount must be greater than zero.")
        try:
            self._ledger.adjust(product.id, amount, StockOperation.DECREASE)
        except InsufficientStock:
            logger.info(
                "product.stock_out_rejected",
                product_id=product.id,
                amount=amount,
                stock=product.stock,
            )
            return False
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_by_id(self, product_id: str) -> Product:
        """Retrieve a single product by id.

        Raises:
            ValidationError: blank id.
            ProductNotFound: the product does not exist.
        """
        require_not_blank(product_id, "Product id must not be blank.")
        product = self._repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFound(f"Product not found: {product_id}")
        return self._bound(product)

    def find(self, product_id: str) -> Optional[Product]:
        """Like ``get_by_id`` but returns ``None`` for unknown ids."""
        product = self._repo.get_by_id(product_id)
        return self._bound(product) if product else None

    def get_all(self) -> List[Product]:
        return [self._bound(p) for p in self._repo.list()]

    def search(
        self,
        keyword: Optional[str] = None,
        category: Optional[str] = None,
        min_price: Optional[Decimal] = None,
        max_price: Optional[Decimal] = None,
    ) -> List[Product]:
        """Products matching every supplied filter.  Never fails."""
        return [
            self._bound(p)
            for p in self._repo.search(keyword, category, min_price, max_price)
        ]

    def category_statistics(self) -> Dict[str, int]:
        """Number of products per category."""
        return dict(Counter(p.category for p in self._repo.list()))

    def sorted_by_price(self, ascending: bool = True) -> List[Product]:
        """All products by price; equal prices keep insertion order."""
        products = self.get_all()
        if ascending:
            return sorted(products, key=lambda p: p.price)
        # negate instead of reverse=True so ties stay in insertion order
        return sorted(products, key=lambda p: -p.price)

    def low_stock_products(self, threshold: int) -> List[Product]:
        """Products whose stock is strictly below *threshold*."""
        return [p for p in self.get_all() if p.stock < threshold]

    def product_exists(self, product_id: str) -> bool:
        return self._repo.exists(product_id)

    def product_count(self) -> int:
        return self._repo.count()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _bound(self, product: Product) -> Product:
        return replace(product, stock_source=self._ledger)

    @staticmethod
    def _require_amount(amount: int, message: str) -> None:
        require_int(amount, "Amount must be an integer.")
        if amount <= 0:
            raise ValidationError(message)

    @staticmethod
    def _validated(product: Product) -> Product:
        """Return a normalised, unbound copy of *product* or raise."""
        if product is None:
            raise ValidationError("Product must not be empty.")
        product_id = require_not_blank(product.id, "Product id must not be blank.")
        name = require_not_blank(product.name, "Product name must not be blank.")
        price = to_decimal(product.price, "Product price must be a number.")
        if price <= 0:
            raise ValidationError("Product price must be greater than zero.")
        category = require_not_blank(
            product.category, "Product category must not be blank."
        )
        return replace(
            product,
            id=product_id,
            name=name,
            price=price,
            category=category,
            stock_source=None,
        )
