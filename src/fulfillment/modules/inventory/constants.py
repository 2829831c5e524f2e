"""Inventory domain constants."""

from __future__ import annotations

from enum import Enum
from typing import Union

from fulfillment.shared.domain.exceptions import ValidationError


class StockOperation(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


# Accepted spellings for ``InventoryLedger.adjust`` (case-insensitive).
OPERATION_ALIASES: dict[str, StockOperation] = {
    "increase": StockOperation.INCREASE,
    "in": StockOperation.INCREASE,
    "decrease": StockOperation.DECREASE,
    "out": StockOperation.DECREASE,
}


def parse_operation(operation: Union[StockOperation, str, None]) -> StockOperation:
    """Resolve *operation* to a ``StockOperation`` or raise ``ValidationError``."""
    if isinstance(operation, StockOperation):
        return operation
    if isinstance(operation, str):
        resolved = OPERATION_ALIASES.get(operation.strip().lower())
        if resolved is not None:
            return resolved
    raise ValidationError(f"Unsupported stock operation: {operation!r}.")
