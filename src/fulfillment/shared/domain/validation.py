"""Field-level validation helpers used by the service layer."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Union

from fulfillment.shared.domain.exceptions import ValidationError

Number = Union[int, float, Decimal]


def is_not_blank(value: Optional[str]) -> bool:
    return value is not None and bool(str(value).strip())


def require_not_blank(value: Optional[str], message: str) -> str:
    """Return *value* stripped, or raise ``ValidationError(message)``."""
    if not is_not_blank(value):
        raise ValidationError(message)
    return str(value).strip()


def require_int(value: Any, message: str) -> int:
    # bool is an int subclass but never a valid quantity
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(message)
    return value


def to_decimal(value: Optional[Number], message: str) -> Decimal:
    """Coerce *value* to a finite ``Decimal`` (floats go through ``str``)."""
    if value is None or isinstance(value, bool):
        raise ValidationError(message)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    else:
        raise ValidationError(message)
    # NaN and Infinity cannot be compared or priced
    if not result.is_finite():
        raise ValidationError(message)
    return result
