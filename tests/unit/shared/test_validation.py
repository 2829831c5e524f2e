from __future__ import annotations

from decimal import Decimal

import pytest

from fulfillment.shared.domain.exceptions import ValidationError
from fulfillment.shared.domain.validation import (
    is_not_blank,
    require_int,
    require_not_blank,
    to_decimal,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    ("value", "expected"), [(None, False), ("", False), ("  ", False), ("x", True)]
)
def test_is_not_blank(value, expected):
    assert is_not_blank(value) is expected


def test_require_not_blank_strips():
    assert require_not_blank("  abc ", "msg") == "abc"
    with pytest.raises(ValidationError, match="msg"):
        require_not_blank(" ", "msg")


@pytest.mark.parametrize("value", [True, 1.0, "1", None])
def test_require_int_rejects_non_ints(value):
    with pytest.raises(ValidationError):
        require_int(value, "msg")


@pytest.mark.parametrize(
    ("value", "expected"),
    [(Decimal("1.10"), Decimal("1.10")), (3, Decimal("3")), (0.1, Decimal("0.1"))],
)
def test_to_decimal(value, expected):
    assert to_decimal(value, "msg") == expected


@pytest.mark.parametrize(
    "value",
    [
        None,
        True,
        "1.00",
        Decimal("NaN"),
        Decimal("sNaN"),
        Decimal("Infinity"),
        Decimal("-Infinity"),
        float("nan"),
        float("inf"),
    ],
)
def test_to_decimal_rejects(value):
    with pytest.raises(ValidationError):
        to_decimal(value, "msg")
