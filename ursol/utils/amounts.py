"""Decimal helpers for amounts stored as strings."""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Union

from ursol.core.exceptions import ValidationError

AmountLike = Union[str, int, float, Decimal, None]


def to_decimal(value: AmountLike, field: str = "amount") -> Decimal:
    """Parse an amount, accepting thousands separators ("50,000")."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        value = repr(value)

    text = str(value).strip().replace(",", "")
    try:
        result = Decimal(text)
    except InvalidOperation:
        raise ValidationError(f"Invalid {field}: {value!r} is not a number", details={"field": field})

    if not result.is_finite():
        raise ValidationError(f"Invalid {field}: {value!r} is not a finite number", details={"field": field})
    return result


def format_amount(value: AmountLike, places: int = 2) -> str:
    """Round half-up to a fixed number of decimal places."""
    quantum = Decimal(1).scaleb(-places)
    return str(to_decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def normalize_amount(value: AmountLike) -> str:
    """Canonical text for an amount: no exponent, no trailing zeros."""
    dec = to_decimal(value)
    if dec == dec.to_integral_value():
        return str(dec.quantize(Decimal(1)))
    return format(dec.normalize(), "f")


def sum_amounts(values: Any) -> Decimal:
    return sum((to_decimal(v) for v in values), Decimal("0"))
