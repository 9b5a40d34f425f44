"""Decimal helpers for currency amounts and display formatting."""

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from collection_engine.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any, field: str = "value") -> Decimal:
    """Convert a primitive input to ``Decimal``.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.

    Raises
    ------
    ValidationError
        If the value is missing or not numeric.
    """
    if isinstance(value, Decimal):
        result = value
    elif value is None or isinstance(value, bool):
        raise ValidationError(f"{field} is required", field=field)
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValidationError(f"{field} must be numeric, got {value!r}", field=field) from exc
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return result


def round_currency(value: Decimal) -> Decimal:
    """Round to cents using half-up rounding."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percent_of(part: Decimal, total: Decimal) -> Decimal:
    """Return ``part / total * 100`` rounded to 2 places, 0 when total is 0."""
    if total == ZERO:
        return ZERO.quantize(CENT)
    return (part / total * HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


def format_brl(value: Decimal | int | float) -> str:
    """Format an amount as Brazilian reais (``R$ 1.234,56``)."""
    amount = round_currency(Decimal(str(value)))
    sign = "-" if amount < 0 else ""
    integer, _, cents = f"{abs(amount):.2f}".partition(".")
    groups = []
    while integer:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    return f"{sign}R$ {'.'.join(groups)},{cents}"


def format_date(value: date) -> str:
    """Format a date as ``dd/mm/yyyy``."""
    return value.strftime("%d/%m/%Y")
