"""
Exchange Adapters - Numeric Normalizer.

============================================================
PURPOSE
============================================================
Exact decimal handling at the venue boundary.

INBOUND:
- Venue numeric strings become Decimal directly, never via float

OUTBOUND:
- Quantities and prices are rendered with at most 8 fractional
  digits, ROUND_HALF_UP, explicit "." separator
- Trailing zeros are dropped ("#.########" semantics)

============================================================
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Union

from .types import InvalidArgumentError


# Binance rejects anything finer than this
VENUE_DECIMAL_PLACES = 8

_HUNDRED = Decimal("100")

NumericInput = Union[str, int, float, Decimal]


def to_decimal(value: NumericInput) -> Decimal:
    """
    Convert a venue numeric field to an exact Decimal.

    Args:
        value: String, int, Decimal, or float. Floats go through
            their shortest repr so no binary noise is introduced.

    Returns:
        Finite Decimal

    Raises:
        InvalidArgumentError: If value is not a finite number
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"Not a numeric value: {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, str)):
        try:
            result = Decimal(value)
        except InvalidOperation:
            raise InvalidArgumentError(f"Not a numeric value: {value!r}") from None
    elif isinstance(value, float):
        result = Decimal(repr(value))
    else:
        raise InvalidArgumentError(f"Not a numeric value: {value!r}")

    if not result.is_finite():
        raise InvalidArgumentError(f"Not a finite numeric value: {value!r}")

    return result


def quantize(value: NumericInput, places: int = VENUE_DECIMAL_PLACES) -> Decimal:
    """Round value to places fractional digits, half-up."""
    number = to_decimal(value)
    exponent = Decimal(1).scaleb(-places)

    # Default context precision (28) is too small for large notional values
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + places + 2)
        return number.quantize(exponent, rounding=ROUND_HALF_UP)


def format_decimal(value: NumericInput, places: int = VENUE_DECIMAL_PLACES) -> str:
    """
    Format a value for an outgoing order parameter.

    Examples:
        0.123456785 -> "0.12345679"
        1.50000000  -> "1.5"
        100         -> "100"

    Returns:
        Plain decimal string, never exponent notation
    """
    rounded = quantize(value, places)

    if rounded.is_zero():
        return "0"

    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def percentage_to_fraction(value: NumericInput, places: int = VENUE_DECIMAL_PLACES) -> Decimal:
    """
    Convert a percentage to a fraction.

    "0.1" (0.1%) -> Decimal("0.00100000")
    """
    number = to_decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, number.adjusted() + places + 4)
        return (number / _HUNDRED).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
