"""
Numeric Normalizer Tests.

============================================================
PURPOSE
============================================================
Exact decimal conversion and 8-place half-up formatting.

============================================================
"""

import pytest
from decimal import Decimal

from exchange_adapters import (
    InvalidArgumentError,
    format_decimal,
    percentage_to_fraction,
    to_decimal,
)


# ============================================================
# INBOUND CONVERSION
# ============================================================

class TestToDecimal:
    """Tests for to_decimal."""

    def test_string_is_exact(self):
        """Venue strings become exact decimals."""
        assert to_decimal("0.10000000") == Decimal("0.1")
        assert str(to_decimal("0.10000000")) == "0.10000000"

    def test_float_has_no_binary_noise(self):
        """Floats go through their shortest repr."""
        assert to_decimal(0.1) == Decimal("0.1")
        assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")

    def test_int_and_decimal(self):
        """Ints and Decimals pass through."""
        assert to_decimal(7) == Decimal("7")
        assert to_decimal(Decimal("1.25")) == Decimal("1.25")

    @pytest.mark.parametrize("value", ["abc", "", "NaN", "Infinity", None, True, [1]])
    def test_rejects_non_numeric(self, value):
        """Non-numeric and non-finite values are rejected."""
        with pytest.raises(InvalidArgumentError):
            to_decimal(value)


# ============================================================
# OUTBOUND FORMATTING
# ============================================================

class TestFormatDecimal:
    """Tests for format_decimal."""

    def test_rounds_half_up_at_eighth_place(self):
        """A 5 in the ninth place rounds up."""
        assert format_decimal(Decimal("0.123456785")) == "0.12345679"

    def test_rounds_down_below_half(self):
        """A 4 in the ninth place rounds down."""
        assert format_decimal(Decimal("0.123456784")) == "0.12345678"

    def test_half_up_not_half_even(self):
        """An even eighth digit still rounds up on a trailing 5."""
        assert format_decimal(Decimal("0.123456775")) == "0.12345678"
        assert format_decimal(Decimal("0.123456765")) == "0.12345677"

    def test_more_than_eight_places_gives_eight(self):
        """Excess precision is cut to exactly 8 places."""
        result = format_decimal(Decimal("1.999999991234"))
        assert result == "1.99999999"
        assert len(result.split(".")[1]) == 8

    def test_carry_into_integer_part(self):
        """Rounding can carry across the decimal point."""
        assert format_decimal(Decimal("0.999999995")) == "1"

    def test_trailing_zeros_dropped(self):
        """Output follows #.######## (no trailing zeros)."""
        assert format_decimal(Decimal("1.50000000")) == "1.5"
        assert format_decimal(Decimal("100")) == "100"
        assert format_decimal(Decimal("100.00")) == "100"

    def test_tiny_values(self):
        """Values below half a satoshi become zero, no exponent notation."""
        assert format_decimal(Decimal("0.000000004")) == "0"
        assert format_decimal(Decimal("0.000000005")) == "0.00000001"
        assert format_decimal(Decimal("1E-7")) == "0.0000001"

    def test_negative_rounds_away_from_zero(self):
        """ROUND_HALF_UP is symmetric around zero."""
        assert format_decimal(Decimal("-0.123456785")) == "-0.12345679"

    def test_large_values_keep_precision(self):
        """Large notionals do not overflow the decimal context."""
        value = Decimal("12345678901234567890123.123456789")
        assert format_decimal(value) == "12345678901234567890123.12345679"

    def test_uses_decimal_point(self):
        """Output always uses '.' regardless of locale."""
        assert format_decimal(Decimal("1234.5")) == "1234.5"


# ============================================================
# FEE PERCENTAGES
# ============================================================

class TestPercentageToFraction:
    """Tests for percentage_to_fraction."""

    def test_point_one_percent(self):
        """0.1% is 0.00100000 at 8 places."""
        fraction = percentage_to_fraction("0.1")
        assert fraction == Decimal("0.001")
        assert str(fraction) == "0.00100000"

    def test_rounds_half_up(self):
        """Ninth place 5 rounds up."""
        assert percentage_to_fraction("0.0000005") == Decimal("0.00000001")

    def test_whole_percent(self):
        """25% is a quarter."""
        assert percentage_to_fraction("25") == Decimal("0.25")
