"""Tests for decimal text <-> raw quantity conversions."""
import pytest

from pool_sync.core.errors import InvalidFormat
from pool_sync.core.quantity import (
    decimal_to_raw,
    format_raw,
    is_decimal_text,
    raw_to_decimal,
    raw_to_decimal_text,
)


class TestDecimalToRaw:
    """Test cases for parsing entered amounts."""

    @pytest.mark.parametrize("text,decimals,expected", [
        ("1", 18, 10**18),
        ("1.5", 18, 15 * 10**17),
        (".25", 6, 250000),
        ("3.", 6, 3000000),
        ("0", 18, 0),
        ("0.000001", 6, 1),
        ("42", 0, 42),
    ])
    def test_valid_entries(self, text, decimals, expected):
        """Test conversion of well-formed decimal text."""
        assert decimal_to_raw(text, decimals) == expected

    def test_truncates_extra_fraction_digits(self):
        """Test that digits beyond the token precision are dropped, not rounded."""
        assert decimal_to_raw("1.0000009", 6) == 1000000
        assert decimal_to_raw("0.9999999", 6) == 999999

    def test_exact_for_large_quantities(self):
        """Test that values beyond float precision convert exactly."""
        text = "123456789012345678901234567890.123456789012345678"
        assert decimal_to_raw(text, 18) == 123456789012345678901234567890123456789012345678

    @pytest.mark.parametrize("text", [
        "", ".", "abc", "1e5", "-1", "1.2.3", " 1", "1,5", "5\n", "\u0665", "1.\u0662",
    ])
    def test_invalid_entries(self, text):
        """Test that anything but digits with one optional point is rejected."""
        with pytest.raises(InvalidFormat):
            decimal_to_raw(text, 18)

    def test_invalid_format_is_value_error(self):
        """Test that callers catching ValueError also see format errors."""
        with pytest.raises(ValueError):
            decimal_to_raw("x", 18)


class TestRawToDecimal:
    """Test cases for rendering raw quantities."""

    def test_raw_to_decimal(self):
        assert raw_to_decimal(15 * 10**17, 18) == 1.5
        assert raw_to_decimal(0, 6) == 0.0

    @pytest.mark.parametrize("qty,decimals,expected", [
        (10**18, 18, "1"),
        (1500000, 6, "1.5"),
        (5, 18, "0.000000000000000005"),
        (0, 18, "0"),
        (42, 0, "42"),
    ])
    def test_raw_to_decimal_text(self, qty, decimals, expected):
        """Test exact, trimmed text for wallet balances."""
        assert raw_to_decimal_text(qty, decimals) == expected

    def test_raw_to_decimal_text_roundtrips_through_parser(self):
        """Test that exact text parses back to the same quantity."""
        qty = 123456789123456789123
        assert decimal_to_raw(raw_to_decimal_text(qty, 18), 18) == qty

    def test_raw_to_decimal_text_negative(self):
        with pytest.raises(ValueError):
            raw_to_decimal_text(-1, 18)

    @pytest.mark.parametrize("qty,decimals,places,expected", [
        (100 * 10**18, 18, 6, "100.000000"),
        (0, 18, 6, "0.000000"),
        (1999999, 6, 3, "1.999"),
        (123456789, 6, 6, "123.456789"),
        (1, 18, 6, "0.000000"),
    ])
    def test_format_raw_rounds_down(self, qty, decimals, places, expected):
        """Test fixed-place formatting never rounds up."""
        assert format_raw(qty, decimals, places) == expected


def test_is_decimal_text():
    assert is_decimal_text("1.")
    assert is_decimal_text(".1")
    assert not is_decimal_text(".")
    assert not is_decimal_text("")
