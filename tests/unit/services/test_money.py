"""Unit tests for money helpers."""

from decimal import Decimal

import pytest

from src.core.services.money import (
    format_amount,
    presented_amounts,
    quantize_amount,
    to_decimal,
)


class TestToDecimal:
    """Tests for loose amount coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (None, Decimal("0")),
            ("", Decimal("0")),
            ("abc", Decimal("0")),
            (True, Decimal("0")),
            (float("nan"), Decimal("0")),
            (0.1, Decimal("0.1")),
            (" 12.50 ", Decimal("12.50")),
            (7, Decimal("7")),
        ],
    )
    def test_coercion(self, value, expected):
        assert to_decimal(value) == expected

    def test_decimal_passthrough(self):
        value = Decimal("1234.5678")
        assert to_decimal(value) is value


class TestQuantizeAmount:
    """Tests for presentation rounding."""

    def test_half_rounds_up(self):
        assert quantize_amount(Decimal("0.005")) == Decimal("0.01")
        assert quantize_amount(Decimal("2.675")) == Decimal("2.68")

    def test_negative_half_rounds_away_from_zero(self):
        assert quantize_amount(Decimal("-0.005")) == Decimal("-0.01")

    def test_two_decimals(self):
        assert str(quantize_amount(Decimal("15000"))) == "15000.00"


class TestFormatAmount:
    """Tests for display formatting."""

    def test_swedish(self):
        assert format_amount(Decimal("12000"), "SEK") == "12 000,00 SEK"

    def test_english(self):
        assert format_amount(Decimal("12000"), "SEK", language="en") == "12,000.00 SEK"

    def test_without_currency(self):
        assert format_amount(Decimal("0.249"), language="sv") == "0,25"

    def test_negative(self):
        assert format_amount(Decimal("-1234.5"), "EUR") == "-1 234,50 EUR"

    def test_large_amount(self):
        assert format_amount(Decimal("1234567.891"), "SEK") == "1 234 567,89 SEK"


class TestPresentedAmounts:
    """Tests for the rounded net/tax/gross triple."""

    def test_gross_is_sum_of_rounded_parts(self):
        # 1.5 x 3.33 at 25%: net 4.995, tax 1.24875, exact gross 6.24375
        net, tax, gross = presented_amounts(Decimal("4.995"), Decimal("1.24875"))

        assert (net, tax) == (Decimal("5.00"), Decimal("1.25"))
        assert gross == Decimal("6.25")
        assert gross == net + tax

    def test_exact_amounts_unchanged(self):
        assert presented_amounts(Decimal("9600"), Decimal("2400")) == (
            Decimal("9600.00"),
            Decimal("2400.00"),
            Decimal("12000.00"),
        )
