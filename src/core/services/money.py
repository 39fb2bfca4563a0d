"""
Money helpers.

Amounts are carried as exact ``Decimal`` values. The functions here are the
only place rounding happens: at the presentation boundary.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    """Coerce a loosely typed amount to Decimal, treating junk as zero."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        # str() keeps floats at their shortest repr (0.1 -> "0.1")
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return result if result.is_finite() else ZERO


def quantize_amount(value: Decimal) -> Decimal:
    """Round to whole cents, half away from zero."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_amount(value: Decimal, currency: str | None = None, language: str = "sv") -> str:
    """
    Format an amount for display with exactly two decimals.

    Swedish uses a space as thousands separator and a decimal comma
    (``12 000,00 SEK``); English uses ``12,000.00 SEK``.
    """
    text = f"{quantize_amount(value):,.2f}"
    if language == "sv":
        text = text.replace(",", " ").replace(".", ",")
    return f"{text} {currency}" if currency else text


def presented_amounts(net: Decimal, tax: Decimal) -> tuple[Decimal, Decimal, Decimal]:
    """
    Round net and tax to cents and derive gross from the rounded parts.

    Rounding gross on its own can drift a cent from the printed net and tax
    (4.995 + 1.24875 gives 5.00 + 1.25 but 6.24), so every surface that shows
    the three amounts together takes them from here.
    """
    shown_net = quantize_amount(net)
    shown_tax = quantize_amount(tax)
    return shown_net, shown_tax, shown_net + shown_tax
