"""
Invoice totals engine.

Pure functions turning line items into net, tax and gross amounts.
Accumulation is exact (Decimal, no per-line rounding) so that totals are
additive across item lists and ``gross == net + tax`` always holds.
"""

from collections.abc import Iterable

from src.core.entities.invoice import InvoiceTotals, LineAmounts, LineItem
from src.core.services.money import HUNDRED, ZERO, to_decimal


def compute_line_amounts(item: LineItem) -> LineAmounts:
    """
    Compute net and tax for one line.

    Missing quantity, price or tax rate count as zero so a half-filled
    line can be shown live without raising. A discount is applied to the
    line base before tax.
    """
    base = to_decimal(item.quantity) * to_decimal(item.unit_price)
    if item.discount_percent is not None:
        base *= 1 - to_decimal(item.discount_percent) / HUNDRED
    tax = base * (to_decimal(item.tax_rate_percent) / HUNDRED)
    return LineAmounts(item_id=item.id, net=base, tax=tax)


def compute_line_breakdown(items: Iterable[LineItem]) -> list[LineAmounts]:
    """Per-line amounts, in item order."""
    return [compute_line_amounts(item) for item in items]


def compute_totals(items: Iterable[LineItem]) -> InvoiceTotals:
    """
    Aggregate line items into invoice totals.

    Args:
        items: Line items of one invoice; may be empty or incomplete.

    Returns:
        InvoiceTotals with exact net and tax; gross is derived.
    """
    net = ZERO
    tax = ZERO
    for line in compute_line_breakdown(items):
        net += line.net
        tax += line.tax
    return InvoiceTotals(net=net, tax=tax)
