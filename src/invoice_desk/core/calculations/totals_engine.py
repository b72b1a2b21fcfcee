from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from invoice_desk.core.models.line_item import DiscountKind, DiscountPolicy, LineItem, NO_DISCOUNT


@dataclass(frozen=True)
class Totals:
    subtotal: float
    tax_total: float
    discount_amount: float
    total: float


def line_net(item: LineItem) -> float:
    return item.quantity * item.unit_price


def line_tax(item: LineItem) -> float:
    return line_net(item) * (item.tax_percent / 100)


def line_total(item: LineItem) -> float:
    """Row total shown in the items table (net plus tax)."""
    return item.quantity * item.unit_price * (1 + item.tax_percent / 100)


def discount_for(subtotal: float, discount: DiscountPolicy) -> float:
    if discount.kind is DiscountKind.PERCENT_OF_SUBTOTAL:
        return subtotal * discount.amount / 100
    return discount.amount


def compute_totals(items: Iterable[LineItem], discount: DiscountPolicy = NO_DISCOUNT) -> Totals:
    """
    Subtotal, tax, discount and grand total for a list of line items.

    Nothing is rounded or clamped here: a large absolute discount yields a
    negative total. Rounding happens once, when a figure is formatted.
    """
    subtotal = 0.0
    tax_total = 0.0
    for item in items:
        net = line_net(item)
        subtotal += net
        tax_total += net * (item.tax_percent / 100)
    discount_amount = discount_for(subtotal, discount)
    return Totals(
        subtotal=subtotal,
        tax_total=tax_total,
        discount_amount=discount_amount,
        total=subtotal + tax_total - discount_amount,
    )


def items_gross_total(items: Iterable[LineItem]) -> float:
    """Net plus tax over all items, ignoring the discount (invoice list column)."""
    return sum(line_net(it) + line_tax(it) for it in items)
