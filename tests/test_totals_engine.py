import pytest

from invoice_desk.core.calculations import compute_totals, items_gross_total, line_total
from invoice_desk.core.models.line_item import NO_DISCOUNT, DiscountKind, DiscountPolicy, LineItem
from invoice_desk.utils.formatting import format_date, format_money, format_qty


def _items(*rows):
    return [LineItem(f"item {idx}", quantity=q, unit_price=p, tax_percent=t) for idx, (q, p, t) in enumerate(rows)]


def test_single_item_with_tax_and_no_discount():
    totals = compute_totals(_items((2, 50, 10)), DiscountPolicy(DiscountKind.ABSOLUTE, 0))

    assert totals.subtotal == pytest.approx(100)
    assert totals.tax_total == pytest.approx(10)
    assert totals.discount_amount == 0
    assert totals.total == pytest.approx(110)


def test_percent_discount_applies_to_subtotal_only():
    totals = compute_totals(_items((1, 200, 0), (3, 10, 20)), DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, 10))

    assert totals.subtotal == pytest.approx(230)
    assert totals.tax_total == pytest.approx(6)
    assert totals.discount_amount == pytest.approx(23)
    assert totals.total == pytest.approx(213)


def test_zero_items_percent_discount_is_zero():
    totals = compute_totals([], DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, 25))

    assert (totals.subtotal, totals.tax_total, totals.discount_amount, totals.total) == (0, 0, 0, 0)


def test_zero_items_absolute_discount_gives_negative_total():
    totals = compute_totals([], DiscountPolicy(DiscountKind.ABSOLUTE, 15))

    assert totals.subtotal == 0
    assert totals.tax_total == 0
    assert totals.discount_amount == 15
    assert totals.total == -15


def test_discount_larger_than_total_is_not_clamped():
    totals = compute_totals(_items((1, 10, 0)), DiscountPolicy(DiscountKind.ABSOLUTE, 25))

    assert totals.total == pytest.approx(-15)
    assert format_money(totals.total, "USD") == "-$15.00"


@pytest.mark.parametrize("percent", [0, 7.5, 10, 33.3, 100])
def test_percent_matches_equivalent_absolute_discount(percent):
    items = _items((3, 19.99, 15), (1, 0.5, 0), (12, 7, 5))
    subtotal = compute_totals(items).subtotal

    by_percent = compute_totals(items, DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, percent))
    by_value = compute_totals(items, DiscountPolicy(DiscountKind.ABSOLUTE, subtotal * percent / 100))

    assert by_percent.discount_amount == pytest.approx(by_value.discount_amount)
    assert by_percent.total == pytest.approx(by_value.total)


def test_totals_are_deterministic():
    items = _items((1.1, 2.2, 3.3), (4.4, 5.5, 6.6), (0.1, 0.2, 17.5))
    discount = DiscountPolicy(DiscountKind.PERCENT_OF_SUBTOTAL, 12.5)

    assert compute_totals(items, discount) == compute_totals(list(items), discount)


def test_line_total_and_gross_total_ignore_discount():
    items = _items((2, 50, 10), (1, 30, 20))

    assert line_total(items[0]) == pytest.approx(110)
    assert items_gross_total(items) == pytest.approx(146)
    assert compute_totals(items, NO_DISCOUNT).total == pytest.approx(items_gross_total(items))


def test_line_item_from_mapping_coerces_bad_numbers():
    item = LineItem.from_mapping({"item": "Hosting", "quantity": "2,5", "unit_price": None, "tax_percent": "nan"})

    assert item.description_primary == "Hosting"
    assert item.quantity == 2.5
    assert item.unit_price == 0
    assert item.tax_percent == 0


def test_discount_policy_from_mapping():
    assert DiscountPolicy.from_mapping({"discount_type": "percent", "discount_amount": "10"}) == DiscountPolicy(
        DiscountKind.PERCENT_OF_SUBTOTAL, 10
    )
    assert DiscountPolicy.from_mapping({}) == NO_DISCOUNT


def test_format_money_uses_symbol_or_code():
    assert format_money(1234.5, "USD") == "$1,234.50"
    assert format_money(1234.5, "MUR") == "MUR 1,234.50"
    assert format_money(0.004, "EUR") == "€0.00"
    assert format_money(-0.001, "USD") == "$0.00"


def test_format_helpers():
    assert format_date("2024-03-05") == "05/03/2024"
    assert format_date("not a date") == "not a date"
    assert format_qty(2.0) == "2"
    assert format_qty(2.5) == "2.5"
