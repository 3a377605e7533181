import itertools
from decimal import Decimal

import pytest

from storefront.services.pricing import compute_totals, subtotal
from storefront.store.cart import CartItem, Product
from storefront.utils.formatters import minor_units, money, percent


def _items(*rows):
    return [
        CartItem(product=Product(id=f"p{i}", name=f"P{i}", price=Decimal(price)), quantity=qty)
        for i, (price, qty) in enumerate(rows)
    ]


def test_example_cart_with_ten_percent_coupon():
    items = _items(("19.99", 2))
    t = compute_totals(subtotal(items), Decimal("0.10"))

    assert t.subtotal == Decimal("39.98")
    assert t.discount == Decimal("3.998")
    assert t.total == Decimal("35.982")
    assert money(t.total) == "$35.98"


def test_subtotal_does_not_depend_on_order():
    rows = [("0.10", 3), ("19.99", 2), ("4.25", 7), ("0.01", 1)]
    expected = Decimal("0.30") + Decimal("39.98") + Decimal("29.75") + Decimal("0.01")

    for perm in itertools.permutations(rows):
        assert subtotal(_items(*perm)) == expected


def test_no_coupon_total_equals_subtotal():
    t = compute_totals(Decimal("52.48"))
    assert t.total == t.subtotal == Decimal("52.48")
    assert t.discount == Decimal("0")


@pytest.mark.parametrize("d", ["0", "0.05", "0.1", "0.333", "0.5", "0.99", "0.9999"])
def test_total_is_discounted_subtotal(d):
    s = Decimal("123.45")
    t = compute_totals(s, Decimal(d))

    assert t.total == s * (1 - Decimal(d))
    assert t.total <= t.subtotal


def test_empty_cart():
    assert subtotal([]) == Decimal("0")


@pytest.mark.parametrize(
    "price, cents",
    [("19.99", 1999), ("0.005", 1), ("12.345", 1235), ("0", 0), ("44", 4400)],
)
def test_minor_units_round_half_up(price, cents):
    assert minor_units(Decimal(price)) == cents


@pytest.mark.parametrize("fraction, label", [("0.1", "10%"), ("0.10", "10%"), ("0.125", "12.5%"), ("0.5", "50%")])
def test_percent_label(fraction, label):
    assert percent(Decimal(fraction)) == label
