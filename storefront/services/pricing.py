from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from storefront.store.cart import CartItem


@dataclass(frozen=True)
class Totals:
    subtotal: Decimal
    discount: Decimal
    total: Decimal


def subtotal(items: Iterable[CartItem]) -> Decimal:
    return sum((it.line_total for it in items), Decimal("0"))


def compute_totals(subtotal_value: Decimal, discount_amount: Optional[Decimal] = None) -> Totals:
    """
    discount = subtotal * discount_amount; total = subtotal - discount.
    Nothing is rounded here, only on display.
    """
    if discount_amount is None:
        return Totals(subtotal=subtotal_value, discount=Decimal("0"), total=subtotal_value)
    d = subtotal_value * Decimal(discount_amount)
    return Totals(subtotal=subtotal_value, discount=d, total=subtotal_value - d)
