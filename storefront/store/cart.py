from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional

from storefront.services import pricing
from storefront.utils.validators import require_non_negative

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Product:
    id: str
    name: str
    price: Decimal

    def __post_init__(self) -> None:
        require_non_negative(self.price, "price")


@dataclass
class CartItem:
    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass
class CartStore:
    """
    In-memory cart for one browser.

    Items keep insertion order and are unique by product id.
    A quantity of zero or below removes the line.
    """

    _items: Dict[str, CartItem] = field(default_factory=dict)

    @property
    def items(self) -> List[CartItem]:
        return list(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def get(self, product_id: str) -> Optional[CartItem]:
        return self._items.get(product_id)

    def add_item(self, product: Product, quantity: int = 1) -> None:
        current = self._items.get(product.id)
        if current is not None:
            self.update_quantity(product.id, current.quantity + quantity)
        elif quantity > 0:
            self._items[product.id] = CartItem(product=product, quantity=int(quantity))

    def update_quantity(self, product_id: str, quantity: int) -> None:
        current = self._items.get(product_id)
        if current is None:
            logger.debug("update_quantity: %s not in cart", product_id)
            return
        if quantity <= 0:
            self.remove_item(product_id)
            return
        current.quantity = int(quantity)

    def remove_item(self, product_id: str) -> None:
        self._items.pop(product_id, None)

    def clear(self) -> None:
        self._items.clear()

    def subtotal(self) -> Decimal:
        return pricing.subtotal(self._items.values())
