import json
from decimal import Decimal
from unittest.mock import AsyncMock

import httpx
import pytest

from storefront.services.checkout import CheckoutClient
from storefront.services.coupons import CouponValidation, CouponValidator
from storefront.services.session import SessionProvider
from storefront.store.cart import CartStore, Product
from storefront.web.cart_page import CartPage

COUPON_URL = "http://coupons.test/api/coupons/validate"
CHECKOUT_URL = "http://shop.test/api/webhooks"


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler):
        self.requests = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def tee():
    return Product(id="tee-logo", name="Logo T-Shirt", price=Decimal("19.99"))


@pytest.fixture
def mug():
    return Product(id="mug-classic", name="Classic Mug", price=Decimal("12.50"))


@pytest.fixture
def store(tee, mug):
    s = CartStore()
    s.add_item(tee, 2)
    s.add_item(mug, 1)
    return s


@pytest.fixture
def sessions():
    return SessionProvider()


@pytest.fixture
def validator():
    """Coupon validator double; tests set ``validate.return_value``."""
    v = AsyncMock(spec=CouponValidator)
    v.validate.return_value = CouponValidation(
        valid=True,
        code="SAVE10",
        discount_amount=Decimal("0.10"),
        coupon_owner_id="owner-1",
    )
    return v


@pytest.fixture
def checkout_client():
    c = AsyncMock(spec=CheckoutClient)
    c.create_session.return_value = "https://pay.example/sess_1"
    return c


@pytest.fixture
def page(store, sessions, validator, checkout_client):
    return CartPage(store=store, sessions=sessions, coupons=validator, checkout=checkout_client)
