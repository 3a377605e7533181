import pytest

from storefront.services.checkout import CheckoutClient
from storefront.services.coupons import CouponValidator
from storefront.web.pages import PageRegistry

from conftest import CHECKOUT_URL, COUPON_URL


def _registry(max_pages):
    return PageRegistry(
        coupons_factory=lambda: CouponValidator(url=COUPON_URL),
        checkout_factory=lambda: CheckoutClient(url=CHECKOUT_URL),
        max_pages=max_pages,
    )


@pytest.mark.asyncio
async def test_same_browser_gets_same_page():
    registry = _registry(3)

    first = await registry.get("browser-a")
    again = await registry.get("browser-a")

    assert first is again
    assert first.mounted
    assert len(registry) == 1


@pytest.mark.asyncio
async def test_least_recently_used_page_is_evicted_and_unmounted():
    registry = _registry(2)

    a = await registry.get("browser-a")
    b = await registry.get("browser-b")
    await registry.get("browser-a")  # a is now the most recent
    c = await registry.get("browser-c")

    assert len(registry) == 2
    assert not b.mounted
    assert b.sessions._listeners == {}
    assert a.mounted and c.mounted

    # evicted browser comes back with a fresh page
    b2 = await registry.get("browser-b")
    assert b2 is not b
    assert not a.mounted


@pytest.mark.asyncio
async def test_many_new_browsers_stay_bounded():
    registry = _registry(10)
    pages = [await registry.get(f"browser-{i}") for i in range(100)]

    assert len(registry) == 10
    assert sum(p.mounted for p in pages) == 10
    assert all(p.mounted for p in pages[-10:])


@pytest.mark.asyncio
async def test_close_unmounts_everything():
    registry = _registry(5)
    pages = [await registry.get(f"browser-{i}") for i in range(3)]

    registry.close()

    assert len(registry) == 0
    assert not any(p.mounted for p in pages)
