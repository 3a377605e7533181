from __future__ import annotations

import logging
from collections import OrderedDict
from typing import Callable

from storefront.config import settings
from storefront.services.checkout import CheckoutClient
from storefront.services.coupons import CouponValidator
from storefront.services.session import SessionProvider
from storefront.store.cart import CartStore
from storefront.web.cart_page import CartPage

logger = logging.getLogger(__name__)


class PageRegistry:
    """
    browser id -> mounted CartPage. Memory only, lost on restart.

    Holds at most ``max_pages``; the least recently used page is unmounted
    and dropped to make room.
    """

    def __init__(
        self,
        coupons_factory: Callable[[], CouponValidator] = CouponValidator,
        checkout_factory: Callable[[], CheckoutClient] = CheckoutClient,
        max_pages: int | None = None,
    ) -> None:
        self.coupons_factory = coupons_factory
        self.checkout_factory = checkout_factory
        self.max_pages = max(1, settings.max_pages if max_pages is None else max_pages)
        self._pages: OrderedDict[str, CartPage] = OrderedDict()

    def __len__(self) -> int:
        return len(self._pages)

    async def get(self, sid: str) -> CartPage:
        page = self._pages.get(sid)
        if page is None:
            page = CartPage(
                store=CartStore(),
                sessions=SessionProvider(),
                coupons=self.coupons_factory(),
                checkout=self.checkout_factory(),
            )
            self._pages[sid] = page
            logger.info("new cart page for browser %s", sid[:8])
            self._evict()
        else:
            self._pages.move_to_end(sid)
        if not page.mounted:
            await page.mount()
        return page

    def _evict(self) -> None:
        while len(self._pages) > self.max_pages:
            sid = next(iter(self._pages))
            logger.info("evicting idle cart page for browser %s", sid[:8])
            self.drop(sid)

    def drop(self, sid: str) -> None:
        page = self._pages.pop(sid, None)
        if page is not None:
            page.unmount()

    def close(self) -> None:
        for sid in list(self._pages):
            self.drop(sid)
