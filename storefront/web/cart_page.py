from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Tuple

from storefront.constants import (
    CHECKOUT_ERROR_TEMPLATE,
    MSG_CHECKOUT_BUSY,
    MSG_COUPON_FAILED,
    MSG_EMPTY_CART,
    MSG_INVALID_COUPON,
    MSG_LOGIN_REQUIRED,
)
from storefront.errors import (
    AuthenticationRequired,
    CartPageError,
    CouponInvalid,
    CouponValidationFailed,
)
from storefront.services.checkout import CheckoutClient
from storefront.services.coupons import CouponValidator
from storefront.services.pricing import Totals, compute_totals
from storefront.services.session import Session, SessionProvider, SessionState, Subscription
from storefront.store.cart import CartStore
from storefront.utils.formatters import money, percent
from storefront.utils.validators import is_discount_fraction

logger = logging.getLogger(__name__)

IDLE = "idle"
VALIDATING = "validating"
APPLIED = "applied"
ERROR = "error"
SUBMITTING = "submitting"
REDIRECTING = "redirecting"


@dataclass(frozen=True)
class AppliedCoupon:
    code: str
    discount_amount: Decimal
    coupon_owner_id: str

    @property
    def label(self) -> str:
        return f"Coupon applied: {self.code} ({percent(self.discount_amount)} discount)"


class CartPage:
    """
    State of the cart page for one browser.

    Collaborators are injected; the page owns coupon input, the applied
    coupon, error messages, the checkout state and the current session.
    """

    def __init__(
        self,
        store: CartStore,
        sessions: SessionProvider,
        coupons: CouponValidator,
        checkout: CheckoutClient,
    ) -> None:
        self.store = store
        self.sessions = sessions
        self.coupons = coupons
        self.checkout_client = checkout

        self.coupon_code = ""
        self.applied_coupon: Optional[AppliedCoupon] = None
        self.coupon_error: Optional[str] = None
        self.coupon_state = IDLE

        self.checkout_error: Optional[str] = None
        self.checkout_state = IDLE
        self.redirect_url: Optional[str] = None

        self.session: Optional[Session] = None
        self._session_version = -1
        self._subscription: Optional[Subscription] = None

    # ---------------- lifecycle ----------------

    @property
    def mounted(self) -> bool:
        return self._subscription is not None

    async def mount(self) -> None:
        if self._subscription is not None:
            return
        self._subscription = self.sessions.on_auth_state_change(self._on_auth_state_change)
        self._apply_session(await self.sessions.get_session())

    def unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _on_auth_state_change(self, event: str, state: SessionState) -> None:
        self._apply_session(state)

    def _apply_session(self, state: SessionState) -> bool:
        if state.version < self._session_version:
            logger.debug(
                "dropping stale session state v%s (have v%s)", state.version, self._session_version
            )
            return False
        self._session_version = state.version
        self.session = state.session
        return True

    # ---------------- cart ----------------

    def change_quantity(self, product_id: str, new_quantity: int) -> None:
        self.store.update_quantity(product_id, new_quantity)

    def remove_item(self, product_id: str) -> None:
        self.store.remove_item(product_id)

    def clear_cart(self) -> None:
        self.store.clear()

    # ---------------- coupon ----------------

    async def apply_coupon(self, code: Optional[str] = None) -> Tuple[bool, str]:
        if code is not None:
            self.coupon_code = code
        self.coupon_error = None

        try:
            if self.session is None:
                raise AuthenticationRequired(MSG_LOGIN_REQUIRED)

            self.coupon_state = VALIDATING
            try:
                result = await self.coupons.validate(self.coupon_code, self.session.user_id)
            except Exception as e:
                logger.exception("Error applying coupon")
                raise CouponValidationFailed(MSG_COUPON_FAILED) from e

            if not result.complete or not is_discount_fraction(result.discount_amount):
                raise CouponInvalid(result.message or MSG_INVALID_COUPON)
        except CartPageError as e:
            logger.warning("coupon %r rejected: %s", self.coupon_code, e.__class__.__name__)
            self.coupon_error = str(e)
            self.coupon_state = ERROR
            return False, self.coupon_error

        self.applied_coupon = AppliedCoupon(
            code=result.code,
            discount_amount=result.discount_amount,
            coupon_owner_id=result.coupon_owner_id,
        )
        self.coupon_code = ""
        self.coupon_state = APPLIED
        return True, self.applied_coupon.label

    def remove_coupon(self) -> None:
        self.applied_coupon = None
        self.coupon_error = None
        self.coupon_state = IDLE

    # ---------------- totals ----------------

    def totals(self) -> Totals:
        discount = self.applied_coupon.discount_amount if self.applied_coupon else None
        return compute_totals(self.store.subtotal(), discount)

    # ---------------- checkout ----------------

    @property
    def is_loading(self) -> bool:
        return self.checkout_state == SUBMITTING

    async def checkout(self) -> Tuple[bool, str]:
        if self.is_loading:
            return False, MSG_CHECKOUT_BUSY

        self.checkout_state = SUBMITTING
        self.checkout_error = None
        ok = False
        try:
            if not len(self.store):
                raise CartPageError(MSG_EMPTY_CART)
            coupon_code = self.applied_coupon.code if self.applied_coupon else None
            url = await self.checkout_client.create_session(self.store.items, coupon_code)
            self.redirect_url = url
            ok = True
            return True, url
        except Exception as e:
            logger.exception("Checkout error")
            self.checkout_error = CHECKOUT_ERROR_TEMPLATE.format(detail=str(e) or "Unknown error")
            return False, self.checkout_error
        finally:
            self.checkout_state = REDIRECTING if ok else IDLE

    # ---------------- view ----------------

    def context(self) -> dict:
        t = self.totals()
        return {
            "items": self.store.items,
            "coupon_code": self.coupon_code,
            "applied_coupon": self.applied_coupon,
            "coupon_error": self.coupon_error,
            "checkout_error": self.checkout_error,
            "is_loading": self.is_loading,
            "session": self.session,
            "subtotal": money(t.subtotal),
            "discount": money(t.discount),
            "total": money(t.total),
        }
