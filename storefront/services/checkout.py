from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from storefront.config import settings
from storefront.constants import MSG_NO_SESSION_URL
from storefront.errors import CheckoutHttpError, CheckoutResponseMalformed, CheckoutTransportError
from storefront.store.cart import CartItem
from storefront.utils.formatters import minor_units

logger = logging.getLogger(__name__)


def build_line_items(items: Iterable[CartItem], currency: str | None = None) -> List[Dict[str, Any]]:
    currency = currency or settings.currency
    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": it.product.name},
                "unit_amount": minor_units(it.product.price),
            },
            "quantity": it.quantity,
        }
        for it in items
    ]


def build_payload(items: Iterable[CartItem], coupon_code: Optional[str] = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"items": build_line_items(items)}
    if coupon_code:
        payload["couponCode"] = coupon_code
    return payload


class CheckoutClient:
    """Turns the cart into a hosted payment session and returns its URL."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.checkout_api_url
        self.timeout = settings.http_timeout if timeout is None else timeout
        self._transport = transport

    async def create_session(self, items: Iterable[CartItem], coupon_code: Optional[str] = None) -> str:
        payload = build_payload(items, coupon_code)
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=payload)
                if not response.is_success:
                    body = response.text
                    logger.error("checkout server response %s: %s", response.status_code, body)
                    raise CheckoutHttpError(response.status_code, body)
                data = response.json()
        except httpx.HTTPError as e:
            raise CheckoutTransportError(str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise CheckoutTransportError(f"invalid JSON in checkout response: {e}") from e

        session_url = data.get("sessionUrl") if isinstance(data, dict) else None
        if not session_url:
            raise CheckoutResponseMalformed(MSG_NO_SESSION_URL)
        return str(session_url)
