from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import httpx

from storefront.config import settings
from storefront.errors import CouponValidationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CouponValidation:
    valid: bool
    code: Optional[str] = None
    discount_amount: Optional[Decimal] = None
    coupon_owner_id: Optional[str] = None
    message: Optional[str] = None

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "CouponValidation":
        raw = data.get("discountAmount")
        try:
            discount = Decimal(str(raw)) if raw is not None else None
        except InvalidOperation:
            discount = None
        code = data.get("code")
        owner = data.get("couponOwnerId")
        return cls(
            valid=bool(data.get("valid")),
            code=str(code) if code not in (None, "") else None,
            discount_amount=discount,
            coupon_owner_id=str(owner) if owner not in (None, "") else None,
            message=data.get("message") or None,
        )

    @property
    def complete(self) -> bool:
        return bool(self.valid and self.code and self.discount_amount and self.coupon_owner_id)


class CouponValidator:
    """POSTs {code, userId} to the coupon service and parses its verdict."""

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url or settings.coupon_api_url
        self.timeout = settings.http_timeout if timeout is None else timeout
        self._transport = transport

    async def validate(self, code: str, user_id: str) -> CouponValidation:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json={"code": code, "userId": user_id})
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("coupon service call failed: %s", e)
            raise CouponValidationFailed(str(e)) from e

        if not isinstance(data, dict):
            raise CouponValidationFailed(f"unexpected coupon response: {data!r}")
        return CouponValidation.from_payload(data)
