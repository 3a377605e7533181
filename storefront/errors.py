from __future__ import annotations


class CartPageError(Exception):
    """Base for every failure the cart page recovers into a message."""


class AuthenticationRequired(CartPageError):
    pass


class CouponInvalid(CartPageError):
    pass


class CouponValidationFailed(CartPageError):
    pass


class CheckoutHttpError(CartPageError):
    def __init__(self, status: int, body: str) -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP error! status: {status}. Details: {body}")


class CheckoutResponseMalformed(CartPageError):
    pass


class CheckoutTransportError(CartPageError):
    pass
