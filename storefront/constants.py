from decimal import Decimal

# product_id -> (name, unit price)
PRODUCTS = {
    "mug-classic": ("Classic Mug", Decimal("12.50")),
    "tee-logo": ("Logo T-Shirt", Decimal("19.99")),
    "hoodie-zip": ("Zip Hoodie", Decimal("44.00")),
    "sticker-pack": ("Sticker Pack", Decimal("4.25")),
    "tote-canvas": ("Canvas Tote", Decimal("15.00")),
}

MSG_LOGIN_REQUIRED = "Please log in to apply a coupon."
MSG_INVALID_COUPON = "Invalid coupon"
MSG_COUPON_FAILED = "Failed to apply coupon. Please try again."
MSG_NO_SESSION_URL = "No session URL returned from the server"
MSG_CHECKOUT_BUSY = "Checkout is already in progress."
MSG_EMPTY_CART = "cart is empty"

CHECKOUT_ERROR_TEMPLATE = (
    "An error occurred during checkout: {detail}. Please try again or contact support."
)
