"""
Cart Errors

Failure taxonomy for cart mutations and the message keys shown to the user.
"""

# Message keys (see cartstore.i18n)
MSG_OUT_OF_STOCK = "cart.out_of_stock"
MSG_ADD_FAILED = "cart.add_failed"
MSG_REMOVE_FAILED = "cart.remove_failed"
MSG_UPDATE_FAILED = "cart.update_failed"


class CartError(Exception):
    """Base class for recoverable cart failures."""


class OutOfStock(CartError):
    """Desired amount exceeds the available stock."""

    def __init__(self, product_id: int, requested: int, available: int):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Product {product_id}: requested {requested}, available {available}"
        )


class ProductNotFound(CartError):
    """The product is not in the cart."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is not in the cart")


class LookupFailure(CartError):
    """Stock or product lookup failed (network, not found, malformed payload)."""

    def __init__(self, product_id: int, resource: str):
        self.product_id = product_id
        self.resource = resource
        super().__init__(f"Failed to fetch {resource} for product {product_id}")
