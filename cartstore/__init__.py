"""
cartstore - client-side shopping cart state

This package contains:
- cart: line item models and the CartStore state machine
- stock: remote stock/product lookups (httpx)
- storage: persistent key/value snapshots (Upstash Redis, file, memory)
- notifications: user-facing error channel
- session: wiring of the above for one shopping session
"""

from cartstore.cart import Cart, CartStore, LineItem, Product
from cartstore.session import cart_session

__all__ = [
    "Cart",
    "CartStore",
    "LineItem",
    "Product",
    "cart_session",
]
