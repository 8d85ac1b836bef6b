"""Cart package: models, pure transformations and the cart store."""
from .models import Cart, LineItem, Product, StockSnapshot
from .service import CartStore

__all__ = [
    "Cart",
    "LineItem",
    "Product",
    "StockSnapshot",
    "CartStore",
]
