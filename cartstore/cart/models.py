"""Cart models and pure cart transformations.

A cart is an immutable tuple of line items. Every transformation returns a
new tuple; items are frozen and replaced with copies, never edited.
"""
import json
from typing import Optional, Tuple

from pydantic import BaseModel, Field, TypeAdapter


class Product(BaseModel):
    """Catalog product. Only id is typed; title, price, image and the rest
    are carried exactly as the catalog returned them."""
    id: int

    class Config:
        extra = "allow"
        frozen = True


class StockSnapshot(BaseModel):
    """Available amount for a product at lookup time. Never stored."""
    id: Optional[int] = None
    amount: int

    class Config:
        extra = "ignore"
        frozen = True


class LineItem(Product):
    """One product in the cart with its desired amount."""
    amount: int = Field(ge=1)


Cart = Tuple[LineItem, ...]

EMPTY_CART: Cart = ()

_cart_adapter = TypeAdapter(list[LineItem])


def find_item(cart: Cart, product_id: int) -> Optional[LineItem]:
    return next((item for item in cart if item.id == product_id), None)


def cart_size(cart: Cart) -> int:
    """Number of distinct products in the cart."""
    return len(cart)


def with_amount(cart: Cart, product_id: int, amount: int) -> Cart:
    """Copy of the cart with one item's amount replaced, order preserved."""
    if amount < 1:
        raise ValueError("amount must be a positive integer")
    return tuple(
        item.model_copy(update={"amount": amount}) if item.id == product_id else item
        for item in cart
    )


def with_item(cart: Cart, product: Product, amount: int = 1) -> Cart:
    """Copy of the cart with a new line item appended at the end."""
    if find_item(cart, product.id) is not None:
        raise ValueError(f"Product {product.id} is already in the cart")
    item = LineItem(**{**product.model_dump(), "amount": amount})
    return cart + (item,)


def without_item(cart: Cart, product_id: int) -> Cart:
    return tuple(item for item in cart if item.id != product_id)


def dump_cart(cart: Cart) -> str:
    """Serialize to a JSON array of item objects."""
    return json.dumps(
        [item.model_dump(mode="json") for item in cart],
        ensure_ascii=False,
        separators=(",", ":"),
    )


def load_cart(raw: str) -> Cart:
    """
    Deserialize a persisted snapshot.

    Raises:
        ValueError: on invalid JSON, invalid items or duplicate ids
            (pydantic's ValidationError is a ValueError)
    """
    items = _cart_adapter.validate_json(raw)
    seen: set[int] = set()
    for item in items:
        if item.id in seen:
            raise ValueError(f"Duplicate product {item.id} in stored cart")
        seen.add(item.id)
    return tuple(items)
