"""Pytest configuration and fixtures"""
import asyncio
import os
import pytest
from unittest.mock import Mock, AsyncMock

# Keep tests independent of the developer's environment
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.pop("UPSTASH_REDIS_REST_URL", None)
os.environ.pop("UPSTASH_REDIS_REST_TOKEN", None)

from cartstore.cart.models import Product, StockSnapshot
from cartstore.cart.service import CartStore
from cartstore.errors import LookupFailure
from cartstore.storage import MemoryStorage

STORAGE_KEY = "@RocketShoes:cart"


@pytest.fixture
def catalog():
    """Products served by the fake API, keyed by id"""
    return {
        1: {
            "id": 1,
            "title": "Tênis de Caminhada Leve Confortável",
            "price": 179.9,
            "image": "https://example.com/shoe-1.jpg",
        },
        2: {
            "id": 2,
            "title": "Tênis VR Caminhada Confortável Detalhes Couro Masculino",
            "price": 139.9,
            "image": "https://example.com/shoe-2.jpg",
        },
        3: {
            "id": 3,
            "title": "Tênis Adidas Duramo Lite 2.0",
            "price": 219.9,
            "image": "https://example.com/shoe-3.jpg",
        },
    }


@pytest.fixture
def stock_levels():
    """Available amount per product id; tests mutate it freely"""
    return {1: 5, 2: 3, 3: 2}


@pytest.fixture
def mock_stock(catalog, stock_levels):
    """StockService backed by the catalog and stock_levels fixtures.

    Each lookup yields to the event loop like a real network call would.
    """

    async def get_stock(product_id):
        await asyncio.sleep(0)
        if product_id not in stock_levels:
            raise LookupFailure(product_id, "stock")
        return StockSnapshot(id=product_id, amount=stock_levels[product_id])

    async def get_product(product_id):
        await asyncio.sleep(0)
        if product_id not in catalog:
            raise LookupFailure(product_id, "products")
        return Product(**catalog[product_id])

    service = Mock()
    service.get_stock = AsyncMock(side_effect=get_stock)
    service.get_product = AsyncMock(side_effect=get_product)
    return service


@pytest.fixture
def mock_notifier():
    """Notifier recording every user-facing message"""
    return Mock()


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def cart_store(mock_stock, memory_storage, mock_notifier):
    """CartStore over an empty in-memory storage (loads on first use)"""
    return CartStore(
        mock_stock,
        memory_storage,
        mock_notifier,
        storage_key=STORAGE_KEY,
        language="pt",
    )
