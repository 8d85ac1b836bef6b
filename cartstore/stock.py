"""
Stock Service - remote stock and catalog lookups

HttpStockService talks to the store API:
- GET /stock/{product_id}    -> {"id": 1, "amount": 3}
- GET /products/{product_id} -> {"id": 1, "title": "...", "price": 179.9, "image": "..."}

Every failure (transport error, non-2xx status, bad JSON, bad payload) is
raised as LookupFailure; callers never see httpx or pydantic errors.
"""

from typing import Protocol, Type, TypeVar

import httpx
from pydantic import BaseModel

from cartstore.cart.models import Product, StockSnapshot
from cartstore.errors import LookupFailure
from cartstore.logging import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class StockService(Protocol):
    async def get_stock(self, product_id: int) -> StockSnapshot:
        ...

    async def get_product(self, product_id: int) -> Product:
        ...


class HttpStockService:
    """StockService over an httpx.AsyncClient.

    The client is owned by the caller (see cartstore.session); its base_url
    and timeout apply to every lookup.
    """

    def __init__(self, client: httpx.AsyncClient):
        self.client = client

    async def _fetch(
        self, resource: str, product_id: int, model: Type[ModelT]
    ) -> ModelT:
        try:
            response = await self.client.get(f"/{resource}/{product_id}")
            response.raise_for_status()
            return model.model_validate(response.json())
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"{resource} lookup for product {product_id} "
                f"returned {e.response.status_code}"
            )
            raise LookupFailure(product_id, resource) from e
        except httpx.HTTPError as e:
            logger.warning(f"{resource} lookup for product {product_id} failed: {e}")
            raise LookupFailure(product_id, resource) from e
        except ValueError as e:
            # Bad JSON and pydantic ValidationError are both ValueErrors
            logger.warning(f"Malformed {resource} payload for product {product_id}: {e}")
            raise LookupFailure(product_id, resource) from e

    async def get_stock(self, product_id: int) -> StockSnapshot:
        return await self._fetch("stock", product_id, StockSnapshot)

    async def get_product(self, product_id: int) -> Product:
        return await self._fetch("products", product_id, Product)
