"""
Cart session wiring.

Builds the collaborators of a CartStore for one shopping session and hands
the store to the caller explicitly:

    async with cart_session() as store:
        await store.add_product(1)
        render(store.cart)
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

from cartstore.cart.service import CartStore
from cartstore.config import Settings
from cartstore.logging import get_logger
from cartstore.notifications import LogNotifier, Notifier
from cartstore.stock import HttpStockService, StockService
from cartstore.storage import PersistentStore, build_storage

logger = get_logger(__name__)


@asynccontextmanager
async def cart_session(
    settings: Optional[Settings] = None,
    *,
    storage: Optional[PersistentStore] = None,
    notifier: Optional[Notifier] = None,
    stock: Optional[StockService] = None,
) -> AsyncIterator[CartStore]:
    """
    Open a cart session and yield a loaded CartStore.

    Collaborators not passed in are built from settings (environment by
    default). Storage and the HTTP client built here are closed on exit.
    """
    settings = settings or Settings.from_env()
    owned_storage = storage is None
    if storage is None:
        storage = build_storage(settings)

    async with httpx.AsyncClient(
        base_url=settings.api_url, timeout=settings.api_timeout
    ) as client:
        store = await CartStore.create(
            stock or HttpStockService(client),
            storage,
            notifier or LogNotifier(),
            storage_key=settings.storage_key,
            language=settings.language,
        )
        logger.info(f"Cart session started with {store.cart_size} item(s)")
        try:
            yield store
        finally:
            if owned_storage:
                await storage.close()
            logger.info("Cart session closed")
