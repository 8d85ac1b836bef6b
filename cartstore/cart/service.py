"""Cart store: the client-side cart state machine."""
from typing import Callable, List

from cartstore.config import DEFAULT_LANGUAGE, DEFAULT_STORAGE_KEY
from cartstore.errors import (
    MSG_ADD_FAILED,
    MSG_OUT_OF_STOCK,
    MSG_REMOVE_FAILED,
    MSG_UPDATE_FAILED,
    CartError,
    LookupFailure,
    OutOfStock,
    ProductNotFound,
)
from cartstore.i18n import get_text
from cartstore.logging import get_logger
from cartstore.notifications import Notifier
from cartstore.stock import StockService
from cartstore.storage import PersistentStore
from .models import (
    EMPTY_CART,
    Cart,
    Product,
    StockSnapshot,
    cart_size,
    dump_cart,
    find_item,
    load_cart,
    with_amount,
    with_item,
    without_item,
)

logger = get_logger(__name__)

CartListener = Callable[[Cart], None]


class CartStore:
    """
    Owns the cart for one session.

    Features:
    - add/remove/update validated against remote stock
    - immutable cart values, one commit per successful mutation
    - best-effort persistence, skipped when nothing changed since the last write

    Mutations never raise: failures are reported through the notifier and
    leave the cart untouched. The store does not serialize overlapping
    mutations; each one computes its new cart from whatever is committed
    once its lookups have returned.
    """

    def __init__(
        self,
        stock: StockService,
        storage: PersistentStore,
        notifier: Notifier,
        *,
        storage_key: str = DEFAULT_STORAGE_KEY,
        language: str = DEFAULT_LANGUAGE,
    ):
        self.stock = stock
        self.storage = storage
        self.notifier = notifier
        self.storage_key = storage_key
        self.language = language
        self._cart: Cart = EMPTY_CART
        self._persisted: Cart = EMPTY_CART
        self._loaded = False
        self._listeners: List[CartListener] = []

    @classmethod
    async def create(
        cls,
        stock: StockService,
        storage: PersistentStore,
        notifier: Notifier,
        **kwargs,
    ) -> "CartStore":
        """Build a store and load the persisted cart."""
        store = cls(stock, storage, notifier, **kwargs)
        await store.load()
        return store

    @property
    def cart(self) -> Cart:
        return self._cart

    @property
    def cart_size(self) -> int:
        return cart_size(self._cart)

    async def load(self) -> Cart:
        """Load the persisted cart once; later calls return the current cart."""
        if self._loaded:
            return self._cart

        cart = EMPTY_CART
        try:
            raw = await self.storage.get(self.storage_key)
            if raw:
                cart = load_cart(raw)
        except ValueError as e:
            logger.warning(f"Discarding unreadable stored cart: {e}")
        except Exception as e:
            logger.warning(f"Failed to read stored cart: {e}")

        # Re-check: a concurrent load may have finished while we awaited
        if not self._loaded:
            self._cart = cart
            self._persisted = cart
            self._loaded = True
            logger.debug(f"Cart loaded with {len(cart)} item(s)")
        return self._cart

    def subscribe(self, listener: CartListener) -> Callable[[], None]:
        """Call listener with every committed cart. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # Mutations

    async def add_product(self, product_id: int) -> bool:
        """Add one unit of a product. Returns True if a new cart was committed."""
        await self.load()
        try:
            stock = await self.stock.get_stock(product_id)
            existing = find_item(self._cart, product_id)
            desired = (existing.amount if existing else 0) + 1
            if desired > stock.amount:
                raise OutOfStock(product_id, desired, stock.amount)
            if existing is not None:
                cart = with_amount(self._cart, product_id, desired)
            else:
                product = await self.stock.get_product(product_id)
                if product.id != product_id:
                    raise LookupFailure(product_id, "products")
                cart = self._with_new_product(product, stock)
        except OutOfStock as e:
            logger.info(f"Add rejected: {e}")
            self._notify(MSG_OUT_OF_STOCK)
            return False
        except CartError as e:
            logger.warning(f"Add failed: {e}")
            self._notify(MSG_ADD_FAILED)
            return False
        except Exception:
            logger.exception(f"Unexpected error adding product {product_id}")
            self._notify(MSG_ADD_FAILED)
            return False

        await self._commit(cart)
        return True

    async def remove_product(self, product_id: int) -> bool:
        """Remove a product entirely. Removing an absent product is an error."""
        await self.load()
        if find_item(self._cart, product_id) is None:
            logger.warning(f"Remove failed: {ProductNotFound(product_id)}")
            self._notify(MSG_REMOVE_FAILED)
            return False

        await self._commit(without_item(self._cart, product_id))
        return True

    async def update_product_amount(self, product_id: int, amount: int) -> bool:
        """
        Set a product's amount.

        Amounts <= 0 are ignored without a stock lookup or a notification.
        Returns True if a new cart was committed.
        """
        if amount <= 0:
            return False

        await self.load()
        try:
            stock = await self.stock.get_stock(product_id)
            if amount > stock.amount:
                raise OutOfStock(product_id, amount, stock.amount)
            if find_item(self._cart, product_id) is None:
                raise ProductNotFound(product_id)
            cart = with_amount(self._cart, product_id, amount)
        except OutOfStock as e:
            logger.info(f"Update rejected: {e}")
            self._notify(MSG_OUT_OF_STOCK)
            return False
        except CartError as e:
            logger.warning(f"Update failed: {e}")
            self._notify(MSG_UPDATE_FAILED)
            return False
        except Exception:
            logger.exception(f"Unexpected error updating product {product_id}")
            self._notify(MSG_UPDATE_FAILED)
            return False

        await self._commit(cart)
        return True

    # Internals

    def _with_new_product(self, product: Product, stock: StockSnapshot) -> Cart:
        existing = find_item(self._cart, product.id)
        if existing is None:
            return with_item(self._cart, product)
        # Another call added the product during the metadata lookup
        desired = existing.amount + 1
        if desired > stock.amount:
            raise OutOfStock(product.id, desired, stock.amount)
        return with_amount(self._cart, product.id, desired)

    async def _commit(self, cart: Cart) -> None:
        self._cart = cart
        logger.debug(f"Committed cart with {len(cart)} item(s)")
        await self._persist()
        for listener in list(self._listeners):
            try:
                listener(cart)
            except Exception:
                logger.exception("Cart listener failed")

    async def _persist(self) -> None:
        # Loop so the last write always carries the latest commit, even when
        # another commit lands while a write is in flight
        while self._cart != self._persisted:
            cart = self._cart
            try:
                await self.storage.set(self.storage_key, dump_cart(cart))
            except Exception as e:
                logger.warning(f"Failed to persist cart: {e}")
                return
            self._persisted = cart

    def _notify(self, key: str) -> None:
        try:
            self.notifier.error(get_text(key, self.language))
        except Exception:
            logger.exception("Notifier failed")


__all__ = ["CartStore", "CartListener"]
