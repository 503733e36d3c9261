# storefront/session.py
import json
import os
from typing import List, Optional, Protocol, Sequence

from .cart import Cart, PersistedStateCorrupt
from .catalog import filter_by_category, load_catalog, search
from .logger import get_logger
from .models import ALL, Product
from .storage import StorageError

logger = get_logger(__name__)

CART_KEY = os.getenv("CART_KEY", "shopEasyCart")


class Store(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class StoreSession:
    """
    State for one shopper: the read-only catalog, the currently displayed
    subset, the selected category and the cart. The cart snapshot is
    written back to `store` after every cart mutation.
    """

    def __init__(
        self,
        catalog: Sequence[Product],
        store: Store,
        cart_key: str = CART_KEY,
    ):
        self.catalog = tuple(catalog)
        self.store = store
        self.cart_key = cart_key
        self.filtered_view: List[Product] = list(self.catalog)
        self.selected_category = ALL
        self.cart_open = False
        self.cart = self._load_cart()

    @classmethod
    def open(cls, catalog_path: str, store: Store, cart_key: str = CART_KEY) -> "StoreSession":
        return cls(load_catalog(catalog_path), store, cart_key=cart_key)

    def _load_cart(self) -> Cart:
        try:
            raw = self.store.get(self.cart_key)
        except StorageError as e:
            logger.error("Could not read saved cart: %s", e)
            return Cart()
        if not raw:
            return Cart()

        try:
            try:
                data = json.loads(raw)
            except ValueError as e:
                raise PersistedStateCorrupt(f"Saved cart is not JSON: {e}") from e
            cart = Cart.from_snapshot(data)
        except PersistedStateCorrupt as e:
            logger.warning("Discarding saved cart under %s: %s", self.cart_key, e)
            return Cart()

        logger.info(
            "Restored cart with %d lines (%d items)", len(cart), cart.total_item_count
        )
        return cart

    def _save_cart(self) -> None:
        payload = json.dumps(self.cart.snapshot())
        try:
            self.store.set(self.cart_key, payload)
        except StorageError as e:
            logger.error("Could not persist cart; keeping in-memory copy: %s", e)

    # -- views --

    def filter_by_category(self, category: str) -> List[Product]:
        self.selected_category = category
        self.filtered_view = filter_by_category(self.catalog, category)
        return self.filtered_view

    def search(self, query: str) -> List[Product]:
        self.filtered_view = search(self.catalog, query)
        return self.filtered_view

    def reset_view(self) -> None:
        self.cart_open = False
        self.selected_category = ALL
        self.filtered_view = list(self.catalog)

    def toggle_cart(self) -> bool:
        self.cart_open = not self.cart_open
        return self.cart_open

    def close_cart(self) -> None:
        self.cart_open = False

    # -- cart --

    def add_to_cart(self, product: Product) -> None:
        line = self.cart.add(product)
        logger.debug("Cart: product %d quantity now %d", product.id, line.quantity)
        self._save_cart()

    def remove_from_cart(self, product_id: int) -> None:
        self.cart.remove(product_id)
        self._save_cart()

    def set_quantity(self, product_id: int, quantity: int) -> None:
        self.cart.set_quantity(product_id, quantity)
        self._save_cart()

    def clear_cart(self) -> None:
        self.cart.clear()
        self._save_cart()

    def checkout(self) -> None:
        logger.info(
            "Checkout requested for %d items (%.2f); not available in this demo.",
            self.cart.total_item_count,
            self.cart.total_price,
        )

    @property
    def total_item_count(self) -> int:
        return self.cart.total_item_count

    @property
    def total_price(self) -> float:
        return self.cart.total_price

    @property
    def total_savings(self) -> float:
        return self.cart.total_savings

    @property
    def final_total(self) -> float:
        return self.cart.final_total
