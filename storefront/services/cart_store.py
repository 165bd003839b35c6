"""
Cart Store

Single source of truth for what is in the basket and the arithmetic
derived from it. One store is created per browser session and handed to
every consumer (cart drawer, product cards, checkout).

Persistence: the item list is written to local storage after every
mutation, but only once the saved snapshot has been loaded, so an empty
startup cart never overwrites a saved one.
"""

import logging
from typing import Callable, Optional

from pydantic import ValidationError

from ..core.storage import LocalStorage
from ..exceptions import StorageError, StorefrontError
from ..models.cart import CartItem, CartSnapshot, CartSummary
from ..models.product import Product
from .api_client import StorefrontClient
from .optimistic import PendingOverlay
from .tracking import CartTracker

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "ambev-cart-items"
DEFAULT_MINIMUM_ORDER_VALUE = 200.0


class CartStore:
    """Session-scoped shopping cart"""

    def __init__(
        self,
        storage: LocalStorage,
        client: Optional[StorefrontClient] = None,
        tracker: Optional[CartTracker] = None,
        minimum_order_value: float = DEFAULT_MINIMUM_ORDER_VALUE,
    ):
        self.storage = storage
        self.client = client
        self.tracker = tracker or CartTracker()
        self.minimum_order_value = minimum_order_value
        self._items: list[CartItem] = []
        self._loaded = False
        self._overlay: PendingOverlay[CartItem] = PendingOverlay(
            key=lambda item: item.product.id
        )
        self._listeners: list[Callable[[], None]] = []

    # ==================== Lifecycle ====================

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def initialize(self) -> None:
        """Load the saved cart, then fetch the minimum order value"""
        self.load()
        await self.refresh_minimum_order()

    def load(self) -> None:
        """Rehydrate items from local storage"""
        try:
            saved = self.storage.get_item(CART_STORAGE_KEY)
            if saved:
                self._items = self._merge_duplicates(CartSnapshot.validate_json(saved))
                logger.info(f"Cart restored with {len(self._items)} item(s)")
        except StorageError as e:
            logger.error(f"Error loading cart from storage: {e}")
        except ValidationError as e:
            logger.error(f"Ignoring unreadable saved cart: {e}")
        finally:
            self._loaded = True

    async def refresh_minimum_order(self) -> None:
        """Override the minimum order value from site settings, if configured"""
        if self.client is None:
            return

        try:
            minimum = await self.client.get_minimum_order_value()
        except StorefrontError as e:
            logger.info(
                f"Using default minimum order value {self.minimum_order_value}: {e}"
            )
            return

        if minimum is not None:
            self.minimum_order_value = minimum
            logger.info(f"Minimum order value updated to {minimum}")

    def add_listener(self, listener: Callable[[], None]) -> None:
        """Call listener after every change to the items"""
        self._listeners.append(listener)

    def _changed(self) -> None:
        self._save()
        self._notify()

    def _notify(self) -> None:
        for listener in self._listeners:
            listener()

    def _save(self) -> None:
        if not self._loaded:
            return
        try:
            self.storage.set_item(
                CART_STORAGE_KEY, CartSnapshot.dump_json(self._items).decode("utf-8")
            )
        except StorageError as e:
            logger.error(f"Error saving cart to storage: {e}")

    @staticmethod
    def _merge_duplicates(items: list[CartItem]) -> list[CartItem]:
        merged: dict[int, CartItem] = {}
        for item in items:
            if item.product.id in merged:
                merged[item.product.id].quantity += item.quantity
            else:
                merged[item.product.id] = item
        return list(merged.values())

    # ==================== Mutations ====================

    def add_to_cart(self, product: Product, quantity: int = 1) -> None:
        """
        Add a product, or increase its quantity if it is already in the cart.

        Raises:
            ValueError: quantity is zero or negative
        """
        if quantity < 1:
            raise ValueError(f"Quantity must be positive, got {quantity}")

        self.tracker.notify_addition(product, quantity)

        existing = self._find(product.id)
        if existing:
            existing.quantity += quantity
        else:
            self._items.append(CartItem(product=product, quantity=quantity))
        self._changed()

    def remove_from_cart(self, product_id: int) -> None:
        """Remove an item; unknown ids are ignored"""
        remaining = [item for item in self._items if item.product.id != product_id]
        if len(remaining) != len(self._items):
            self._items = remaining
            self._changed()

    def update_quantity(self, product_id: int, quantity: int) -> None:
        """Set an item's quantity; zero or less removes it"""
        if quantity <= 0:
            self.remove_from_cart(product_id)
            return

        item = self._find(product_id)
        if item:
            item.quantity = quantity
            self._changed()

    def clear_cart(self) -> None:
        """Empty the cart and drop the saved snapshot"""
        self._items = []
        try:
            self.storage.remove_item(CART_STORAGE_KEY)
        except StorageError as e:
            logger.error(f"Error clearing cart from storage: {e}")
        self._notify()

    def _find(self, product_id: int) -> Optional[CartItem]:
        return next(
            (item for item in self._items if item.product.id == product_id),
            None,
        )

    # ==================== Pending changes ====================

    def hide_items(self) -> str:
        """Hide every current item until the returned token is settled"""
        return self._overlay.stage(hide=[item.product.id for item in self._items])

    def commit_pending(self, token: str) -> None:
        """Make a staged change permanent"""
        change = self._overlay.commit(token)
        self._items = [item for item in self._items if item.product.id not in change.hide]
        if self._items:
            self._changed()
        else:
            self.clear_cart()

    def rollback_pending(self, token: str) -> None:
        """Discard a staged change"""
        self._overlay.rollback(token)

    # ==================== Queries ====================

    @property
    def items(self) -> list[CartItem]:
        """Visible items in insertion order"""
        return self._overlay.view(self._items)

    def get_total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    def get_total_price(self) -> float:
        return sum(item.product.price * item.quantity for item in self.items)

    def get_minimum_order(self) -> float:
        return self.minimum_order_value

    def get_remaining_for_minimum(self) -> float:
        return max(0.0, self.minimum_order_value - self.get_total_price())

    def is_minimum_order_met(self) -> bool:
        return self.get_total_price() >= self.minimum_order_value

    def summary(self) -> CartSummary:
        """Items plus derived totals, for the UI"""
        return CartSummary(
            items=self.items,
            total_items=self.get_total_items(),
            total_price=self.get_total_price(),
            minimum_order=self.get_minimum_order(),
            remaining_for_minimum=self.get_remaining_for_minimum(),
            minimum_order_met=self.is_minimum_order_met(),
        )
