"""
Cart tracking

Best-effort notification of cart additions. Nothing here ever raises to
the caller: a failed notification is logged and forgotten.
"""

import asyncio
import logging
from typing import Optional

from ..core.session import get_or_create_session_id
from ..core.storage import LocalStorage
from ..exceptions import StorefrontError
from ..models.product import Product
from .api_client import StorefrontClient

logger = logging.getLogger(__name__)


class CartTracker:
    """Notifier interface; the default implementation does nothing"""

    def notify_addition(self, product: Product, quantity: int) -> None:
        """Schedule a notification without waiting for it"""

    async def track(self, product: Product, quantity: int) -> list:
        """Send the notification and return any triggered discounts"""
        return []


class ApiCartTracker(CartTracker):
    """Reports cart additions to /api/cart-tracking"""

    def __init__(self, client: StorefrontClient, storage: LocalStorage):
        self.client = client
        self.storage = storage
        self._tasks: set[asyncio.Task] = set()

    def notify_addition(self, product: Product, quantity: int) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop - cart tracking skipped")
            return

        task = loop.create_task(self.track(product, quantity))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def track(self, product: Product, quantity: int) -> list:
        try:
            session_id = get_or_create_session_id(self.storage)
            discounts = await self.client.track_cart_addition(
                session_id=session_id,
                product_id=product.id,
                product_name=product.name,
                product_price=product.price,
                quantity_added=quantity,
            )
        except StorefrontError as e:
            logger.error(f"Error tracking cart addition: {e}")
            return []

        if discounts:
            logger.info(f"Dynamic discounts triggered: {discounts}")
        logger.debug(f"Cart tracking: {product.name} added to cart (qty: {quantity})")
        return discounts

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight notifications, e.g. before shutdown"""
        if self._tasks:
            await asyncio.wait(set(self._tasks), timeout=timeout)
