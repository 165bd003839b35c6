"""Order status tracking"""

import logging
from typing import Callable, Optional

from ..models.checkout import OrderSnapshot
from .api_client import StorefrontClient
from .polling import PollingTask

logger = logging.getLogger(__name__)


class OrderTracker:
    """Polls an order until it reaches a final status"""

    def __init__(
        self,
        client: StorefrontClient,
        order_id: int,
        interval: float = 5.0,
        on_update: Optional[Callable[[OrderSnapshot], None]] = None,
    ):
        self.client = client
        self.order_id = order_id
        self.on_update = on_update
        self.latest: Optional[OrderSnapshot] = None
        self._poller = PollingTask(
            fetch=self._fetch,
            on_result=self._handle,
            interval=interval,
            name=f"order-{order_id}",
        )

    @property
    def running(self) -> bool:
        return self._poller.running

    def start(self) -> None:
        self._poller.start()

    async def stop(self) -> None:
        await self._poller.stop()

    async def _fetch(self) -> OrderSnapshot:
        return await self.client.get_order(self.order_id)

    def _handle(self, order: OrderSnapshot) -> None:
        previous = self.latest.status if self.latest else None
        self.latest = order
        if order.status != previous:
            logger.info(f"Order {self.order_id} status: {previous} -> {order.status}")
        if self.on_update:
            self.on_update(order)
        if order.is_final:
            self._poller.stop_soon()

    @property
    def finished(self) -> bool:
        """Stopped after seeing a final status"""
        return not self.running and self.latest is not None and self.latest.is_final


def prune_finished(trackers: dict[int, OrderTracker]) -> int:
    """Drop trackers whose order reached a final status; returns how many"""
    finished = [order_id for order_id, tracker in trackers.items() if tracker.finished]
    for order_id in finished:
        del trackers[order_id]
    if finished:
        logger.debug(f"Pruned {len(finished)} finished order tracker(s)")
    return len(finished)
