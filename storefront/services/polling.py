"""
Polling

Fixed-interval polling with an explicit start/stop lifecycle. Each tick
is numbered; a response is delivered only if no newer tick has already
delivered, so a slow response cannot overwrite fresher data.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class PollingTask:
    """Cancellable polling loop"""

    def __init__(
        self,
        fetch: Callable[[], Awaitable[Any]],
        on_result: Callable[[Any], None],
        interval: float,
        name: str = "poll",
    ):
        """
        Args:
            fetch: Coroutine function producing one result per tick
            on_result: Called with each result that is not stale
            interval: Seconds between tick starts
            name: Label used in log messages
        """
        self.fetch = fetch
        self.on_result = on_result
        self.interval = interval
        self.name = name
        self._loop_task: Optional[asyncio.Task] = None
        self._inflight: set[asyncio.Task] = set()
        self._stop_task: Optional[asyncio.Task] = None
        self._next_seq = 0
        self._delivered_seq = -1

    @property
    def running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    @property
    def last_delivered(self) -> int:
        """Sequence number of the last delivered result, -1 if none"""
        return self._delivered_seq

    def start(self) -> None:
        """Start polling; the first tick fires immediately"""
        if self.running:
            return
        self._loop_task = asyncio.get_running_loop().create_task(self._run())
        logger.debug(f"{self.name}: started (every {self.interval}s)")

    async def stop(self) -> None:
        """Stop polling and cancel ticks still in flight"""
        tasks = list(self._inflight)
        if self._loop_task is not None:
            tasks.append(self._loop_task)
            self._loop_task = None

        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()
        logger.debug(f"{self.name}: stopped")

    def stop_soon(self) -> None:
        """Request a stop from inside a result callback"""
        self._stop_task = asyncio.get_running_loop().create_task(self.stop())

    async def _run(self) -> None:
        while True:
            self._spawn_tick()
            await asyncio.sleep(self.interval)

    def _spawn_tick(self) -> None:
        seq = self._next_seq
        self._next_seq += 1
        task = asyncio.get_running_loop().create_task(self._tick(seq))
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)

    async def _tick(self, seq: int) -> None:
        try:
            result = await self.fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"{self.name}: tick {seq} failed: {e}")
            return

        if seq <= self._delivered_seq:
            logger.debug(f"{self.name}: dropping stale tick {seq}")
            return

        self._delivered_seq = seq
        self.on_result(result)
