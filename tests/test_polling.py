"""Tests for polling and order tracking"""

import asyncio

import pytest

from storefront.services.optimistic import PendingOverlay
from storefront.services.order_tracking import OrderTracker, prune_finished
from storefront.services.polling import PollingTask


async def _wait_until(predicate, timeout: float = 2.0) -> None:
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(0.01)


@pytest.mark.asyncio
async def test_slow_stale_response_is_dropped():
    """The first tick answers after newer ticks and must not be delivered."""
    calls = 0
    results = []

    async def fetch():
        nonlocal calls
        seq = calls
        calls += 1
        if seq == 0:
            await asyncio.sleep(0.2)
        return seq

    poller = PollingTask(fetch, results.append, interval=0.02)
    poller.start()
    await asyncio.sleep(0.35)
    await poller.stop()

    assert results
    assert 0 not in results
    assert results == sorted(results)
    assert poller.last_delivered == results[-1]


@pytest.mark.asyncio
async def test_failed_tick_does_not_stop_polling():
    calls = 0
    results = []

    async def fetch():
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("temporary failure")
        return calls

    poller = PollingTask(fetch, results.append, interval=0.01)
    poller.start()
    await _wait_until(lambda: len(results) >= 2)
    await poller.stop()

    assert poller.running is False


@pytest.mark.asyncio
async def test_stop_cancels_in_flight_tick():
    results = []
    started = asyncio.Event()

    async def fetch():
        started.set()
        await asyncio.sleep(10)
        return "late"

    poller = PollingTask(fetch, results.append, interval=10)
    poller.start()
    await started.wait()
    await poller.stop()
    await asyncio.sleep(0.05)

    assert results == []
    assert poller.running is False


@pytest.mark.asyncio
async def test_order_tracker_stops_at_final_status(api_client, fake_api):
    fake_api.order_statuses = ["pending", "paid", "delivered"]
    updates = []
    tracker = OrderTracker(api_client, 42, interval=0.01, on_update=updates.append)

    tracker.start()
    await _wait_until(lambda: not tracker.running)

    assert tracker.latest.status == "delivered"
    statuses = [u.status for u in updates]
    assert statuses[:3] == ["pending", "paid", "delivered"]
    assert set(statuses[3:]) <= {"delivered"}


@pytest.mark.asyncio
async def test_prune_finished_trackers(api_client, fake_api):
    fake_api.order_statuses = ["delivered"]
    done = OrderTracker(api_client, 41, interval=0.01)
    done.start()
    await _wait_until(lambda: not done.running)

    fake_api.order_statuses = ["pending"]
    active = OrderTracker(api_client, 42, interval=0.01)
    active.start()
    await _wait_until(lambda: active.latest is not None)
    trackers = {41: done, 42: active}

    assert done.finished is True
    assert active.finished is False
    assert prune_finished(trackers) == 1
    assert list(trackers) == [42]

    await active.stop()
    assert active.finished is False


def test_overlay_view_commit_and_rollback():
    overlay = PendingOverlay(key=lambda entry: entry["id"])
    base = [{"id": 1}, {"id": 2}]

    hide = overlay.stage(hide=[1])
    provisional = overlay.stage(add=[{"id": 3}])

    assert overlay.view(base) == [{"id": 2}, {"id": 3}]

    overlay.rollback(hide)
    assert overlay.view(base) == [{"id": 1}, {"id": 2}, {"id": 3}]

    change = overlay.commit(provisional)
    assert change.add == [{"id": 3}]
    assert overlay.has_pending is False
    assert overlay.view(base) == base
