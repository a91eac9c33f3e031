import asyncio

import pytest

from api_client import RefreshCoordinator, RefreshState
from helpers import wait_until


class GatedRefresh:
    """Refresh function that blocks until released and counts its calls"""

    def __init__(self, error=None):
        self.calls = 0
        self.gate = asyncio.Event()
        self.error = error

    async def __call__(self):
        self.calls += 1
        await self.gate.wait()
        if self.error is not None:
            raise self.error


@pytest.mark.asyncio
async def test_concurrent_runs_share_one_refresh():
    refresh = GatedRefresh()
    coordinator = RefreshCoordinator(refresh)

    waiters = [asyncio.ensure_future(coordinator.run()) for _ in range(10)]
    await wait_until(lambda: refresh.calls == 1)
    assert coordinator.state == RefreshState.REFRESHING

    refresh.gate.set()
    await asyncio.gather(*waiters)

    assert refresh.calls == 1
    assert coordinator.state == RefreshState.IDLE
    assert not coordinator.is_refreshing


@pytest.mark.asyncio
async def test_failure_reaches_every_joiner_and_state_resets():
    refresh = GatedRefresh(error=RuntimeError("rejected"))
    coordinator = RefreshCoordinator(refresh)

    waiters = [asyncio.ensure_future(coordinator.run()) for _ in range(3)]
    await wait_until(lambda: refresh.calls == 1)
    refresh.gate.set()
    results = await asyncio.gather(*waiters, return_exceptions=True)

    assert all(isinstance(r, RuntimeError) and str(r) == "rejected" for r in results)
    assert results[0] is results[1] is results[2]
    assert coordinator.state == RefreshState.IDLE


@pytest.mark.asyncio
async def test_run_after_completion_starts_a_new_cycle():
    refresh = GatedRefresh()
    refresh.gate.set()
    coordinator = RefreshCoordinator(refresh)

    await coordinator.run()
    await coordinator.run()

    assert refresh.calls == 2


@pytest.mark.asyncio
async def test_run_after_failure_starts_a_new_cycle():
    refresh = GatedRefresh(error=RuntimeError("rejected"))
    refresh.gate.set()
    coordinator = RefreshCoordinator(refresh)

    with pytest.raises(RuntimeError):
        await coordinator.run()
    refresh.error = None
    await coordinator.run()

    assert refresh.calls == 2
    assert coordinator.state == RefreshState.IDLE


@pytest.mark.asyncio
async def test_cancelling_a_joiner_does_not_cancel_the_refresh():
    refresh = GatedRefresh()
    coordinator = RefreshCoordinator(refresh)

    first = asyncio.ensure_future(coordinator.run())
    second = asyncio.ensure_future(coordinator.run())
    await wait_until(lambda: refresh.calls == 1)

    first.cancel()
    with pytest.raises(asyncio.CancelledError):
        await first
    assert coordinator.is_refreshing

    refresh.gate.set()
    await second

    assert refresh.calls == 1
    assert coordinator.state == RefreshState.IDLE


@pytest.mark.asyncio
async def test_refresh_survives_when_every_joiner_is_cancelled():
    refresh = GatedRefresh(error=RuntimeError("rejected"))
    coordinator = RefreshCoordinator(refresh)

    only = asyncio.ensure_future(coordinator.run())
    await wait_until(lambda: refresh.calls == 1)
    only.cancel()
    with pytest.raises(asyncio.CancelledError):
        await only

    refresh.gate.set()
    await wait_until(lambda: not coordinator.is_refreshing)

    assert coordinator.state == RefreshState.IDLE
