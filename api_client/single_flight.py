"""Single-flight coordination for token refresh"""

import asyncio
import logging
from enum import Enum
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


class RefreshState(str, Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


class RefreshCoordinator:
    """Join-or-start wrapper around a refresh coroutine

    While a refresh is underway, every caller of ``run()`` awaits the same
    task, so N concurrent callers cause exactly one refresh. The task handle
    is released in a ``finally`` block when the refresh ends, whatever the
    outcome, and the next ``run()`` starts a new cycle.
    """

    def __init__(self, refresh_fn: Callable[[], Awaitable[None]]):
        """
        Args:
            refresh_fn: Coroutine function performing one refresh; raises on failure
        """
        self._refresh_fn = refresh_fn
        self._task: Optional[asyncio.Task] = None

    @property
    def state(self) -> RefreshState:
        return RefreshState.REFRESHING if self._task is not None else RefreshState.IDLE

    @property
    def is_refreshing(self) -> bool:
        return self._task is not None

    async def run(self) -> None:
        """Start a refresh, or join the one in progress, and wait for its outcome

        Cancelling a caller only stops that caller's wait; the shared refresh
        keeps running for everyone else.

        Raises:
            Whatever the refresh function raised, to every joined caller
        """
        task = self._task
        if task is None:
            logger.debug("Starting token refresh cycle")
            task = asyncio.ensure_future(self._run_cycle())
            task.add_done_callback(self._on_cycle_done)
            self._task = task
        else:
            logger.debug("Joining token refresh already in progress")

        await asyncio.shield(task)

    async def _run_cycle(self) -> None:
        try:
            await self._refresh_fn()
        finally:
            self._task = None

    def _on_cycle_done(self, task: asyncio.Task) -> None:
        # A task cancelled before its first step never reaches the finally above
        if self._task is task:
            self._task = None
        # Every joiner may have been cancelled; mark the exception as retrieved
        if not task.cancelled() and task.exception() is not None:
            logger.debug(f"Token refresh cycle failed: {task.exception()!r}")
