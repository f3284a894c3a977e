"""Timer port used by the game core, and its asyncio implementation."""

import asyncio
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def schedule_repeating(self, period: float, callback: Callable[[], None]): ...

    def schedule_once(self, delay: float, callback: Callable[[], None]): ...

    def cancel(self, handle) -> None: ...

    def spawn(self, coro) -> None: ...


class _Repeating:
    """setInterval on top of loop.call_later."""

    def __init__(self, loop: asyncio.AbstractEventLoop, period: float, callback):
        self.loop = loop
        self.period = period
        self.callback = callback
        self.cancelled = False
        self._timer = loop.call_later(period, self._fire)

    def _fire(self):
        if self.cancelled:
            return
        self._timer = self.loop.call_later(self.period, self._fire)
        self.callback()

    def cancel(self):
        self.cancelled = True
        self._timer.cancel()


class AsyncioScheduler:
    """Runs callbacks on the running event loop."""

    def __init__(self):
        self._tasks: set[asyncio.Task] = set()

    def schedule_repeating(self, period: float, callback) -> _Repeating:
        return _Repeating(asyncio.get_running_loop(), period, callback)

    def schedule_once(self, delay: float, callback) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(delay, callback)

    def cancel(self, handle) -> None:
        if handle is not None:
            handle.cancel()

    def spawn(self, coro) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._reap)

    def _reap(self, task: asyncio.Task):
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", exc_info=task.exception())

    async def drain(self):
        """Wait for spawned tasks, e.g. pending saves at shutdown."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
