"""Test doubles: a virtual-clock scheduler and stores that fail."""

import asyncio

from snake_arcade.errors import PersistenceReadError, PersistenceWriteError


class Timer:
    def __init__(self, due, seq, callback, period=None):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.period = period
        self.cancelled = False


class ManualScheduler:
    """Scheduler port driven by advance() instead of a real clock."""

    def __init__(self):
        self.now = 0.0
        self.timers = []
        self._seq = 0

    def _add(self, delay, callback, period=None):
        self._seq += 1
        timer = Timer(self.now + delay, self._seq, callback, period)
        self.timers.append(timer)
        return timer

    def schedule_once(self, delay, callback):
        return self._add(delay, callback)

    def schedule_repeating(self, period, callback):
        return self._add(period, callback, period)

    def cancel(self, handle):
        if handle is not None:
            handle.cancelled = True

    def spawn(self, coro):
        asyncio.run(coro)

    def live(self):
        return [t for t in self.timers if not t.cancelled]

    def repeating(self):
        return [t for t in self.live() if t.period is not None]

    def pending_once(self):
        return [t for t in self.live() if t.period is None]

    def advance(self, seconds):
        target = self.now + seconds
        while True:
            due = [t for t in self.live() if t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self.now = timer.due
            if timer.period is None:
                timer.cancelled = True
            else:
                timer.due += timer.period
            timer.callback()
        self.now = target
        self.timers = self.live()


class FailingStore:
    def __init__(self):
        self.writes = 0

    async def get(self, key):
        raise PersistenceReadError(f"cannot read {key}")

    async def set(self, key, value):
        self.writes += 1
        raise PersistenceWriteError(f"cannot write {key}")


class BrokenStore:
    """A backend whose reads fail with something other than a persistence error."""

    async def get(self, key):
        raise RuntimeError(f"backend exploded reading {key}")

    async def set(self, key, value):
        pass
