#!/usr/bin/env python3
"""Tests for the asyncio-backed scheduler."""

import asyncio
import unittest

from snake_arcade.scheduler import AsyncioScheduler


class TestAsyncioScheduler(unittest.IsolatedAsyncioTestCase):

    async def test_repeating_until_cancelled(self):
        scheduler = AsyncioScheduler()
        fired = []
        handle = scheduler.schedule_repeating(0.01, lambda: fired.append(1))
        await asyncio.sleep(0.08)
        scheduler.cancel(handle)
        count = len(fired)
        self.assertGreaterEqual(count, 3)
        await asyncio.sleep(0.05)
        self.assertEqual(len(fired), count)

    async def test_callback_may_cancel_its_own_timer(self):
        scheduler = AsyncioScheduler()
        fired = []
        holder = {}

        def once_then_stop():
            fired.append(1)
            scheduler.cancel(holder["handle"])

        holder["handle"] = scheduler.schedule_repeating(0.01, once_then_stop)
        await asyncio.sleep(0.06)
        self.assertEqual(fired, [1])

    async def test_once_and_cancel(self):
        scheduler = AsyncioScheduler()
        fired = []
        scheduler.schedule_once(0.01, lambda: fired.append("kept"))
        dropped = scheduler.schedule_once(0.01, lambda: fired.append("dropped"))
        scheduler.cancel(dropped)
        scheduler.cancel(None)
        await asyncio.sleep(0.05)
        self.assertEqual(fired, ["kept"])

    async def test_spawn_and_drain(self):
        scheduler = AsyncioScheduler()
        done = []

        async def work():
            await asyncio.sleep(0.01)
            done.append(True)

        scheduler.spawn(work())
        await scheduler.drain()
        self.assertEqual(done, [True])


if __name__ == "__main__":
    unittest.main()
