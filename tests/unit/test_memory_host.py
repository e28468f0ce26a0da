"""
Unit tests for the InMemoryActivityHost.
"""

import unittest
from datetime import timedelta

from tapir.core.config import HostConfig
from tapir.core.models import ActivityHandle, ActivityState, DismissalPolicy
from tapir.host import (
    HostRejectedError, InMemoryActivityHost, NotAuthorizedError, StaleHandleError
)
from tests.fakes import ManualClock

class TestInMemoryActivityHost(unittest.IsolatedAsyncioTestCase):
    """Test cases for the InMemoryActivityHost class."""

    def setUp(self):
        self.clock = ManualClock()
        self.host = InMemoryActivityHost(HostConfig(max_activities=2, dismissal_delay=60),
                                         self.clock)
        self.state = ActivityState(target_time=self.clock.now() + timedelta(hours=8))

    async def test_request_lists_activity(self):
        handle = await self.host.request(self.state)
        self.assertEqual(await self.host.list_active(), [(handle, self.state)])

    async def test_handles_are_unique(self):
        a = await self.host.request(self.state)
        b = await self.host.request(self.state)
        self.assertNotEqual(a.id, b.id)

    async def test_disabled_host_refuses(self):
        self.host.enabled = False
        self.assertFalse(await self.host.are_activities_enabled())
        with self.assertRaises(NotAuthorizedError):
            await self.host.request(self.state)

    async def test_capacity_is_enforced(self):
        await self.host.request(self.state)
        await self.host.request(self.state)
        with self.assertRaises(HostRejectedError) as ctx:
            await self.host.request(self.state)
        self.assertEqual(ctx.exception.operation, "request")

    async def test_update_replaces_state(self):
        handle = await self.host.request(self.state)
        new_state = ActivityState.companion("签名")
        await self.host.update(handle, new_state)
        self.assertEqual(await self.host.list_active(), [(handle, new_state)])

    async def test_unknown_handle_is_stale(self):
        ghost = ActivityHandle(id="ghost")
        with self.assertRaises(StaleHandleError) as ctx:
            await self.host.update(ghost, self.state)
        self.assertEqual(ctx.exception.handle_id, "ghost")
        with self.assertRaises(StaleHandleError):
            await self.host.end(ghost)

    async def test_immediate_end_removes_activity(self):
        handle = await self.host.request(self.state)
        await self.host.end(handle, DismissalPolicy.IMMEDIATE)
        self.assertEqual(await self.host.list_active(), [])
        with self.assertRaises(StaleHandleError):
            await self.host.end(handle)

    async def test_delayed_dismissal(self):
        """An activity ended after a delay stays listed until the delay elapses."""
        handle = await self.host.request(self.state)
        await self.host.end(handle, DismissalPolicy.AFTER_DELAY)

        await self.clock.advance(59)
        self.assertEqual(len(await self.host.list_active()), 1)

        await self.clock.advance(1)
        self.assertEqual(await self.host.list_active(), [])

    async def test_immediate_end_cancels_pending_dismissal(self):
        handle = await self.host.request(self.state)
        await self.host.end(handle, DismissalPolicy.AFTER_DELAY)
        await self.host.end(handle, DismissalPolicy.IMMEDIATE)
        self.assertFalse(self.clock.pending)

    async def test_expire_and_seed(self):
        leftover = await self.host.seed(self.state)
        self.assertEqual(len(await self.host.list_active()), 1)
        await self.host.expire(leftover)
        self.assertEqual(await self.host.list_active(), [])

if __name__ == "__main__":
    unittest.main()
