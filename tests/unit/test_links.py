"""
Unit tests for the DeepLinkRouter.
"""

import unittest
from datetime import timedelta
from unittest.mock import AsyncMock

from tapir.activities import CompanionCoordinator, ReminderCoordinator
from tapir.core import EventBus, EventType, LiveActivityConfig
from tapir.core.models import ActivityState
from tapir.links import DeepLinkRouter
from tests.fakes import ManualClock, make_host

class TestDeepLinkRouter(unittest.IsolatedAsyncioTestCase):
    """Test cases for the DeepLinkRouter class."""

    def setUp(self):
        self.clock = ManualClock()
        self.host = make_host(self.clock)
        self.bus = EventBus()
        self.opened = AsyncMock()
        self.bus.subscribe(EventType.OPEN_DREAM_RECORDING, self.opened)

        config = LiveActivityConfig()
        self.reminder = ReminderCoordinator(self.host, self.clock, config, self.bus)
        self.companion = CompanionCoordinator(self.host, self.clock, config, self.bus)
        self.router = DeepLinkRouter(self.reminder, self.companion, self.bus)

    async def test_dream_reminder_link_marks_recording(self):
        """Opening the reminder link updates the activity and opens the recorder."""
        await self.reminder.start(self.clock.now() + timedelta(hours=8))

        handled = await self.router.handle_url("tapirtwins://dreamreminder")

        self.assertTrue(handled)
        self.opened.assert_awaited_once()
        event = self.opened.await_args.args[0]
        self.assertEqual(event.source, "deep_link")
        _, state = (await self.host.list_active())[0]
        self.assertEqual(state.message, "正在记录梦境...")

    async def test_dream_reminder_link_without_activity(self):
        """The recorder still opens when no activity is shown."""
        self.assertTrue(await self.router.handle_url("tapirtwins://dreamreminder"))
        self.opened.assert_awaited_once()
        self.host.update.assert_not_awaited()

    async def test_refresh_signature_link(self):
        await self.host.seed(ActivityState.companion("old"))

        self.assertTrue(await self.router.handle_url("tapirtwins://refreshsignature"))

        self.host.update.assert_awaited_once()
        self.opened.assert_not_awaited()

    async def test_foreign_scheme_is_ignored(self):
        self.assertFalse(await self.router.handle_url("https://dreamreminder"))
        self.opened.assert_not_awaited()

    async def test_unknown_target_is_ignored(self):
        self.assertFalse(await self.router.handle_url("tapirtwins://somewhere"))
        self.host.list_active.assert_not_awaited()

    async def test_reminder_notification(self):
        self.assertTrue(await self.router.handle_notification("dreamReminder"))
        self.assertEqual(self.opened.await_args.args[0].source, "notification")

    async def test_other_notification(self):
        self.assertFalse(await self.router.handle_notification("taskReminder"))
        self.opened.assert_not_awaited()

if __name__ == "__main__":
    unittest.main()
