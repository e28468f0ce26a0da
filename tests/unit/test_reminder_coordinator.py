"""
Unit tests for the ReminderCoordinator.
"""

import unittest
from datetime import timedelta
from unittest.mock import AsyncMock

from tapir.activities import CoordinatorState, ReminderCoordinator
from tapir.core import EventBus, EventTracer, EventType, LiveActivityConfig
from tapir.core.models import ActivityState, DismissalPolicy
from tapir.host.errors import NotAuthorizedError
from tests.fakes import ManualClock, make_host

class TestReminderCoordinator(unittest.IsolatedAsyncioTestCase):
    """Test cases for the ReminderCoordinator class."""

    def setUp(self):
        """Set up a coordinator over a spied in-memory host."""
        self.clock = ManualClock()
        self.host = make_host(self.clock)
        self.tracer = EventTracer()
        self.config = LiveActivityConfig()
        self.coordinator = ReminderCoordinator(
            self.host, self.clock, self.config, EventBus(self.tracer))
        self.reminder_time = self.clock.now() + timedelta(hours=8)

    async def test_start_requests_reminder_state(self):
        """start shows the reminder time and message and keeps the handle."""
        await self.coordinator.start(self.reminder_time, "记录梦境")

        self.host.request.assert_awaited_once_with(
            ActivityState(target_time=self.reminder_time, message="记录梦境"))
        self.assertIsNotNone(self.coordinator.current_activity)
        self.assertEqual(self.coordinator.state, CoordinatorState.ACTIVE)
        started = self.tracer.get_events_by_type(EventType.LIVE_ACTIVITY_STARTED)
        self.assertEqual(started[0]['event_data']['kind'], "reminder")

    async def test_start_uses_default_message(self):
        """Without a message the configured default is shown."""
        await self.coordinator.start(self.reminder_time)

        state = self.host.request.await_args.args[0]
        self.assertEqual(state.message, self.config.default_reminder_message)

    async def test_initial_state_is_pushed_again_after_delay(self):
        """A deferred update re-sends the initial state one second later."""
        await self.coordinator.start(self.reminder_time, "记录梦境")
        handle = self.coordinator.current_activity
        self.host.update.assert_not_awaited()

        await self.clock.advance(1)

        self.host.update.assert_awaited_once_with(
            handle, ActivityState(target_time=self.reminder_time, message="记录梦境"))

    async def test_initial_refresh_can_be_disabled(self):
        """No deferred update is scheduled when the workaround is turned off."""
        self.coordinator.config = LiveActivityConfig(initial_refresh_enabled=False)

        await self.coordinator.start(self.reminder_time)
        await self.clock.advance(5)

        self.host.update.assert_not_awaited()
        self.assertFalse(self.clock.pending)

    async def test_stop_cancels_deferred_update(self):
        """Stopping before the deferred update fires cancels it."""
        await self.coordinator.start(self.reminder_time)
        await self.coordinator.stop()

        await self.clock.advance(5)

        self.host.update.assert_not_awaited()
        self.assertIsNone(self.coordinator.last_error)

    async def test_restart_ends_previous_activity(self):
        """Repeated starts leave exactly one activity, the previous one ended."""
        await self.coordinator.start(self.reminder_time)
        first = self.coordinator.current_activity

        await self.coordinator.start(self.reminder_time + timedelta(minutes=30))
        second = self.coordinator.current_activity

        self.assertNotEqual(first, second)
        self.host.end.assert_awaited_once_with(first, DismissalPolicy.IMMEDIATE)
        self.assertEqual([h for h, _ in await self.host.list_active()], [second])

    async def test_not_authorized_is_a_soft_failure(self):
        """Disabled activities leave the coordinator idle."""
        self.host.enabled = False

        await self.coordinator.start(self.reminder_time)

        self.host.request.assert_not_awaited()
        self.assertIsNone(self.coordinator.current_activity)
        self.assertEqual(self.coordinator.state, CoordinatorState.IDLE)
        self.assertFalse(self.clock.pending)

    async def test_request_failure_is_recorded(self):
        """A request refused by the host is absorbed and published."""
        self.host.request = AsyncMock(side_effect=NotAuthorizedError("denied", "request"))

        await self.coordinator.start(self.reminder_time)

        self.assertIsNone(self.coordinator.current_activity)
        self.assertIsInstance(self.coordinator.last_error, NotAuthorizedError)
        failures = self.tracer.get_events_by_type(EventType.LIVE_ACTIVITY_FAILED)
        self.assertEqual(failures[0]['event_data']['error_type'], "NotAuthorized")

    async def test_reminder_beyond_horizon_is_refused(self):
        """A reminder time that would read as a companion activity is not shown."""
        await self.coordinator.start(self.clock.now() + timedelta(days=400))

        self.host.request.assert_not_awaited()
        self.assertEqual(self.coordinator.state, CoordinatorState.IDLE)

    async def test_update_touches_every_listed_activity(self):
        """update is not filtered by the companion horizon."""
        now = self.clock.now()
        await self.host.seed(ActivityState(target_time=now + timedelta(hours=1)))
        await self.host.seed(ActivityState.companion("companion"))
        await self.host.seed(ActivityState.companion("companion"))

        await self.coordinator.update("正在记录梦境...")

        self.assertEqual(self.host.update.await_count, 3)
        for call in self.host.update.await_args_list:
            self.assertEqual(call.args[1], ActivityState(target_time=now, message="正在记录梦境..."))

    async def test_update_without_activity_is_noop(self):
        """Nothing is pushed when the host lists no activity."""
        await self.coordinator.update("正在记录梦境...")
        self.host.update.assert_not_awaited()

    async def test_stop_ends_activities_of_previous_process(self):
        """stop scans the host, so activities it did not create are ended too."""
        leftover = await self.host.seed(ActivityState(target_time=self.reminder_time))

        await self.coordinator.stop()

        self.host.end.assert_awaited_once_with(leftover, DismissalPolicy.IMMEDIATE)
        self.assertEqual(await self.host.list_active(), [])

    async def test_stop_is_idempotent(self):
        """Stopping twice leaves the same empty state and does not raise."""
        await self.coordinator.start(self.reminder_time)

        await self.coordinator.stop()
        await self.coordinator.stop()

        self.assertIsNone(self.coordinator.current_activity)
        self.assertEqual(self.host.end.await_count, 1)
        self.assertEqual(self.coordinator.state, CoordinatorState.IDLE)

    async def test_end_failure_does_not_block_stop(self):
        """A failing end is logged and the remaining activities are still ended."""
        first = await self.host.seed(ActivityState(target_time=self.reminder_time))
        second = await self.host.seed(ActivityState(target_time=self.reminder_time))
        await self.host.expire(first)
        listed = [(first, ActivityState(target_time=self.reminder_time)),
                  (second, ActivityState(target_time=self.reminder_time))]
        self.host.list_active = AsyncMock(return_value=listed)

        await self.coordinator.stop()

        self.assertEqual(self.host.end.await_count, 2)
        self.assertEqual(self.coordinator.last_error.kind, "StaleHandle")
        ended = self.tracer.get_events_by_type(EventType.LIVE_ACTIVITY_ENDED)
        self.assertEqual([e['event_data']['activity_id'] for e in ended], [second.id])

    async def test_start_clears_error_from_failed_start(self):
        """A failed start leaves an error that the next operation replaces."""
        self.host.request.side_effect = RuntimeError("bridge down")
        await self.coordinator.start(self.reminder_time)
        self.assertEqual(self.coordinator.last_error.kind, "UnknownHost")

        self.host.request.side_effect = None
        await self.coordinator.start(self.reminder_time)

        self.assertIsNotNone(self.coordinator.current_activity)
        self.assertIsNone(self.coordinator.last_error)

if __name__ == "__main__":
    unittest.main()
