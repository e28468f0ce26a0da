"""
Coordinator for the scheduled dream-recording reminder.

The reminder activity shows the time the user wanted to be reminded at and a
short message. Starting a reminder always replaces any activity already shown
on the host.
"""

import asyncio
from datetime import datetime
from typing import Optional
from tapir.core.clock import TimerHandle
from tapir.core.models import ActivityHandle, ActivityKind, ActivityState, companion_horizon
from .base import CoordinatorState, LiveActivityCoordinator

class ReminderCoordinator(LiveActivityCoordinator):
    """
    Manages the single reminder activity.

    ``update`` and ``stop`` act on every activity the host lists, not only the
    one this coordinator started: after a process restart the in-memory handle
    is gone but the activity may still be visible.
    """

    KIND = ActivityKind.REMINDER

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._initial_refresh: Optional[TimerHandle] = None

    def _owns(self, state: ActivityState, now: datetime) -> bool:
        # Reminders share the host's activity type with companions and are
        # not told apart here
        return True

    async def start(self, reminder_time: datetime, message: Optional[str] = None) -> None:
        """
        Show a reminder for ``reminder_time``.

        Any existing activity is ended first. Failures (activities disabled,
        host refusal) are logged and leave the coordinator idle.

        Args:
            reminder_time: When the user should record their dream
            message: Text to show, defaults to the configured reminder message
        """
        message = message or self.config.default_reminder_message

        async with self._lock:
            self.last_error = None
            await self._stop_locked()
            self.state = CoordinatorState.STARTING

            state = ActivityState(target_time=reminder_time, message=message)
            now = self.clock.now()
            if self._is_companion(state, now):
                self.logger.error("Reminder time beyond companion horizon, not starting",
                                  reminder_time=state.target_time.isoformat(),
                                  horizon=companion_horizon(
                                      now, self.config.companion_horizon_days).isoformat())
                self.state = CoordinatorState.IDLE
                return

            if not await self._activities_enabled():
                self.logger.warning("Live Activities are not available, reminder not shown")
                self.state = CoordinatorState.IDLE
                return

            handle = await self._request(state)
            if handle is None:
                self.state = CoordinatorState.IDLE
                return

            self.current_activity = handle
            self.state = CoordinatorState.ACTIVE

            # Re-push the initial state once the host has rendered the activity
            if self.config.initial_refresh_enabled:
                self._initial_refresh = self.clock.call_later(
                    self.config.initial_refresh_delay,
                    lambda: self._refresh_initial_state(handle, state))

    async def _refresh_initial_state(self, handle: ActivityHandle, state: ActivityState) -> None:
        self._initial_refresh = None
        if await self._update(handle, state):
            self.logger.debug("Initial reminder state refreshed", activity_id=handle.id)

    async def update(self, message: str) -> None:
        """
        Replace the message of every listed activity, stamping it with now.

        Args:
            message: New text to show
        """
        self.last_error = None
        activities = await self._owned_activities()
        if not activities:
            self.logger.info("No reminder activity to update")
            return

        self._begin_update()
        state = ActivityState(target_time=self.clock.now(), message=message)
        try:
            await asyncio.gather(*(self._update(handle, state) for handle, _ in activities))
        finally:
            self._finish_update()

    async def stop(self) -> None:
        """End every listed activity immediately. Safe to call when none exist."""
        async with self._lock:
            self.last_error = None
            await self._stop_locked()

    async def _stop_locked(self) -> None:
        self._cancel_timer(self._initial_refresh)
        self._initial_refresh = None
        ended = await self._end_owned()
        if ended:
            self.logger.info("Reminder activities ended", count=ended)

    def close(self) -> None:
        self._cancel_timer(self._initial_refresh)
        self._initial_refresh = None
