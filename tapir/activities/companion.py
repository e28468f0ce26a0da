"""
Coordinator for companion mode.

Companion mode keeps an ambient activity on the host showing one of the
"貘婆婆" signatures, swapped for a new one every thirty minutes. Companion
activities are told apart from reminders by their far-future target time.
"""

import asyncio
from datetime import datetime
from typing import Optional
from tapir.core.clock import TimerHandle
from tapir.core.models import ActivityKind, ActivityState
from .base import CoordinatorState, LiveActivityCoordinator
from .signatures import SignatureSource

class CompanionCoordinator(LiveActivityCoordinator):
    """
    Manages the single companion activity and its signature refresh timer.
    """

    KIND = ActivityKind.COMPANION

    def __init__(self, *args, signatures: Optional[SignatureSource] = None, **kwargs):
        """
        Initialize the coordinator.

        Args:
            signatures: Signature corpus to pick from; defaults to the built-in
                corpus with the configured fallback
            *args, **kwargs: See LiveActivityCoordinator
        """
        super().__init__(*args, **kwargs)
        self.signatures = signatures or SignatureSource(fallback=self.config.fallback_signature)
        self._refresh_timer: Optional[TimerHandle] = None

    @property
    def refresh_armed(self) -> bool:
        """Whether the recurring signature refresh is scheduled."""
        return self._refresh_timer is not None and not self._refresh_timer.cancelled

    def _owns(self, state: ActivityState, now: datetime) -> bool:
        return self._is_companion(state, now)

    def get_random_signature(self) -> str:
        return self.signatures.pick()

    async def start(self) -> None:
        """
        Show the companion activity and start refreshing its signature.

        Any companion activity already on the host is ended first. Failures are
        logged and leave the coordinator idle with no timer armed.
        """
        async with self._lock:
            self.last_error = None
            await self._stop_locked()
            self.state = CoordinatorState.STARTING

            if not await self._activities_enabled():
                self.logger.warning("Live Activities are not available, companion mode not started")
                self.state = CoordinatorState.IDLE
                return

            signature = self.get_random_signature()
            self.logger.info("Starting companion mode", signature=signature)

            handle = await self._request(ActivityState.companion(signature))
            if handle is None:
                self.state = CoordinatorState.IDLE
                return

            self.current_activity = handle
            self.state = CoordinatorState.ACTIVE
            self._refresh_timer = self.clock.call_every(
                self.config.signature_refresh_interval, self.refresh_signature)

    async def refresh_signature(self) -> None:
        """Give every companion activity on the host a freshly picked signature."""
        self.last_error = None
        activities = await self._owned_activities()
        if not activities:
            self.logger.info("No companion activity to refresh")
            return

        self._begin_update()
        try:
            await asyncio.gather(*(
                self._update(handle, ActivityState.companion(self.get_random_signature()))
                for handle, _ in activities
            ))
        finally:
            self._finish_update()

    async def update_now(self) -> None:
        """Refresh the signature immediately instead of waiting for the timer."""
        await self.refresh_signature()

    async def stop(self) -> None:
        """End every companion activity and cancel the refresh timer."""
        async with self._lock:
            self.last_error = None
            await self._stop_locked()

    async def _stop_locked(self) -> None:
        # Cancel first so no refresh starts while activities are being ended
        self._cancel_timer(self._refresh_timer)
        self._refresh_timer = None
        ended = await self._end_owned()
        if ended:
            self.logger.info("Companion activities ended", count=ended)

    async def is_active(self) -> bool:
        """Whether at least one companion activity is visible on the host."""
        self.last_error = None
        activities = await self._owned_activities()
        if activities:
            self.logger.debug("Found active companion activity", activity_id=activities[0][0].id)
        return bool(activities)

    def close(self) -> None:
        self._cancel_timer(self._refresh_timer)
        self._refresh_timer = None
