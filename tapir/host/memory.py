"""
In-process activity host.

Keeps activities in memory in the order they were requested and enforces the
same constraints as a real presentation surface: an authorization switch, a
bounded number of concurrent activities and stale handles after an activity
ends or expires. Used for development, demos and tests.
"""

import asyncio
import uuid
from typing import Dict, List, Optional
from tapir.core.clock import AsyncioClock, Clock, TimerHandle
from tapir.core.config import HostConfig
from tapir.core.models import ActivityHandle, ActivityState, DismissalPolicy
from .base import ActiveActivity, ActivityHost
from .errors import HostRejectedError, NotAuthorizedError, StaleHandleError

class InMemoryActivityHost(ActivityHost):
    """ActivityHost keeping its activities in a dict."""

    def __init__(self, config: Optional[HostConfig] = None, clock: Optional[Clock] = None,
                 enabled: bool = True, name: Optional[str] = None):
        """
        Initialize the host.

        Args:
            config: Capacity and dismissal settings
            clock: Clock used to schedule delayed dismissals
            enabled: Initial state of the authorization switch
            name: Optional name for this host instance
        """
        super().__init__(config or HostConfig(), name)
        self.clock = clock or AsyncioClock()
        self.enabled = enabled
        self._activities: Dict[str, ActiveActivity] = {}
        self._dismissing: Dict[str, TimerHandle] = {}
        self._lock = asyncio.Lock()

    @property
    def max_activities(self) -> int:
        return self.config.max_activities

    async def are_activities_enabled(self) -> bool:
        return self.enabled

    async def request(self, initial_state: ActivityState) -> ActivityHandle:
        async with self._lock:
            if not self.enabled:
                raise NotAuthorizedError("Live Activities are disabled", "request")

            # Activities waiting for a delayed dismissal still take a slot
            if len(self._activities) >= self.max_activities:
                raise HostRejectedError(
                    f"Too many activities ({len(self._activities)}/{self.max_activities})",
                    "request")

            handle = ActivityHandle(id=str(uuid.uuid4()))
            self._activities[handle.id] = (handle, initial_state)
            self.logger.debug("Activity requested", activity_id=handle.id,
                              message=initial_state.message)
            return handle

    async def update(self, handle: ActivityHandle, new_state: ActivityState) -> None:
        async with self._lock:
            self._require(handle, "update")
            self._activities[handle.id] = (handle, new_state)
            self.logger.debug("Activity updated", activity_id=handle.id,
                              message=new_state.message)

    async def end(self, handle: ActivityHandle,
                  dismissal: DismissalPolicy = DismissalPolicy.IMMEDIATE) -> None:
        async with self._lock:
            self._require(handle, "end")

            if dismissal is DismissalPolicy.IMMEDIATE:
                self._remove(handle.id)
            elif handle.id not in self._dismissing:
                self._dismissing[handle.id] = self.clock.call_later(
                    self.config.dismissal_delay, lambda: self._dismiss(handle.id))
            self.logger.debug("Activity ended", activity_id=handle.id,
                              dismissal=dismissal.name)

    async def list_active(self) -> List[ActiveActivity]:
        async with self._lock:
            return list(self._activities.values())

    async def expire(self, handle: ActivityHandle) -> None:
        """Drop an activity the way the OS does when it times out."""
        async with self._lock:
            self._remove(handle.id)

    async def seed(self, state: ActivityState) -> ActivityHandle:
        """Add an activity as if it had been left over by an earlier process."""
        async with self._lock:
            handle = ActivityHandle(id=str(uuid.uuid4()))
            self._activities[handle.id] = (handle, state)
            return handle

    def _require(self, handle: ActivityHandle, operation: str) -> None:
        if handle.id not in self._activities:
            raise StaleHandleError(f"Activity {handle.id} no longer exists",
                                   operation, handle.id)

    def _remove(self, activity_id: str) -> None:
        self._activities.pop(activity_id, None)
        pending = self._dismissing.pop(activity_id, None)
        if pending is not None:
            pending.cancel()

    async def _dismiss(self, activity_id: str) -> None:
        async with self._lock:
            self._dismissing.pop(activity_id, None)
            self._activities.pop(activity_id, None)
