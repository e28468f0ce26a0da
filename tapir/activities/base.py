"""
Base coordinator for Live Activities.

This module provides the LiveActivityCoordinator class shared by the reminder
and companion coordinators. It owns the single-slot handle, the lifecycle
state machine, the lock serialising start/stop, and the wrappers that turn
every host failure into a logged no-op.
"""

import asyncio
import structlog
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum, auto
from typing import Any, ClassVar, List, Optional
from tapir.core.bus import EventBus
from tapir.core.clock import Clock, TimerHandle
from tapir.core.config import LiveActivityConfig
from tapir.core.events import BaseEvent
from tapir.core.models import (
    ActivityHandle, ActivityKind, ActivityState, DismissalPolicy, is_companion_state
)
from tapir.events.activities import (
    LiveActivityEndedEvent, LiveActivityFailedEvent, LiveActivityStartedEvent,
    LiveActivityUpdatedEvent
)
from tapir.host.base import ActiveActivity, ActivityHost
from tapir.host.errors import HostError, UnknownHostError

class CoordinatorState(Enum):
    """Lifecycle states of a coordinator."""
    IDLE = auto()      # No activity owned
    STARTING = auto()  # Authorization check and request in flight
    ACTIVE = auto()    # Host accepted the activity
    UPDATING = auto()  # New content being pushed
    STOPPING = auto()  # Matching activities being ended

class LiveActivityCoordinator(ABC):
    """
    Base class for coordinators of one kind of Live Activity.

    Public operations never raise host failures. Each failure is logged,
    stored in ``last_error`` and published as a LiveActivityFailedEvent.
    ``last_error`` is cleared when a public operation begins, so it describes
    the most recent operation only.

    Subclasses define which activities on the host belong to them through
    :meth:`_owns`, since the host may list activities this process did not
    create.
    """

    KIND: ClassVar[ActivityKind]

    def __init__(self,
                 host: ActivityHost,
                 clock: Clock,
                 config: Optional[LiveActivityConfig] = None,
                 event_bus: Optional[EventBus] = None,
                 name: Optional[str] = None,
                 logger: Optional[Any] = None):
        """
        Initialize the coordinator.

        Args:
            host: The presentation service showing the activities
            clock: Source of "now" and of timers
            config: Optional coordinator configuration
            event_bus: Optional bus receiving lifecycle events
            name: Optional coordinator name (defaults to class name)
            logger: Optional structlog logger to use instead of the default
        """
        self.host = host
        self.clock = clock
        self.config = config or LiveActivityConfig()
        self.event_bus = event_bus
        self.name = name or self.__class__.__name__
        self.logger = logger or structlog.get_logger(coordinator=self.name)

        self.current_activity: Optional[ActivityHandle] = None
        self.state = CoordinatorState.IDLE
        self.last_error: Optional[HostError] = None
        self._lock = asyncio.Lock()

    @property
    def kind(self) -> str:
        return self.KIND.value

    def _is_companion(self, state: ActivityState, now: Optional[datetime] = None) -> bool:
        return is_companion_state(state, now or self.clock.now(),
                                  self.config.companion_horizon_days)

    @abstractmethod
    def _owns(self, state: ActivityState, now: datetime) -> bool:
        """Whether an activity with this state is handled by this coordinator."""

    async def _owned_activities(self) -> List[ActiveActivity]:
        now = self.clock.now()
        return [(handle, state) for handle, state in await self._list_active()
                if self._owns(state, now)]

    async def _activities_enabled(self) -> bool:
        try:
            return await self.host.are_activities_enabled()
        except Exception as e:
            await self._record_failure(e, "authorization")
            return False

    async def _request(self, state: ActivityState) -> Optional[ActivityHandle]:
        try:
            handle = await self.host.request(state)
        except Exception as e:
            await self._record_failure(e, "request")
            return None

        self.logger.info("Live Activity started", activity_id=handle.id, message=state.message)
        await self._publish(LiveActivityStartedEvent(
            producer_name=self.name,
            kind=self.kind,
            activity_id=handle.id,
            message=state.message,
            target_time=state.target_timestamp
        ))
        return handle

    async def _update(self, handle: ActivityHandle, state: ActivityState) -> bool:
        try:
            await self.host.update(handle, state)
        except Exception as e:
            await self._record_failure(e, "update", handle)
            return False

        self.logger.info("Live Activity updated", activity_id=handle.id, message=state.message)
        await self._publish(LiveActivityUpdatedEvent(
            producer_name=self.name,
            kind=self.kind,
            activity_id=handle.id,
            message=state.message
        ))
        return True

    async def _end(self, handle: ActivityHandle,
                   dismissal: DismissalPolicy = DismissalPolicy.IMMEDIATE) -> bool:
        try:
            await self.host.end(handle, dismissal)
        except Exception as e:
            await self._record_failure(e, "end", handle)
            return False

        self.logger.info("Live Activity ended", activity_id=handle.id, dismissal=dismissal.name)
        await self._publish(LiveActivityEndedEvent(
            producer_name=self.name,
            kind=self.kind,
            activity_id=handle.id,
            dismissal=dismissal.name
        ))
        return True

    async def _list_active(self) -> List[ActiveActivity]:
        try:
            return list(await self.host.list_active())
        except Exception as e:
            await self._record_failure(e, "list_active")
            return []

    async def _end_owned(self) -> int:
        """End every activity this coordinator owns. Returns how many ended."""
        self.state = CoordinatorState.STOPPING
        owned = await self._owned_activities()
        self.logger.debug("Ending Live Activities", count=len(owned))

        results = await asyncio.gather(*(self._end(handle) for handle, _ in owned))

        self.current_activity = None
        self.state = CoordinatorState.IDLE
        return sum(1 for ended in results if ended)

    def _begin_update(self) -> None:
        if self.state is CoordinatorState.ACTIVE:
            self.state = CoordinatorState.UPDATING

    def _finish_update(self) -> None:
        if self.state is CoordinatorState.UPDATING:
            self.state = CoordinatorState.ACTIVE

    async def _record_failure(self, error: Exception, operation: str,
                              handle: Optional[ActivityHandle] = None) -> None:
        handle_id = handle.id if handle else None
        if not isinstance(error, HostError):
            error = UnknownHostError.wrap(error, operation, handle_id)
        error.operation = error.operation or operation
        error.handle_id = error.handle_id or handle_id
        self.last_error = error

        self.logger.warning("Live Activity operation failed",
                            operation=operation,
                            activity_id=handle_id,
                            error_type=error.kind,
                            error=str(error))
        await self._publish(LiveActivityFailedEvent(
            producer_name=self.name,
            kind=self.kind,
            operation=operation,
            error_type=error.kind,
            error_message=str(error),
            activity_id=handle_id
        ))

    async def _publish(self, event: BaseEvent) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event, self.name)

    @staticmethod
    def _cancel_timer(timer: Optional[TimerHandle]) -> None:
        if timer is not None:
            timer.cancel()

    @abstractmethod
    async def stop(self) -> None:
        """End every activity of this coordinator's kind. Idempotent."""

    @abstractmethod
    def close(self) -> None:
        """Cancel pending timers without ending any activity."""
