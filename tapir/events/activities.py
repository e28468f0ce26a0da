"""
Live Activity events for the Tapir coordinator.

This module defines the events published by the reminder and companion
coordinators as activities move through their lifecycle.
"""

from typing import Literal, Optional
from tapir.core.events import BaseEvent, EventType

class LiveActivityStartedEvent(BaseEvent):
    """
    Event published when the host accepted a new activity.
    """
    type: Literal[EventType.LIVE_ACTIVITY_STARTED] = EventType.LIVE_ACTIVITY_STARTED
    kind: str  # 'reminder' or 'companion'
    activity_id: str
    message: str
    target_time: float  # seconds since the epoch

class LiveActivityUpdatedEvent(BaseEvent):
    """
    Event published when new content was pushed to an activity.

    Covers reminder updates, the deferred initial refresh and companion
    signature refreshes.
    """
    type: Literal[EventType.LIVE_ACTIVITY_UPDATED] = EventType.LIVE_ACTIVITY_UPDATED
    kind: str
    activity_id: str
    message: str

class LiveActivityEndedEvent(BaseEvent):
    """
    Event published when an activity was ended by a coordinator.
    """
    type: Literal[EventType.LIVE_ACTIVITY_ENDED] = EventType.LIVE_ACTIVITY_ENDED
    kind: str
    activity_id: str
    dismissal: str  # 'IMMEDIATE' or 'AFTER_DELAY'

class LiveActivityFailedEvent(BaseEvent):
    """
    Event published when a host operation failed.

    Coordinators never raise host failures to their callers; this event is
    the channel through which such failures can be observed.
    """
    type: Literal[EventType.LIVE_ACTIVITY_FAILED] = EventType.LIVE_ACTIVITY_FAILED
    kind: str
    operation: str  # 'request', 'update', 'end', 'list_active', 'authorization'
    error_type: str  # 'NotAuthorized', 'HostRejected', 'StaleHandle', 'UnknownHost'
    error_message: str
    activity_id: Optional[str] = None
