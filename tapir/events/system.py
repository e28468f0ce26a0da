"""
Application-level events for the Tapir coordinator.
"""

from typing import Literal, Optional
from tapir.core.events import BaseEvent, EventType

class ApplicationStartupCompletedEvent(BaseEvent):
    """
    Event published when the application finished wiring its coordinators.
    """
    type: Literal[EventType.APPLICATION_STARTUP_COMPLETED] = EventType.APPLICATION_STARTUP_COMPLETED

class OpenDreamRecordingEvent(BaseEvent):
    """
    Event published when the user asked to record a dream.

    Emitted for the reminder deep link and for taps on the reminder
    notification; the UI layer opens its recording screen in response.
    """
    type: Literal[EventType.OPEN_DREAM_RECORDING] = EventType.OPEN_DREAM_RECORDING
    source: str  # 'deep_link' or 'notification'
    url: Optional[str] = None
