"""
Core event system for the Tapir Live Activity coordinator.

This module defines the base event model and the event type enum used by the
observability hook. Coordinators publish these events whenever an activity is
started, updated, ended or fails, so the host application can react without
the coordinators ever raising to their callers.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum
import time
import uuid

class EventType(str, Enum):
    """
    Enum defining all event types in the system.

    Using string-based enum to ensure JSON serialization works properly.
    """
    # Application lifecycle events
    APPLICATION_STARTUP_COMPLETED = "application_startup_completed"

    # Live Activity events
    LIVE_ACTIVITY_STARTED = "live_activity_started"
    LIVE_ACTIVITY_UPDATED = "live_activity_updated"
    LIVE_ACTIVITY_ENDED = "live_activity_ended"
    LIVE_ACTIVITY_FAILED = "live_activity_failed"

    # Deep link events
    OPEN_DREAM_RECORDING = "open_dream_recording"

def generate_trace_id() -> str:
    """Generate a unique trace ID for event tracing."""
    return str(uuid.uuid4())

class BaseEvent(BaseModel):
    """
    Base model for all events with common metadata.

    All events in the system should inherit from this class and specify the event type
    and any additional payload fields required for that event.
    """
    # Allow extra attributes and publish enum values rather than enum objects
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    type: EventType
    producer_name: str
    timestamp: float = Field(default_factory=time.time)
    trace_id: Optional[str] = Field(default_factory=generate_trace_id)
