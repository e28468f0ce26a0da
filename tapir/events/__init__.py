"""
Event definitions for the Tapir Live Activity coordinator.

This package contains all event types used in the system, organized by functional area.
"""

# Re-export core types
from tapir.core.events import EventType, BaseEvent
