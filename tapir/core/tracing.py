"""
Event tracing for the Tapir Live Activity coordinator.

This module keeps a bounded buffer of recently published events so that the
lifecycle of every activity (started, refreshed, ended, failed) can be
inspected after the fact.
"""

import time
import logging
from typing import Dict, List, Optional, Any, Deque
from collections import deque
from .events import BaseEvent

class EventTracer:
    """
    Records events as they are published.

    The tracer maintains a buffer of recent events and can filter them by
    trace id, type or activity handle, and summarise them.
    """

    def __init__(self, max_events: int = 1000):
        """
        Initialize the event tracer.

        Args:
            max_events: Maximum number of events to keep in the buffer
        """
        self.max_events = max_events
        self.events: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self.logger = logging.getLogger(__name__)

    def record_event(self, event: BaseEvent) -> None:
        """
        Record an event in the trace buffer.

        Args:
            event: The event to record
        """
        trace_data = {
            'timestamp': time.time(),
            'trace_id': event.trace_id,
            'type': event.type,
            'producer': event.producer_name,
            'event_data': event.model_dump(exclude={'trace_id', 'type', 'producer_name'})
        }

        self.events.append(trace_data)
        self.logger.debug(f"Recorded event {event.type} from {event.producer_name}")

    def get_trace(self, trace_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Get all events for a specific trace ID.

        Args:
            trace_id: The trace ID to filter by, or None for all events

        Returns:
            List of events matching the trace ID
        """
        if trace_id is None:
            return list(self.events)
        return [e for e in self.events if e['trace_id'] == trace_id]

    def get_events_by_type(self, event_type: str) -> List[Dict[str, Any]]:
        """
        Get all events of a specific type.

        Args:
            event_type: The event type to filter by

        Returns:
            List of events matching the type
        """
        return [e for e in self.events if e['type'] == event_type]

    def get_events_for_activity(self, activity_id: str) -> List[Dict[str, Any]]:
        """
        Get the recorded history of a single activity handle.

        Args:
            activity_id: The host-assigned activity id

        Returns:
            Events whose payload refers to that activity, oldest first
        """
        return [e for e in self.events
                if e['event_data'].get('activity_id') == activity_id]

    def get_event_count(self) -> int:
        """Get the total number of events recorded."""
        return len(self.events)

    def get_event_stats(self) -> Dict[str, Any]:
        """
        Get statistics about recorded events.

        Returns:
            Dictionary with event counts by type and by producer
        """
        event_types: Dict[str, int] = {}
        producers: Dict[str, int] = {}

        for event in self.events:
            event_types[event['type']] = event_types.get(event['type'], 0) + 1
            producers[event['producer']] = producers.get(event['producer'], 0) + 1

        return {
            'total_events': len(self.events),
            'event_types': event_types,
            'producers': producers,
            'last_event_at': self.events[-1]['timestamp'] if self.events else None
        }
