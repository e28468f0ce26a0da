"""
Event bus for the Tapir Live Activity coordinator.

This module delivers lifecycle events from the coordinators to whoever in the
host application subscribed to them. Delivery errors are logged and never
propagate back to the publisher.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Callable, Awaitable, Set
from .events import EventType, BaseEvent
from .tracing import EventTracer

# Type aliases
EventHandler = Callable[[BaseEvent], Awaitable[None]]

class EventBus:
    """
    In-process bus for delivering typed events to subscribers.

    The event bus is responsible for:
    - Routing events to subscribers of their type (and wildcard subscribers)
    - Isolating publishers from errors raised by handlers
    - Providing observability through an optional tracer
    """

    def __init__(self, tracer: Optional[EventTracer] = None):
        """
        Initialize the event bus.

        Args:
            tracer: Optional event tracer for observability
        """
        self.tracer = tracer
        self.subscribers: Dict[str, List[EventHandler]] = {}
        self.wildcard_subscribers: List[EventHandler] = []
        self.logger = logging.getLogger(__name__)

    async def publish(self, event: BaseEvent, sender: str) -> None:
        """
        Publish an event to all subscribers.

        Args:
            event: The event to publish
            sender: Name of the component publishing the event
        """
        if not event.producer_name:
            event.producer_name = sender

        if self.tracer:
            self.tracer.record_event(event)

        # Events store the enum value, subscriptions are keyed the same way
        specific_subscribers = self.subscribers.get(_key(event.type), [])
        all_subscribers = specific_subscribers + self.wildcard_subscribers

        if not all_subscribers:
            self.logger.debug(f"No subscribers for event type: {event.type}")
            return

        tasks = [asyncio.create_task(self._deliver_event(subscriber, event))
                 for subscriber in all_subscribers]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                self.logger.error(f"Error in event handler: {result}", exc_info=result)

    async def _deliver_event(self, handler: EventHandler, event: BaseEvent) -> None:
        """
        Deliver an event to a single handler with error handling.

        Args:
            handler: The event handler function
            event: The event to deliver
        """
        try:
            await handler(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Error delivering event {event.type} to {_name(handler)}: {e}")

    def subscribe(self, event_type: Optional[EventType], handler: EventHandler) -> None:
        """
        Subscribe a handler to events of a specific type, or all events if None.

        Args:
            event_type: The event type to subscribe to, or None for all events
            handler: The handler function to call when events arrive
        """
        if event_type is None:
            self.wildcard_subscribers.append(handler)
            self.logger.debug(f"Handler {_name(handler)} subscribed to all events")
        else:
            self.subscribers.setdefault(_key(event_type), []).append(handler)
            self.logger.debug(f"Handler {_name(handler)} subscribed to {event_type}")

    def unsubscribe(self, event_type: Optional[EventType], handler: EventHandler) -> None:
        """
        Unsubscribe a handler from events of a specific type, or all events if None.

        Args:
            event_type: The event type to unsubscribe from, or None for all events
            handler: The handler function to unsubscribe
        """
        if event_type is None:
            if handler in self.wildcard_subscribers:
                self.wildcard_subscribers.remove(handler)
            return

        key = _key(event_type)
        if handler in self.subscribers.get(key, []):
            self.subscribers[key].remove(handler)
            if not self.subscribers[key]:
                del self.subscribers[key]
            self.logger.debug(f"Handler {_name(handler)} unsubscribed from {event_type}")

    def get_subscribers(self, event_type: EventType) -> Set[EventHandler]:
        """Get all subscribers for an event type, wildcards included."""
        specific = set(self.subscribers.get(_key(event_type), []))
        return specific.union(self.wildcard_subscribers)

def _key(event_type) -> str:
    return event_type.value if isinstance(event_type, EventType) else str(event_type)

def _name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))
