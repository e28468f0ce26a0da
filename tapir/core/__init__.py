"""
Core framework for the Tapir Live Activity coordinator.

This package provides the fundamental components shared by the coordinators:
- Event system with typed event definitions
- Event bus and tracing for observability
- Clock and timer abstraction
- Configuration management
"""

from .events import EventType, BaseEvent
from .bus import EventBus
from .tracing import EventTracer
from .clock import Clock, AsyncioClock, TimerHandle
from .config import get_config, ApplicationConfig, LiveActivityConfig, HostConfig

__all__ = [
    'EventType',
    'BaseEvent',
    'EventBus',
    'EventTracer',
    'Clock',
    'AsyncioClock',
    'TimerHandle',
    'get_config',
    'ApplicationConfig',
    'LiveActivityConfig',
    'HostConfig'
]
