"""
Activity hosts for the Tapir Live Activity coordinator.

A host is the external presentation service that displays activities. The
package provides the abstract interface, its error taxonomy and an in-process
implementation.
"""

from .base import ActivityHost, ActiveActivity
from .errors import (
    HostError, NotAuthorizedError, HostRejectedError, StaleHandleError, UnknownHostError
)
from .memory import InMemoryActivityHost
