"""
Base activity host for the Tapir Live Activity coordinator.

An ActivityHost is the external, capacity-limited presentation service that
actually shows activities (the lock screen / Dynamic Island on a phone). The
coordinators only ever talk to it through this interface.
"""

import structlog
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple
from tapir.core.models import ActivityHandle, ActivityState, DismissalPolicy

ActiveActivity = Tuple[ActivityHandle, ActivityState]

class ActivityHost(ABC):
    """
    Base class for all activity hosts.

    Every operation is a coroutine and may suspend. Failures are reported by
    raising a subclass of :class:`tapir.host.errors.HostError`.
    """

    def __init__(self, config: Optional[Any] = None, name: Optional[str] = None):
        """
        Initialize the host.

        Args:
            config: Optional host-specific configuration
            name: Optional name for this host instance
        """
        self.config = config
        self.name = name or self.__class__.__name__
        self.logger = structlog.get_logger(host=self.name)

    @abstractmethod
    async def are_activities_enabled(self) -> bool:
        """Whether the platform and the user currently allow activities."""

    @abstractmethod
    async def request(self, initial_state: ActivityState) -> ActivityHandle:
        """
        Ask the host to show a new activity.

        Raises:
            NotAuthorizedError: activities are disabled
            HostRejectedError: the host refused for any other reason
        """

    @abstractmethod
    async def update(self, handle: ActivityHandle, new_state: ActivityState) -> None:
        """
        Push new content to a live activity.

        Raises:
            StaleHandleError: the activity no longer exists
        """

    @abstractmethod
    async def end(self, handle: ActivityHandle,
                  dismissal: DismissalPolicy = DismissalPolicy.IMMEDIATE) -> None:
        """
        Terminate an activity.

        Raises:
            StaleHandleError: the activity no longer exists
        """

    @abstractmethod
    async def list_active(self) -> List[ActiveActivity]:
        """
        Enumerate every activity currently visible on the host.

        This includes activities started by earlier runs of the process.
        """
