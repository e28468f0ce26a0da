"""
Errors raised by activity hosts.

Every failure of the external presentation surface is reported as a subclass
of HostError so coordinators can catch, log and absorb it in one place.
"""

from typing import Optional

class HostError(Exception):
    """Base class for all activity host failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 handle_id: Optional[str] = None):
        super().__init__(message)
        self.operation = operation
        self.handle_id = handle_id

    @property
    def kind(self) -> str:
        """Short name used in logs and failure events."""
        return type(self).__name__.replace("Error", "")

class NotAuthorizedError(HostError):
    """The platform or the user disabled the activity surface."""

class HostRejectedError(HostError):
    """The host refused the request for any other reason (e.g. capacity)."""

class StaleHandleError(HostError):
    """The targeted activity no longer exists on the host."""

class UnknownHostError(HostError):
    """Unexpected failure raised by a host implementation."""

    @classmethod
    def wrap(cls, error: Exception, operation: str,
             handle_id: Optional[str] = None) -> "UnknownHostError":
        wrapped = cls(f"{type(error).__name__}: {error}", operation, handle_id)
        wrapped.__cause__ = error
        return wrapped
