"""
Live Activity coordinators for the Tapir dream journal.

Coordinators create, refresh and tear down the activities shown on the
lock screen and Dynamic Island: the dream-recording reminder and the ambient
companion presence.
"""

from .base import CoordinatorState, LiveActivityCoordinator
from .reminder import ReminderCoordinator
from .companion import CompanionCoordinator
from .signatures import SignatureSource, SIGNATURES, FALLBACK_SIGNATURE
