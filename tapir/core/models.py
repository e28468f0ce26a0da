"""
Value types shared by the activity coordinators and hosts.

The host exposes a single activity type, so reminder and companion activities
share one state shape. Companion states are tagged by a far-future target time:
anything beyond the companion horizon (365 days from now by default) is a
companion activity, anything else a reminder. Real reminder times must stay
inside the horizon.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum, auto
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_MESSAGE = "记录你的梦境"
DEFAULT_HORIZON_DAYS = 365

# The platform's "distant future": 4001-01-01T00:00:00Z
FAR_FUTURE = datetime(4001, 1, 1, tzinfo=timezone.utc)

class DismissalPolicy(Enum):
    """How an ended activity leaves the presentation surface."""
    IMMEDIATE = auto()
    AFTER_DELAY = auto()

class ActivityHandle(BaseModel):
    """Opaque reference to one activity hosted outside the process."""
    model_config = ConfigDict(frozen=True)

    id: str

    def __str__(self) -> str:
        return self.id

class ActivityState(BaseModel):
    """
    Content shown by an activity: a target time and a message.

    Naive datetimes are taken to be UTC.
    """
    model_config = ConfigDict(frozen=True)

    target_time: datetime
    message: str = Field(default=DEFAULT_MESSAGE)

    @field_validator("target_time")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @property
    def target_timestamp(self) -> float:
        """Target time as seconds since the epoch."""
        return self.target_time.timestamp()

    @classmethod
    def companion(cls, message: str) -> "ActivityState":
        """State for a companion activity, tagged with the far-future sentinel."""
        return cls(target_time=FAR_FUTURE, message=message)

def companion_horizon(now: datetime, horizon_days: int = DEFAULT_HORIZON_DAYS) -> datetime:
    """Earliest target time that still counts as a reminder."""
    return now + timedelta(days=horizon_days)

def is_companion_state(state: ActivityState, now: datetime,
                       horizon_days: int = DEFAULT_HORIZON_DAYS) -> bool:
    """True when the state's target time lies strictly beyond the horizon."""
    return state.target_time > companion_horizon(now, horizon_days)

class ActivityKind(Enum):
    """What an activity on the host represents."""
    REMINDER = "reminder"
    COMPANION = "companion"

    @classmethod
    def of(cls, state: ActivityState, now: datetime,
           horizon_days: Optional[int] = None) -> "ActivityKind":
        if is_companion_state(
                state, now, DEFAULT_HORIZON_DAYS if horizon_days is None else horizon_days):
            return cls.COMPANION
        return cls.REMINDER
