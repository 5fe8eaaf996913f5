from .models import (
    END_OF_DAY,
    START_OF_DAY,
    WHOLE_DAY,
    BusyInterval,
    Event,
    MeetingRequest,
    OptionalBusy,
    RequiredBusy,
    TimeRange,
    ViewPrefs,
    time_in_minutes,
)
from .busy import BusyIntervalSet
from .free_time import FreeTimeFinder
from .scheduler import MeetingPlan, plan, query

__all__ = [
    "END_OF_DAY",
    "START_OF_DAY",
    "WHOLE_DAY",
    "BusyInterval",
    "BusyIntervalSet",
    "Event",
    "FreeTimeFinder",
    "MeetingPlan",
    "MeetingRequest",
    "OptionalBusy",
    "RequiredBusy",
    "TimeRange",
    "ViewPrefs",
    "plan",
    "query",
    "time_in_minutes",
]
