# meeting_finder/scheduler.py
import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional

from .busy import BusyIntervalSet
from .free_time import FreeTimeFinder, excluded_by
from .models import BusyInterval, Event, MeetingRequest, TimeRange

logger = logging.getLogger(__name__)


@dataclass
class MeetingPlan:
    windows: List[TimeRange]
    tier: str                                   # "full", "best_optional" or "required_only"
    busy: List[BusyInterval] = field(default_factory=list)
    best_cost: Optional[int] = None

    def excluded(self, window: TimeRange) -> FrozenSet[str]:
        """Optional attendees who cannot make ``window``."""
        return excluded_by(window, self.busy).excluded


def validate_request(request: MeetingRequest) -> None:
    if request.duration <= 0:
        raise ValueError(f"meeting duration must be positive, got {request.duration}")


def plan(events: Iterable[Event], request: MeetingRequest) -> MeetingPlan:
    """
    Find the windows that can host ``request`` given the existing ``events``.

    Windows where everybody is free are preferred. Failing that, and if
    there are required attendees, the windows that leave out the fewest
    optional attendees are offered. Otherwise only required attendees are
    considered.
    """
    validate_request(request)

    # 1) Classify and coalesce busy time
    busy = BusyIntervalSet(events, request)

    # 2) Scan for gaps and optional trade-offs, then apply the fallback order
    finder = FreeTimeFinder(busy.intervals, request.duration)
    scan = finder.scan()
    tier, windows = finder.select(bool(request.required_attendees), scan)

    logger.debug("picked %d window(s) from tier %s", len(windows), tier)
    return MeetingPlan(windows=windows, tier=tier, busy=busy.intervals,
                       best_cost=scan.best_cost)


def query(events: Iterable[Event], request: MeetingRequest) -> List[TimeRange]:
    """Windows for ``request``, sorted by start and non-overlapping."""
    return plan(events, request).windows
