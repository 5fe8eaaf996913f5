# meeting_finder/busy.py
import heapq
import itertools
import logging
from typing import Iterable, Iterator, List

from .models import (
    REQUIRED,
    BusyInterval,
    Event,
    MeetingRequest,
    OptionalBusy,
    TimeRange,
)

logger = logging.getLogger(__name__)


def classify(events: Iterable[Event], request: MeetingRequest) -> List[BusyInterval]:
    """
    Turn events into busy intervals for this request.

    An event with any required attendee is required-busy. Otherwise, if any
    optional attendee is in it, it is optional-busy tagged with exactly those
    attendees. Events that involve nobody from the request are dropped.
    """
    required = request.required_attendees
    optional = request.effective_optional

    busy: List[BusyInterval] = []
    for event in events:
        if event.when.duration <= 0:
            continue
        if event.attendees & required:
            busy.append(BusyInterval(event.when, REQUIRED))
            continue
        excluded = event.attendees & optional
        if excluded:
            busy.append(BusyInterval(event.when, OptionalBusy(excluded)))
    return busy


def _subtract(opt: BusyInterval, req: BusyInterval) -> List[BusyInterval]:
    """Parts of ``opt`` outside ``req``, keeping opt's tags."""
    pieces = []
    if opt.start < req.start:
        pieces.append(opt.with_span(opt.start, min(opt.end, req.start)))
    if req.end < opt.end:
        pieces.append(opt.with_span(max(opt.start, req.end), opt.end))
    return pieces


def _split_optional(first: BusyInterval, second: BusyInterval) -> List[BusyInterval]:
    # prefix / overlap / suffix; the overlap carries both tag sets
    cuts = sorted({first.start, first.end, second.start, second.end})
    pieces = []
    for lo, hi in zip(cuts, cuts[1:]):
        span = TimeRange(lo, hi)
        covering = [iv for iv in (first, second) if iv.when.contains(span)]
        piece = BusyInterval(span, covering[0].kind)
        for other in covering[1:]:
            piece = piece.with_merged_tags(other.excluded_optional)
        pieces.append(piece)
    return pieces


def combine(first: BusyInterval, second: BusyInterval) -> List[BusyInterval]:
    """
    Replace two overlapping intervals with non-overlapping pieces.

    ``first`` must not sort after ``second``. The pieces cover the same time
    as the pair.
    """
    if first.required and second.required:
        return [BusyInterval(TimeRange(first.start, max(first.end, second.end)), REQUIRED)]
    if first.required:
        return [first] + _subtract(second, first)
    if second.required:
        return _subtract(first, second) + [second]
    return _split_optional(first, second)


def _fuse_touching(intervals: List[BusyInterval]) -> List[BusyInterval]:
    fused: List[BusyInterval] = []
    for iv in intervals:
        if fused and fused[-1].end == iv.start and fused[-1].kind == iv.kind:
            fused[-1] = fused[-1].with_span(fused[-1].start, iv.end)
        else:
            fused.append(iv)
    return fused


def coalesce(intervals: Iterable[BusyInterval]) -> List[BusyInterval]:
    """
    Merge busy intervals into a sorted, pairwise non-overlapping cover.

    The leftmost interval is compared with its successor; on overlap both are
    replaced by the pieces from ``combine`` and the new leftmost piece is
    tested again. Every merge lowers the total overlap between intervals, so
    the loop ends.
    """
    seq = itertools.count()
    heap = [(iv.sort_key(), next(seq), iv) for iv in intervals if iv.duration > 0]
    heapq.heapify(heap)

    merged: List[BusyInterval] = []
    while heap:
        _, _, first = heapq.heappop(heap)
        if heap and first.when.overlaps(heap[0][2].when):
            _, _, second = heapq.heappop(heap)
            for piece in combine(first, second):
                if piece.duration > 0:
                    heapq.heappush(heap, (piece.sort_key(), next(seq), piece))
        else:
            merged.append(first)

    return _fuse_touching(merged)


class BusyIntervalSet:
    """Coalesced busy intervals for one request, in time order."""

    def __init__(self, events: Iterable[Event], request: MeetingRequest):
        self.request = request
        classified = classify(events, request)
        self.intervals = coalesce(classified)
        logger.debug("classified %d busy intervals, %d after coalescing",
                     len(classified), len(self.intervals))

    def __iter__(self) -> Iterator[BusyInterval]:
        return iter(self.intervals)

    def __len__(self) -> int:
        return len(self.intervals)

    def __getitem__(self, index: int) -> BusyInterval:
        return self.intervals[index]

    def required_intervals(self) -> List[BusyInterval]:
        return [iv for iv in self.intervals if iv.required]

    def optional_intervals(self) -> List[BusyInterval]:
        return [iv for iv in self.intervals if not iv.required]
