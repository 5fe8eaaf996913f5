# meeting_finder/free_time.py
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .models import WHOLE_DAY, BusyInterval, OptionalBusy, TimeRange

FULL = "full"
BEST_OPTIONAL = "best_optional"
REQUIRED_ONLY = "required_only"


@dataclass
class ScanResult:
    full_free: List[TimeRange] = field(default_factory=list)
    required_free: List[TimeRange] = field(default_factory=list)
    candidates: List[BusyInterval] = field(default_factory=list)
    best_cost: Optional[int] = None     # fewest optional attendees excluded


class FreeTimeFinder:
    """
    Free windows of at least ``duration`` minutes around coalesced busy time.

    ``busy`` must be sorted and pairwise non-overlapping, as produced by
    ``busy.coalesce``.
    """

    def __init__(self, busy: Sequence[BusyInterval], duration: int):
        self.busy = list(busy)
        self.duration = duration

    def _fits(self, span: TimeRange) -> bool:
        return span.duration >= self.duration

    def _extend(self, index: int) -> Optional[BusyInterval]:
        """
        Grow the optional interval at ``index`` forward until it is long enough.

        Free time after the block counts toward the duration without adding
        anyone to the excluded set; the next busy interval's tags are taken
        only if that free time is still too short. Returns None when a
        required interval or the end of the day comes first.
        """
        first = self.busy[index]
        candidate = first
        j = index + 1
        while not self._fits(candidate.when):
            limit = self.busy[j].start if j < len(self.busy) else WHOLE_DAY.end
            if self._fits(TimeRange(first.start, limit)):
                return candidate.with_span(first.start, limit)
            if j >= len(self.busy) or self.busy[j].required:
                return None
            nxt = self.busy[j]
            candidate = candidate.with_span(first.start, nxt.end).with_merged_tags(
                nxt.excluded_optional)
            j += 1
        return candidate

    def scan(self) -> ScanResult:
        result = ScanResult()
        full_cursor = WHOLE_DAY.start
        required_cursor = WHOLE_DAY.start

        for index, iv in enumerate(self.busy):
            gap = TimeRange(full_cursor, iv.start)
            if self._fits(gap):
                result.full_free.append(gap)
            full_cursor = iv.end

            if iv.required:
                gap = TimeRange(required_cursor, iv.start)
                if self._fits(gap):
                    result.required_free.append(gap)
                required_cursor = iv.end
                continue

            candidate = self._extend(index)
            if candidate is None:
                continue
            cost = len(candidate.excluded_optional)
            if result.best_cost is None or cost < result.best_cost:
                result.best_cost = cost
                result.candidates = [candidate]
            elif cost == result.best_cost:
                result.candidates.append(candidate)

        for cursor, bucket in ((full_cursor, result.full_free),
                               (required_cursor, result.required_free)):
            gap = TimeRange(cursor, WHOLE_DAY.end)
            if self._fits(gap):
                bucket.append(gap)

        result.candidates = self._merge_overlapping(result.candidates, result.best_cost)
        return result

    @staticmethod
    def _merge_overlapping(candidates: List[BusyInterval],
                           best_cost: Optional[int]) -> List[BusyInterval]:
        # overlapping windows merge only if the union still excludes best_cost people;
        # otherwise the later one is dropped
        merged: List[BusyInterval] = []
        for cand in candidates:
            if merged and cand.start < merged[-1].end:
                last = merged[-1]
                joined = last.with_merged_tags(cand.excluded_optional)
                if len(joined.excluded_optional) == best_cost:
                    merged[-1] = joined.with_span(last.start, max(last.end, cand.end))
                continue
            merged.append(cand)
        return merged

    def select(self, has_required: bool, scan: Optional[ScanResult] = None):
        """
        Pick the windows to offer and the tier they came from.

        Everyone free wins; then, with required attendees, the windows that
        exclude the fewest optional attendees; otherwise the required-only gaps.
        """
        scan = scan or self.scan()
        if scan.full_free:
            return FULL, list(scan.full_free)
        if has_required and scan.candidates:
            return BEST_OPTIONAL, [c.when for c in scan.candidates]
        return REQUIRED_ONLY, list(scan.required_free)


def excluded_by(window: TimeRange, busy: Sequence[BusyInterval]) -> OptionalBusy:
    """Optional attendees busy at some point of ``window``."""
    kind = OptionalBusy()
    for iv in busy:
        if iv.when.overlaps(window):
            kind = OptionalBusy(kind.excluded | iv.excluded_optional)
    return kind
