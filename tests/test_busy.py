import random

import pytest

from meeting_finder.busy import BusyIntervalSet, classify, coalesce
from meeting_finder.models import (
    REQUIRED,
    BusyInterval,
    Event,
    MeetingRequest,
    OptionalBusy,
    TimeRange,
)


def req(start, end):
    return BusyInterval(TimeRange(start, end), REQUIRED)


def opt(start, end, *people):
    return BusyInterval(TimeRange(start, end), OptionalBusy(frozenset(people)))


def minute_map(intervals):
    """Minute -> 'required' or the set of busy optional attendees."""
    out = {}
    for iv in intervals:
        for minute in range(iv.start, iv.end):
            if iv.required or out.get(minute) == "required":
                out[minute] = "required"
            else:
                out[minute] = out.get(minute, frozenset()) | iv.excluded_optional
    return out


class TestClassify:

    def test_required_attendee_makes_event_required(self):
        request = MeetingRequest({"A"}, 30, {"B"})
        events = [Event("e1", "", TimeRange(0, 30), {"A", "B"})]
        assert classify(events, request) == [req(0, 30)]

    def test_optional_event_tagged_with_intersection(self):
        request = MeetingRequest({"A"}, 30, {"B", "C"})
        events = [Event("e1", "", TimeRange(0, 30), {"B", "X"})]
        assert classify(events, request) == [opt(0, 30, "B")]

    def test_unrelated_and_empty_events_dropped(self):
        request = MeetingRequest({"A"}, 30, {"B"})
        events = [
            Event("e1", "", TimeRange(0, 30), {"X"}),
            Event("e2", "", TimeRange(60, 60), {"A"}),
        ]
        assert classify(events, request) == []

    def test_attendee_in_both_sets_counts_as_required(self):
        request = MeetingRequest({"A"}, 30, {"A"})
        events = [Event("e1", "", TimeRange(0, 30), {"A"})]
        assert classify(events, request) == [req(0, 30)]


class TestCoalesce:

    @pytest.mark.parametrize("intervals, expected", [
        ([req(0, 60), req(30, 90)], [req(0, 90)]),
        ([req(0, 100), req(20, 40)], [req(0, 100)]),
        ([req(0, 30), req(0, 30)], [req(0, 30)]),
    ])
    def test_required_with_required(self, intervals, expected):
        assert coalesce(intervals) == expected

    def test_required_then_partial_optional_keeps_remainder(self):
        assert coalesce([req(0, 60), opt(30, 90, "B")]) == [req(0, 60), opt(60, 90, "B")]

    def test_optional_then_partial_required_keeps_prefix(self):
        assert coalesce([opt(0, 60, "B"), req(30, 90)]) == [opt(0, 30, "B"), req(30, 90)]

    def test_optional_containing_required_is_split(self):
        assert coalesce([opt(0, 100, "B"), req(40, 60)]) == [
            opt(0, 40, "B"), req(40, 60), opt(60, 100, "B"),
        ]

    def test_required_containing_optional_swallows_it(self):
        assert coalesce([req(0, 100), opt(20, 30, "B")]) == [req(0, 100)]

    def test_nested_optionals_merge_tags_inside(self):
        assert coalesce([opt(0, 100, "B"), opt(20, 40, "C")]) == [
            opt(0, 20, "B"), opt(20, 40, "B", "C"), opt(40, 100, "B"),
        ]

    def test_partial_optionals_merge_tags_in_overlap(self):
        assert coalesce([opt(0, 60, "B"), opt(30, 90, "C")]) == [
            opt(0, 30, "B"), opt(30, 60, "B", "C"), opt(60, 90, "C"),
        ]

    def test_split_piece_is_retested_against_followers(self):
        result = coalesce([opt(0, 100, "B"), opt(10, 20, "C"), opt(15, 50, "D")])
        assert result == [
            opt(0, 10, "B"),
            opt(10, 15, "B", "C"),
            opt(15, 20, "B", "C", "D"),
            opt(20, 50, "B", "D"),
            opt(50, 100, "B"),
        ]

    def test_touching_intervals_of_same_kind_fuse(self):
        assert coalesce([req(0, 30), req(30, 60)]) == [req(0, 60)]
        assert coalesce([opt(0, 30, "B"), opt(30, 60, "B")]) == [opt(0, 60, "B")]
        assert coalesce([opt(0, 30, "B"), opt(30, 60, "C")]) == [
            opt(0, 30, "B"), opt(30, 60, "C"),
        ]

    def test_inputs_are_not_mutated(self):
        outer = opt(0, 100, "B")
        coalesce([outer, opt(20, 40, "C")])
        assert outer == opt(0, 100, "B")

    def test_cover_is_sorted_disjoint_and_faithful(self):
        rng = random.Random(7)
        people = ["B", "C", "D", "E"]
        intervals = []
        for _ in range(40):
            start = rng.randrange(0, 1400)
            end = min(1440, start + rng.randrange(1, 180))
            if rng.random() < 0.3:
                intervals.append(req(start, end))
            else:
                intervals.append(opt(start, end, *rng.sample(people, rng.randrange(1, 3))))

        result = coalesce(intervals)

        for left, right in zip(result, result[1:]):
            assert left.end <= right.start
        assert minute_map(result) == minute_map(intervals)

    def test_input_order_does_not_matter(self):
        intervals = [
            req(480, 540), opt(0, 480, "B"), opt(450, 600, "C"),
            opt(540, 600, "D"), req(600, 660), opt(500, 700, "B", "E"),
        ]
        expected = coalesce(intervals)
        rng = random.Random(3)
        for _ in range(20):
            shuffled = intervals[:]
            rng.shuffle(shuffled)
            assert coalesce(shuffled) == expected


def test_busy_interval_set_exposes_coalesced_intervals():
    request = MeetingRequest({"A"}, 30, {"B"})
    events = [
        Event("e1", "", TimeRange(0, 100), {"B"}),
        Event("e2", "", TimeRange(40, 60), {"A"}),
        Event("e3", "", TimeRange(200, 300), {"Z"}),
    ]
    busy = BusyIntervalSet(events, request)

    assert list(busy) == [opt(0, 40, "B"), req(40, 60), opt(60, 100, "B")]
    assert len(busy) == 3
    assert busy[1] == req(40, 60)
    assert busy.required_intervals() == [req(40, 60)]
    assert busy.optional_intervals() == [opt(0, 40, "B"), opt(60, 100, "B")]
