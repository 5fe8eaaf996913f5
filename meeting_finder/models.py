# meeting_finder/models.py
from dataclasses import dataclass, replace
from typing import FrozenSet, Iterable, Tuple, Union

START_OF_DAY = 0
END_OF_DAY = 23 * 60 + 59      # last minute of the day
MINUTES_PER_DAY = 24 * 60


def time_in_minutes(hours: int, minutes: int) -> int:
    """Minutes since midnight for a wall-clock time."""
    if not 0 <= hours < 24:
        raise ValueError(f"hours must be in 0..23, got {hours}")
    if not 0 <= minutes < 60:
        raise ValueError(f"minutes must be in 0..59, got {minutes}")
    return hours * 60 + minutes


@dataclass(frozen=True, order=True)
class TimeRange:
    """Half-open span [start, end) of minutes within one day."""
    start: int
    end: int

    @classmethod
    def from_start_duration(cls, start: int, duration: int) -> "TimeRange":
        return cls(start, start + duration)

    @classmethod
    def from_start_end(cls, start: int, end: int, inclusive: bool = False) -> "TimeRange":
        # inclusive=True turns END_OF_DAY into the exclusive day bound
        return cls(start, end + 1 if inclusive else end)

    @property
    def duration(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start < other.end and other.start < self.end

    def contains(self, other: Union["TimeRange", int]) -> bool:
        if isinstance(other, TimeRange):
            return self.start <= other.start and other.end <= self.end
        return self.start <= other < self.end

    def __str__(self) -> str:
        return f"Range: [{self.start}, {self.end})"


WHOLE_DAY = TimeRange.from_start_end(START_OF_DAY, END_OF_DAY, inclusive=True)


@dataclass(frozen=True)
class RequiredBusy:
    """Busy for at least one required attendee."""


@dataclass(frozen=True)
class OptionalBusy:
    """Busy only for the optional attendees in ``excluded``."""
    excluded: FrozenSet[str] = frozenset()


BusyKind = Union[RequiredBusy, OptionalBusy]
REQUIRED = RequiredBusy()


@dataclass(frozen=True)
class BusyInterval:
    when: TimeRange
    kind: BusyKind = REQUIRED

    @property
    def start(self) -> int:
        return self.when.start

    @property
    def end(self) -> int:
        return self.when.end

    @property
    def duration(self) -> int:
        return self.when.duration

    @property
    def required(self) -> bool:
        return isinstance(self.kind, RequiredBusy)

    @property
    def excluded_optional(self) -> FrozenSet[str]:
        if self.required:
            return frozenset()
        return self.kind.excluded

    def with_merged_tags(self, tags: Iterable[str]) -> "BusyInterval":
        """Copy with ``tags`` added to the excluded set; required stays as is."""
        if self.required:
            return self
        return replace(self, kind=OptionalBusy(self.kind.excluded | frozenset(tags)))

    def with_span(self, start: int, end: int) -> "BusyInterval":
        return replace(self, when=TimeRange(start, end))

    def sort_key(self) -> Tuple[int, int, int, Tuple[str, ...]]:
        return (self.start, self.end, 0 if self.required else 1,
                tuple(sorted(self.excluded_optional)))


@dataclass(frozen=True)
class Event:
    id: str
    label: str
    when: TimeRange
    attendees: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "attendees", frozenset(self.attendees))


@dataclass(frozen=True)
class MeetingRequest:
    """
    A meeting to place.

    Someone listed as both required and optional is treated as required.
    """
    required_attendees: FrozenSet[str]
    duration: int                   # minutes, must be > 0
    optional_attendees: FrozenSet[str] = frozenset()

    def __post_init__(self):
        object.__setattr__(self, "required_attendees", frozenset(self.required_attendees))
        object.__setattr__(self, "optional_attendees", frozenset(self.optional_attendees))

    @property
    def effective_optional(self) -> FrozenSet[str]:
        return self.optional_attendees - self.required_attendees


@dataclass
class ViewPrefs:
    default_duration: int = 30
    calendar_date: str = "2020-01-01"   # day used to render minute offsets
    slot_min_hour: int = 6
    slot_max_hour: int = 23
    metrics_port: int = 8000
    attendee_hint: str = "comma separated, e.g. alice, bob"
