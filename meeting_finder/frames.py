# meeting_finder/frames.py
from datetime import datetime, time
from typing import Iterable, List, Sequence, Union

import numpy as np
import pandas as pd

from .models import (
    MINUTES_PER_DAY,
    START_OF_DAY,
    WHOLE_DAY,
    BusyInterval,
    Event,
    MeetingRequest,
    TimeRange,
)
from .scheduler import validate_request

EVENT_COLUMNS = ["id", "label", "start", "end", "attendees"]
WINDOW_COLUMNS = ["start", "end", "duration", "start_time", "end_time"]
BUSY_COLUMNS = ["start", "end", "start_time", "end_time", "kind", "excluded"]


def parse_clock(text: str) -> int:
    """'HH:MM' -> minutes since midnight. '24:00' is the end of the day."""
    try:
        hours, minutes = (int(part) for part in text.strip().split(":"))
    except ValueError:
        raise ValueError(f"expected HH:MM, got {text!r}") from None
    total = hours * 60 + minutes
    if not 0 <= minutes < 60 or not START_OF_DAY <= total <= WHOLE_DAY.end:
        raise ValueError(f"time outside the day: {text!r}")
    return total


def format_minutes(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _to_minutes(value) -> int:
    if isinstance(value, str):
        return int(value) if value.strip().isdigit() else parse_clock(value)
    if isinstance(value, (datetime, time)):
        return value.hour * 60 + value.minute
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return int(value)
    raise ValueError(f"cannot read a time of day from {value!r}")


def _split_names(value) -> List[str]:
    """Attendee names from a comma-separated string or any iterable."""
    if value is None or (isinstance(value, float) and np.isnan(value)):
        return []
    if isinstance(value, str):
        return [name.strip() for name in value.split(",") if name.strip()]
    return [str(name).strip() for name in value if str(name).strip()]


def events_from_frame(df: pd.DataFrame) -> List[Event]:
    """
    Build events from a frame with columns id, label, start, end, attendees.

    ``id`` and ``label`` are optional. ``start``/``end`` may be minutes,
    'HH:MM' strings or timestamps; only the time of day is used.
    """
    missing = [c for c in ("start", "end", "attendees") if c not in df.columns]
    if missing:
        raise ValueError(f"events frame is missing columns: {missing}")

    events = []
    for idx, row in df.iterrows():
        start, end = _to_minutes(row["start"]), _to_minutes(row["end"])
        if not START_OF_DAY <= start <= end <= WHOLE_DAY.end:
            raise ValueError(f"row {idx}: invalid event time [{start}, {end})")

        event_id = row["id"] if "id" in df.columns and pd.notnull(row["id"]) else f"event-{idx}"
        label = row["label"] if "label" in df.columns and pd.notnull(row["label"]) else ""
        events.append(Event(
            id=str(event_id),
            label=str(label),
            when=TimeRange(start, end),
            attendees=_split_names(row["attendees"]),
        ))
    return events


def request_from_values(required: Union[str, Iterable[str]],
                        optional: Union[str, Iterable[str]],
                        duration: int) -> MeetingRequest:
    request = MeetingRequest(
        required_attendees=_split_names(required),
        duration=int(duration),
        optional_attendees=_split_names(optional),
    )
    validate_request(request)
    return request


def events_to_frame(events: Sequence[Event]) -> pd.DataFrame:
    if not events:
        return pd.DataFrame(columns=EVENT_COLUMNS)
    return pd.DataFrame([{
        "id": e.id,
        "label": e.label,
        "start": format_minutes(e.when.start),
        "end": format_minutes(e.when.end),
        "attendees": ", ".join(sorted(e.attendees)),
    } for e in events])


def windows_to_frame(windows: Sequence[TimeRange]) -> pd.DataFrame:
    if not windows:
        return pd.DataFrame(columns=WINDOW_COLUMNS)
    return pd.DataFrame([{
        "start": w.start,
        "end": w.end,
        "duration": w.duration,
        "start_time": format_minutes(w.start),
        "end_time": format_minutes(w.end),
    } for w in windows])


def busy_to_frame(busy: Sequence[BusyInterval]) -> pd.DataFrame:
    if not busy:
        return pd.DataFrame(columns=BUSY_COLUMNS)
    return pd.DataFrame([{
        "start": iv.start,
        "end": iv.end,
        "start_time": format_minutes(iv.start),
        "end_time": format_minutes(iv.end),
        "kind": "required" if iv.required else "optional",
        "excluded": ", ".join(sorted(iv.excluded_optional)),
    } for iv in busy])


def availability_profile(busy: Sequence[BusyInterval]) -> pd.DataFrame:
    """Per-minute view of the day: required-busy flag and optional exclusions."""
    required_busy = np.zeros(MINUTES_PER_DAY, dtype=bool)
    optional_excluded = np.zeros(MINUTES_PER_DAY, dtype=int)
    for iv in busy:
        if iv.required:
            required_busy[iv.start:iv.end] = True
        else:
            optional_excluded[iv.start:iv.end] = len(iv.excluded_optional)

    return pd.DataFrame({
        "minute": np.arange(MINUTES_PER_DAY),
        "required_busy": required_busy,
        "optional_excluded": optional_excluded,
    })
