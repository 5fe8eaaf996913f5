# demo.py
import logging

import pandas as pd
import matplotlib.pyplot as plt

from meeting_finder.frames import (
    availability_profile,
    busy_to_frame,
    events_from_frame,
    request_from_values,
    windows_to_frame,
)
from meeting_finder.models import ViewPrefs
from meeting_finder.scheduler import plan


def main():
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    prefs = ViewPrefs()

    events_df = pd.DataFrame([
        {"id": "standup", "label": "Standup", "start": "08:00", "end": "09:00", "attendees": "Alice"},
        {"id": "review", "label": "Design review", "start": "10:00", "end": "11:00", "attendees": "Alice"},
        {"id": "early", "label": "Early shift", "start": "00:00", "end": "08:00", "attendees": "Bob"},
        {"id": "late", "label": "Late shift", "start": "11:00", "end": "24:00", "attendees": "Bob"},
        {"id": "1on1", "label": "1:1", "start": "09:00", "end": "10:00", "attendees": "Carol, Dan"},
    ])

    events = events_from_frame(events_df)
    request = request_from_values(
        required="Alice",
        optional="Bob, Carol, Dan",
        duration=prefs.default_duration,
    )

    result = plan(events, request)

    print(f"=== Windows ({result.tier}) ===")
    print(windows_to_frame(result.windows))
    for window in result.windows:
        missing = ", ".join(sorted(result.excluded(window))) or "nobody"
        print(f"{window}: misses {missing}")

    print("=== Busy intervals ===")
    print(busy_to_frame(result.busy))

    # Plot who is busy across the day
    profile = availability_profile(result.busy)
    plt.figure(figsize=(10, 3))
    plt.step(profile["minute"] / 60, profile["optional_excluded"], where="post",
             label="optional attendees busy")
    plt.fill_between(profile["minute"] / 60, 0, profile["required_busy"].astype(int),
                     step="post", alpha=0.3, label="required busy")
    plt.title("Availability")
    plt.xlabel("Hour")
    plt.ylabel("Busy")
    plt.legend()
    plt.tight_layout()
    plt.show()


if __name__ == "__main__":
    main()
