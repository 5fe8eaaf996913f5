import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import datetime, timedelta

from streamlit_calendar import calendar

from meeting_finder.frames import (
    availability_profile,
    busy_to_frame,
    events_from_frame,
    events_to_frame,
    format_minutes,
    request_from_values,
    windows_to_frame,
)
from meeting_finder.models import ViewPrefs
from meeting_finder.scheduler import plan

from prometheus_client import start_http_server, Summary, Counter


# ✅ Create metric only once
if "QUERY_TIME" not in st.session_state:
    st.session_state.QUERY_TIME = Summary(
        "meeting_query_seconds",
        "Time spent finding meeting windows",
    )
QUERY_TIME = st.session_state.QUERY_TIME

# ✅ Count which fallback tier answered each query
if "TIER_COUNTER" not in st.session_state:
    st.session_state.TIER_COUNTER = Counter(
        "meeting_query_tier_total",
        "Count of queries by the tier that produced the windows",
        ["tier"],  # full / best_optional / required_only
    )
TIER_COUNTER = st.session_state.TIER_COUNTER

if "prefs" not in st.session_state:
    st.session_state.prefs = ViewPrefs()

# ✅ Start metrics server only once
if "metrics_started" not in st.session_state:
    start_http_server(st.session_state.prefs.metrics_port)
    st.session_state.metrics_started = True


def clock_input(label: str, key: str, value: str) -> str:
    """Time picker returning 'HH:MM'; ticking 'end of day' gives '24:00'."""
    col_time, col_eod = st.columns([3, 1])
    with col_time:
        t = st.time_input(label, value=datetime.strptime(value, "%H:%M").time(), key=key)
    with col_eod:
        eod = st.checkbox("end of day", key=key + "_eod")
    return "24:00" if eod else t.strftime("%H:%M")


def to_iso(day: datetime, minutes: int) -> str:
    return (day + timedelta(minutes=int(minutes))).isoformat()


# Session State Setup
if "events_df" not in st.session_state:
    st.session_state.events_df = pd.DataFrame(columns=["id", "label", "start", "end", "attendees"])

if "plan" not in st.session_state:
    st.session_state.plan = None

prefs = st.session_state.prefs


# Sidebar: Inputs
st.sidebar.title("Meeting Finder")

# Add Event
st.sidebar.subheader("Add Existing Event")
with st.sidebar.form("event_form"):
    ev_label = st.text_input("Label", key="ev_label")
    ev_start = clock_input("Start", key="ev_start", value="09:00")
    ev_end = clock_input("End", key="ev_end", value="10:00")
    ev_people = st.text_input("Attendees", key="ev_people", help=prefs.attendee_hint)
    add_event = st.form_submit_button("Add Event")
    if add_event:
        row = pd.DataFrame([{
            "id": f"ev{len(st.session_state.events_df)}",
            "label": ev_label,
            "start": ev_start,
            "end": ev_end,
            "attendees": ev_people,
        }])
        try:
            events_from_frame(row)
        except ValueError as e:
            st.sidebar.error(str(e))
        else:
            st.session_state.events_df = pd.concat(
                [st.session_state.events_df, row], ignore_index=True
            )

# Meeting Request
st.sidebar.subheader("New Meeting")
req_people = st.sidebar.text_input("Required attendees", help=prefs.attendee_hint)
opt_people = st.sidebar.text_input("Optional attendees", help=prefs.attendee_hint)
duration = st.sidebar.number_input("Duration (minutes)", min_value=1, max_value=24 * 60 + 60,
                                   value=prefs.default_duration, step=15)


# Main: Find Windows
st.title("Find a Meeting Time")

st.markdown("### Existing Events")
if not st.session_state.events_df.empty:
    st.dataframe(events_to_frame(events_from_frame(st.session_state.events_df)))
    if st.button("Clear events"):
        st.session_state.events_df = st.session_state.events_df.iloc[0:0]
        st.session_state.plan = None
else:
    st.write("No events yet.")


if st.button("Find Meeting Times"):
    try:
        request = request_from_values(req_people, opt_people, duration)
        events = events_from_frame(st.session_state.events_df)
    except ValueError as e:
        st.error(str(e))
    else:
        with QUERY_TIME.time():
            result = plan(events, request)
        TIER_COUNTER.labels(tier=result.tier).inc()
        st.session_state.plan = result


result = st.session_state.plan
if result is not None:
    tier_text = {
        "full": "Everyone, required and optional, can attend these windows.",
        "best_optional": (
            f"No window suits everybody; these leave out {result.best_cost} "
            "optional attendee(s) and no required ones."
        ),
        "required_only": "Only required attendees were considered.",
    }[result.tier]
    st.markdown("## Candidate Windows")
    st.info(tier_text)

    windows_df = windows_to_frame(result.windows)
    if not windows_df.empty:
        windows_df["misses"] = [", ".join(sorted(result.excluded(w))) for w in result.windows]
        st.dataframe(windows_df)
    else:
        st.warning("No window is long enough for this meeting.")

    # Day calendar with busy time in grey and windows in green
    day = datetime.strptime(prefs.calendar_date, "%Y-%m-%d")
    cal_events = []
    for iv in result.busy:
        cal_events.append({
            "title": "required busy" if iv.required else "busy: " + ", ".join(sorted(iv.excluded_optional)),
            "start": to_iso(day, iv.start),
            "end": to_iso(day, iv.end),
            "color": "#7f7f7f" if iv.required else "#ff7f0e",
        })
    for i, w in enumerate(result.windows):
        cal_events.append({
            "title": f"option {i + 1} ({format_minutes(w.start)}-{format_minutes(w.end)})",
            "start": to_iso(day, w.start),
            "end": to_iso(day, w.end),
            "id": f"w{i}",
            "color": "#2ca02c",
        })

    cal_options = {
        "initialView": "timeGridDay",
        "initialDate": prefs.calendar_date,
        "slotMinTime": f"{prefs.slot_min_hour:02d}:00:00",
        "slotMaxTime": f"{prefs.slot_max_hour:02d}:00:00",
        "allDaySlot": False,
        "headerToolbar": {"left": "", "center": "title", "right": ""},
    }
    calendar(events=cal_events, options=cal_options, key="calendar")

    st.markdown("### Busy Intervals")
    st.dataframe(busy_to_frame(result.busy))

    # Availability plot for transparency
    profile = availability_profile(result.busy)
    profile["hour"] = profile["minute"] / 60
    profile["required_busy"] = profile["required_busy"].astype(int)
    fig = px.line(profile, x="hour", y=["optional_excluded", "required_busy"],
                  labels={"hour": "Hour", "value": "Busy"}, line_shape="hv")
    st.plotly_chart(fig, use_container_width=True)
else:
    st.info("Add some events, describe the meeting and click **Find Meeting Times**.")
