"""Time-of-day window over the trip log."""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

from bikeflow.data.models import Trip

UNFILTERED = -1
MINUTES_PER_DAY = 24 * 60
MAX_CURSOR = MINUTES_PER_DAY - 1
WINDOW_MINUTES = 60
ANY_TIME_LABEL = "Any time"


def minutes_since_midnight(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute


def is_unfiltered(cursor: int) -> bool:
    return cursor == UNFILTERED


def normalize_cursor(value: int | str) -> int:
    """Coerce a slider value to a cursor.

    Negative values mean "any time"; values past the end of the day clamp
    to 23:59. Non-integer input raises ValueError.
    """
    if isinstance(value, bool):
        raise ValueError(f"Cursor must be an integer, got {value!r}")
    if isinstance(value, str):
        value = int(value.strip())
    elif not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise ValueError(f"Cursor must be an integer, got {value!r}")

    if value < 0:
        return UNFILTERED
    return min(value, MAX_CURSOR)


def format_time(minutes: int) -> str:
    """Format minutes since midnight as e.g. '9:30 PM'."""
    hours, mins = divmod(minutes % MINUTES_PER_DAY, 60)
    suffix = "AM" if hours < 12 else "PM"
    return f"{hours % 12 or 12}:{mins:02d} {suffix}"


def cursor_label(cursor: int) -> str:
    return ANY_TIME_LABEL if is_unfiltered(cursor) else format_time(cursor)


def _within_window(moment: datetime, cursor: int) -> bool:
    # Plain difference on minute-of-day; 23:50 and 00:05 are 1425 minutes apart.
    return abs(minutes_since_midnight(moment) - cursor) <= WINDOW_MINUTES


def filter_trips_by_time(trips: Sequence[Trip], cursor: int) -> Sequence[Trip]:
    """Trips that start or end within an hour of the cursor; all trips when unfiltered."""
    if is_unfiltered(cursor):
        return trips
    return [
        trip
        for trip in trips
        if _within_window(trip.started_at, cursor) or _within_window(trip.ended_at, cursor)
    ]


__all__ = [
    "ANY_TIME_LABEL",
    "MAX_CURSOR",
    "UNFILTERED",
    "WINDOW_MINUTES",
    "cursor_label",
    "filter_trips_by_time",
    "format_time",
    "is_unfiltered",
    "minutes_since_midnight",
    "normalize_cursor",
]
