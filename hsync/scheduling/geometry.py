"""Slot geometry: mapping between calendar time and the flat slot index space.

A slot index encodes ``(day_index, row_index)`` day-major::

    index = day_index * slots_per_day + row_index

``encode`` and ``decode`` below are the only places that arithmetic lives;
the store, the aggregation engine, the range helper and the overlay
matcher all go through them.

The functions accept any object with ``dates``, ``start_time_minutes``,
``end_time_minutes`` and ``slot_minutes`` attributes (normally an
``hsync.scheduling.events.Event``). Times are naive wall-clock values;
no timezone conversion happens here.
"""

import re
from datetime import date, datetime, time, timedelta

from hsync.errors import ValidationError

MINUTES_PER_DAY = 1440

TIME_RE = re.compile(r"^(?:(?:[01]\d|2[0-3]):[0-5]\d|24:00)$")


class SlotIndexError(ValueError):
    """A slot index outside the event's grid reached code that requires a valid one."""


def parse_time(text: str) -> int:
    """Parse a 24-hour ``HH:MM`` string into minutes since midnight."""
    if not isinstance(text, str) or not TIME_RE.match(text.strip()):
        raise ValueError(f"invalid time format: {text!r}")
    hours, minutes = text.strip().split(":")
    return int(hours) * 60 + int(minutes)


def format_time(minutes: int) -> str:
    """Render minutes since midnight as a 12-hour label such as ``9:30 AM``."""
    hours, mins = divmod(minutes, 60)
    suffix = "PM" if hours % 24 >= 12 else "AM"
    hours = hours % 12
    if hours == 0:
        hours = 12
    return f"{hours}:{mins:02d} {suffix}"


def date_range(start: date, end: date) -> list[date]:
    """Every calendar date from ``start`` to ``end`` inclusive."""
    days = (end - start).days
    return [start + timedelta(days=i) for i in range(days + 1)]


def slots_per_day(event) -> int:
    return (event.end_time_minutes - event.start_time_minutes) // event.slot_minutes


def total_slots(event) -> int:
    return len(event.dates) * slots_per_day(event)


def encode(day_index: int, row: int, per_day: int) -> int:
    return day_index * per_day + row


def decode(index: int, per_day: int, days: int | None = None) -> tuple[int, int]:
    """Split a slot index into ``(day_index, row)``.

    Negative indices are always rejected; when ``days`` is given, indices past
    the last slot of the last day are rejected too.
    """
    if index < 0 or (days is not None and index >= days * per_day):
        raise SlotIndexError(f"slot index {index} outside grid of {days} x {per_day}")
    return index // per_day, index % per_day


def row_start_minutes(event, row: int) -> int:
    return event.start_time_minutes + row * event.slot_minutes


def _at(day: date, minutes: int) -> datetime:
    # 24:00 rolls over to midnight of the next day
    return datetime.combine(day, time()) + timedelta(minutes=minutes)


def slot_time_range(event, day_index: int, row: int) -> tuple[datetime, datetime]:
    """Naive start and end instants of one slot."""
    start = row_start_minutes(event, row)
    day = event.dates[day_index]
    return _at(day, start), _at(day, start + event.slot_minutes)


def row_for_minutes(event, minutes: int) -> int:
    """Row containing ``minutes``, clamped to the daily window."""
    raw = (minutes - event.start_time_minutes) // event.slot_minutes
    return max(0, min(slots_per_day(event) - 1, raw))


def slots_for_range(event, day_index: int, from_minutes: int, to_minutes: int) -> list[int]:
    """Slot indices covering ``[from_minutes, to_minutes)`` on one day.

    A range reaching outside the daily window is truncated to the window's
    edges instead of being rejected.
    """
    if not 0 <= day_index < len(event.dates):
        raise ValidationError(detail="Unknown day", day_index=day_index)
    if to_minutes <= from_minutes:
        raise ValidationError(detail="End time must be after start time.")
    per_day = slots_per_day(event)
    first = row_for_minutes(event, from_minutes)
    last = row_for_minutes(event, to_minutes - 1)
    return [encode(day_index, row, per_day) for row in range(first, last + 1)]


def time_labels(event) -> list[str]:
    return [format_time(row_start_minutes(event, row)) for row in range(slots_per_day(event))]


def calendar_window(event) -> tuple[datetime, datetime]:
    """The span a calendar collaborator has to be queried for."""
    return (
        _at(event.dates[0], event.start_time_minutes),
        _at(event.dates[-1], event.end_time_minutes),
    )
