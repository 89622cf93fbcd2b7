"""Adapter from Google Calendar ``events.list`` items to busy intervals.

Timed items carry ``start.dateTime``/``end.dateTime``; all-day items carry
``start.date``/``end.date`` and cover ``00:00:00`` of their start date to
``23:59:59`` of their end date. Items missing either bound are skipped.
Aware timestamps are moved into ``tz`` (when given) and then stripped to
naive wall-clock values so they compare with the poll's slot times.
"""

import logging
from datetime import datetime, time, tzinfo
from typing import Iterable, Optional

from hsync.models.calendar import CalendarBound, CalendarItem
from hsync.scheduling.overlap import BusyInterval

logger = logging.getLogger("hsync.calendar")

ALL_DAY_START = time(0, 0, 0)
ALL_DAY_END = time(23, 59, 59)


def to_wall_clock(value: datetime, tz: tzinfo | None = None) -> datetime:
    if value.tzinfo is None:
        return value
    if tz is not None:
        value = value.astimezone(tz)
    return value.replace(tzinfo=None)


def _bound(value: Optional[CalendarBound], all_day_time: time, tz: tzinfo | None) -> datetime | None:
    if value is None:
        return None
    if value.date_time is not None:
        return to_wall_clock(value.date_time, tz)
    if value.day is not None:
        return datetime.combine(value.day, all_day_time)
    return None


def intervals_from_calendar_items(
    items: Iterable[CalendarItem],
    tz: tzinfo | None = None,
) -> list[BusyInterval]:
    intervals: list[BusyInterval] = []
    for item in items:
        start = _bound(item.start, ALL_DAY_START, tz)
        end = _bound(item.end, ALL_DAY_END, tz)
        if start is None or end is None:
            logger.debug("Skipping calendar item without both bounds id=%s", item.id)
            continue
        intervals.append(BusyInterval(start=start, end=end))
    return intervals
