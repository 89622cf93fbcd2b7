from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from hsync.scheduling import geometry


@dataclass(frozen=True)
class BusyInterval:
    start: datetime
    end: datetime


def overlaps(a_start, a_end, b_start, b_end) -> bool:
    """Half-open overlap test; intervals that only touch do not overlap."""
    return a_start < b_end and a_end > b_start


def busy_slots(event, intervals: Iterable[BusyInterval]) -> set[int]:
    """Indices of every slot that overlaps at least one busy interval.

    The result is an annotation for display; it is never written to the
    availability store.
    """
    intervals = list(intervals)
    busy: set[int] = set()
    if not intervals:
        return busy
    per_day = geometry.slots_per_day(event)
    for index in range(geometry.total_slots(event)):
        day, row = geometry.decode(index, per_day)
        start, end = geometry.slot_time_range(event, day, row)
        if any(overlaps(start, end, iv.start, iv.end) for iv in intervals):
            busy.add(index)
    return busy
