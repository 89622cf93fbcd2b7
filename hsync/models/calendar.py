"""Typed shapes for Google Calendar ``events.list`` items.

Only the fields the overlay reads are declared; everything else in an item
is ignored.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from hsync.models.polls import CamelModel


class CalendarBound(CamelModel):
    """``start`` or ``end`` of an item: ``dateTime`` for timed items, ``date`` for all-day ones."""

    date_time: Optional[datetime] = None
    day: Optional[date] = Field(default=None, alias="date")
    time_zone: Optional[str] = None


class CalendarItem(CamelModel):
    id: Optional[str] = None
    summary: Optional[str] = None
    start: Optional[CalendarBound] = None
    end: Optional[CalendarBound] = None
