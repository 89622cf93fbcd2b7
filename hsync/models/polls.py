from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EventCreated(CamelModel):
    id: str


class Grid(CamelModel):
    aggregate: list[list[int]]
    who: list[list[list[str]]]
    max_count: int
    slots_per_day: int
    levels: list[list[int]]


class ParticipantSummary(CamelModel):
    name: str


class BestSlot(CamelModel):
    day_index: int
    row_index: int
    count: int
    names: list[str]
    date: str
    time: str


class CalendarWindow(CamelModel):
    start: datetime
    end: datetime


class EventResponse(CamelModel):
    id: str
    title: str
    dates: list[str]
    times: list[str]
    slot_minutes: int
    start_time_minutes: int
    end_time_minutes: int
    grid: Grid
    participants: list[ParticipantSummary]
    best_slots: list[BestSlot]
    has_availability: bool
    calendar_window: CalendarWindow


class AvailabilitySaved(CamelModel):
    ok: bool = True
    name: str
    slots: list[int]


class RangeSelection(CamelModel):
    slots: list[int]


class Overlay(CamelModel):
    busy_slots: list[int]
    interval_count: int
