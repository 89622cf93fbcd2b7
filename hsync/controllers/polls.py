import logging
from datetime import datetime
from typing import Any, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import APIRouter
from pydantic import Field

from hsync.config import get_settings
from hsync.dependencies import Repository
from hsync.errors import ValidationError
from hsync.models.calendar import CalendarItem
from hsync.models.polls import (
    AvailabilitySaved,
    BestSlot,
    CalendarWindow,
    CamelModel,
    EventCreated,
    EventResponse,
    Grid,
    Overlay,
    ParticipantSummary,
    RangeSelection,
)
from hsync.scheduling import geometry
from hsync.scheduling.aggregation import aggregate, heat_levels, rank_best_slots
from hsync.scheduling.availability import participants_in_order
from hsync.scheduling.calendar import intervals_from_calendar_items, to_wall_clock
from hsync.scheduling.events import Event
from hsync.scheduling.overlap import BusyInterval, busy_slots

logger = logging.getLogger("hsync.polls")
router = APIRouter()


class CreateEventRequest(CamelModel):
    title: str
    start_date: str
    end_date: str
    start_time: str
    end_time: str
    slot_minutes: int


class AvailabilityRequest(CamelModel):
    participant_name: str
    slots: List[Any]


class RangeRequest(CamelModel):
    day_index: int
    from_time: str = Field(alias="from")
    to_time: str = Field(alias="to")


class IntervalModel(CamelModel):
    start: datetime
    end: datetime


class OverlayRequest(CamelModel):
    intervals: List[IntervalModel] = []
    items: List[CalendarItem] = []
    time_zone: Optional[str] = None


def build_event_response(event: Event, limit: int) -> EventResponse:
    grid = aggregate(event)
    times = geometry.time_labels(event)
    dates = [d.isoformat() for d in event.dates]
    best = rank_best_slots(grid, limit)
    window_start, window_end = geometry.calendar_window(event)
    return EventResponse(
        id=event.id,
        title=event.title,
        dates=dates,
        times=times,
        slot_minutes=event.slot_minutes,
        start_time_minutes=event.start_time_minutes,
        end_time_minutes=event.end_time_minutes,
        grid=Grid(
            aggregate=grid.aggregate,
            who=grid.who,
            max_count=grid.max_count,
            slots_per_day=grid.slots_per_day,
            levels=heat_levels(grid),
        ),
        participants=[ParticipantSummary(name=p.name) for p in participants_in_order(event)],
        best_slots=[
            BestSlot(
                day_index=slot.day_index,
                row_index=slot.row_index,
                count=slot.count,
                names=list(slot.names),
                date=dates[slot.day_index],
                time=times[slot.row_index],
            )
            for slot in best
        ],
        has_availability=bool(best),
        calendar_window=CalendarWindow(start=window_start, end=window_end),
    )


def _zone(name: Optional[str]) -> Optional[ZoneInfo]:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise ValidationError(detail=f"Unknown time zone: {name}", field="timeZone") from None


def _minutes(text: str, field: str) -> int:
    try:
        return geometry.parse_time(text)
    except ValueError:
        raise ValidationError(detail=f"Invalid time format: {text}", field=field) from None


@router.post("/events", status_code=201, response_model=EventCreated)
async def create_event(req: CreateEventRequest, repo: Repository) -> EventCreated:
    logger.info(
        "POST /events title=%s dates=%s..%s window=%s-%s slot=%s",
        req.title, req.start_date, req.end_date, req.start_time, req.end_time, req.slot_minutes,
    )
    event = await repo.create(
        title=req.title,
        start_date=req.start_date,
        end_date=req.end_date,
        start_time=req.start_time,
        end_time=req.end_time,
        slot_minutes=req.slot_minutes,
    )
    logger.info("Created event id=%s days=%d slots_per_day=%d", event.id, len(event.dates), event.slots_per_day)
    return EventCreated(id=event.id)


@router.get("/events/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, repo: Repository) -> EventResponse:
    logger.info("GET /events/%s", event_id)
    event = await repo.get(event_id)
    response = build_event_response(event, get_settings().polls.best_slots_limit)
    logger.info(
        "Returning event %s with %d participants max_count=%d",
        event_id, len(response.participants), response.grid.max_count,
    )
    return response


@router.post("/events/{event_id}/availability", response_model=AvailabilitySaved)
async def save_availability(event_id: str, req: AvailabilityRequest, repo: Repository) -> AvailabilitySaved:
    logger.info("POST /events/%s/availability slots=%d", event_id, len(req.slots))
    participant = await repo.upsert_participant(event_id, req.participant_name, req.slots)
    dropped = len(req.slots) - len(participant.slots)
    if dropped:
        logger.info("Dropped %d unusable slot values for %s on event %s", dropped, participant.name, event_id)
    logger.info("Updated availability for %s on event %s", participant.name, event_id)
    return AvailabilitySaved(name=participant.name, slots=sorted(participant.slots))


@router.post("/events/{event_id}/range", response_model=RangeSelection)
async def select_range(event_id: str, req: RangeRequest, repo: Repository) -> RangeSelection:
    logger.info("POST /events/%s/range day=%d %s-%s", event_id, req.day_index, req.from_time, req.to_time)
    event = await repo.get(event_id)
    slots = geometry.slots_for_range(
        event,
        req.day_index,
        _minutes(req.from_time, "from"),
        _minutes(req.to_time, "to"),
    )
    return RangeSelection(slots=slots)


@router.post("/events/{event_id}/overlay", response_model=Overlay)
async def calendar_overlay(event_id: str, req: OverlayRequest, repo: Repository) -> Overlay:
    logger.info("POST /events/%s/overlay intervals=%d items=%d", event_id, len(req.intervals), len(req.items))
    tz = _zone(req.time_zone)
    event = await repo.get(event_id)
    intervals = [
        BusyInterval(start=to_wall_clock(iv.start, tz), end=to_wall_clock(iv.end, tz))
        for iv in req.intervals
    ]
    intervals.extend(intervals_from_calendar_items(req.items, tz))
    busy = busy_slots(event, intervals)
    logger.info("Overlay for event %s marks %d of %d slots busy", event_id, len(busy), event.total_slots)
    return Overlay(busy_slots=sorted(busy), interval_count=len(intervals))
