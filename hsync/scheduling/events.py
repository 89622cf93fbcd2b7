import secrets
import string
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime

from hsync.errors import ValidationError
from hsync.scheduling import geometry

MAX_TITLE_LENGTH = 200


@dataclass(frozen=True)
class Participant:
    name: str
    slots: frozenset[int] = frozenset()


@dataclass
class Event:
    """A poll over ``dates`` x the daily window, cut into ``slot_minutes`` slots.

    Only the geometry inputs are stored; slots per day and row/day indices
    are re-derived through ``hsync.scheduling.geometry`` on every read.
    ``participants`` is keyed by the normalized participant name.
    """

    id: str
    title: str
    dates: list[date]
    start_time_minutes: int
    end_time_minutes: int
    slot_minutes: int
    participants: dict[str, Participant] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def slots_per_day(self) -> int:
        return geometry.slots_per_day(self)

    @property
    def total_slots(self) -> int:
        return geometry.total_slots(self)

    def snapshot(self) -> "Event":
        """Copy with its own participant map; participants themselves are immutable."""
        return replace(self, dates=list(self.dates), participants=dict(self.participants))


def generate_event_id(length: int = 10) -> str:
    chars = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(chars) for _ in range(length))


def _parse_date(value, label: str) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError(detail="Invalid date range.", field=label) from None


def _parse_time(value, label: str) -> int:
    try:
        return geometry.parse_time(value)
    except ValueError:
        raise ValidationError(detail=f"Invalid {label}.", field=label) from None


def _parse_slot_minutes(value) -> int:
    if isinstance(value, bool):
        raise ValidationError(detail="Invalid slot length.")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or value <= 0:
        raise ValidationError(detail="Invalid slot length.")
    return value


def build_event(
    title: str,
    start_date,
    end_date,
    start_time: str,
    end_time: str,
    slot_minutes,
    event_id: str | None = None,
    max_days: int | None = None,
) -> Event:
    """Validate create-event input and derive the stored event.

    Raises:
        ValidationError: blank title, inverted or unparseable dates, a range
            longer than ``max_days``, bad times, a non-positive slot length,
            or a window too short to hold a single slot.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationError(detail="Title is required.", field="title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationError(detail=f"Title must be at most {MAX_TITLE_LENGTH} characters.", field="title")

    first = _parse_date(start_date, "startDate")
    last = _parse_date(end_date, "endDate")
    if first > last:
        raise ValidationError(detail="Invalid date range.", start_date=first.isoformat(), end_date=last.isoformat())
    span = (last - first).days + 1
    if max_days is not None and span > max_days:
        raise ValidationError(detail=f"Date range may span at most {max_days} days.", days=span)
    dates = geometry.date_range(first, last)

    start_minutes = _parse_time(start_time, "startTime")
    end_minutes = _parse_time(end_time, "endTime")
    if start_minutes >= end_minutes:
        raise ValidationError(detail="Invalid time range.", start_time=start_time, end_time=end_time)

    slot_length = _parse_slot_minutes(slot_minutes)
    if (end_minutes - start_minutes) // slot_length <= 0:
        raise ValidationError(detail="Invalid time range.", slot_minutes=slot_length)

    return Event(
        id=event_id or generate_event_id(),
        title=title,
        dates=dates,
        start_time_minutes=start_minutes,
        end_time_minutes=end_minutes,
        slot_minutes=slot_length,
    )
