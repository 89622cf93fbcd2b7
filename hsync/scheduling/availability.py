"""Participant bookkeeping for one event.

The normalized name is the participant's identity: ``"Alice"`` and
``" alice "`` are the same person, and saving again replaces the previous
selection outright. Slot values that do not fit the event's grid are
dropped silently so that a client holding stale geometry loses only the
stale selections.
"""

import re
from collections.abc import Iterable

from hsync.errors import ValidationError
from hsync.scheduling.events import Event, Participant

MAX_NAME_LENGTH = 100
# ASCII digits only; longer strings cannot name a slot in any grid
INDEX_RE = re.compile(r"-?[0-9]{1,18}")


def normalize_name(raw: str) -> str:
    return raw.strip().lower()


def clean_name(raw) -> str:
    name = raw.strip() if isinstance(raw, str) else ""
    if not name:
        raise ValidationError(detail="Name is required.", field="participantName")
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(
            detail=f"Name must be at most {MAX_NAME_LENGTH} characters.",
            field="participantName",
        )
    return name


def _as_index(value) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        text = value.strip()
        if INDEX_RE.fullmatch(text):
            return int(text)
    return None


def clean_slots(event: Event, values: Iterable) -> frozenset[int]:
    """Keep the values that are integer slot indices inside the event's grid."""
    limit = event.total_slots
    kept = set()
    for value in values:
        index = _as_index(value)
        if index is not None and 0 <= index < limit:
            kept.add(index)
    return frozenset(kept)


def upsert(event: Event, raw_name, values: Iterable) -> Participant:
    """Store ``values`` as the full selection of ``raw_name``; last write wins."""
    name = clean_name(raw_name)
    participant = Participant(name=name, slots=clean_slots(event, values))
    event.participants[normalize_name(name)] = participant
    return participant


def participants_in_order(event: Event) -> list[Participant]:
    return [event.participants[key] for key in sorted(event.participants)]
