"""Redis-backed event store.

Layout per event::

    {prefix}:event:{id}               JSON event metadata (geometry inputs only)
    {prefix}:event:{id}:participants  hash of normalized name -> JSON {name, slots}

A save writes one hash field, so concurrent saves by different
participants never interfere. Reads fetch both keys in one MULTI/EXEC
pipeline to get a consistent snapshot.
"""

import json
import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

import redis.asyncio as redis

from hsync.db.base import EventRepository
from hsync.errors import NotFoundError
from hsync.scheduling import availability
from hsync.scheduling.events import Event, Participant

_logger = logging.getLogger("hsync.store")


def event_to_record(event: Event) -> dict[str, Any]:
    return {
        "id": event.id,
        "title": event.title,
        "dates": [d.isoformat() for d in event.dates],
        "start_time_minutes": event.start_time_minutes,
        "end_time_minutes": event.end_time_minutes,
        "slot_minutes": event.slot_minutes,
        "created_at": event.created_at.isoformat(),
    }


def event_from_record(record: dict[str, Any], participants: dict[str, Participant] | None = None) -> Event:
    return Event(
        id=record["id"],
        title=record["title"],
        dates=[date.fromisoformat(d) for d in record["dates"]],
        start_time_minutes=record["start_time_minutes"],
        end_time_minutes=record["end_time_minutes"],
        slot_minutes=record["slot_minutes"],
        participants=participants or {},
        created_at=datetime.fromisoformat(record["created_at"]),
    )


def participant_to_json(participant: Participant) -> str:
    return json.dumps({"name": participant.name, "slots": sorted(participant.slots)})


def participant_from_json(raw: str) -> Participant:
    data = json.loads(raw)
    return Participant(name=data["name"], slots=frozenset(int(s) for s in data["slots"]))


class RedisEventRepository(EventRepository):
    backend = "redis"

    def __init__(
        self,
        redis_client: redis.Redis,
        key_prefix: str = "hsync",
        event_ttl_sec: int = 0,
        max_days: int | None = None,
    ) -> None:
        super().__init__(event_ttl_sec=event_ttl_sec, max_days=max_days)
        self.redis_client = redis_client
        self.key_prefix = key_prefix

    def event_key(self, event_id: str) -> str:
        return f"{self.key_prefix}:event:{event_id}"

    def participants_key(self, event_id: str) -> str:
        return f"{self.event_key(event_id)}:participants"

    async def _insert(self, event: Event) -> bool:
        stored = await self.redis_client.set(
            self.event_key(event.id),
            json.dumps(event_to_record(event)),
            nx=True,
            ex=self.event_ttl_sec or None,
        )
        return bool(stored)

    async def _load(self, event_id: str) -> Event | None:
        async with self.redis_client.pipeline(transaction=True) as pipe:
            pipe.get(self.event_key(event_id))
            pipe.hgetall(self.participants_key(event_id))
            raw_event, raw_participants = await pipe.execute()
        if raw_event is None:
            return None
        participants = {key: participant_from_json(value) for key, value in raw_participants.items()}
        return event_from_record(json.loads(raw_event), participants)

    async def upsert_participant(self, event_id: str, raw_name, values: Iterable) -> Participant:
        raw_event = await self.redis_client.get(self.event_key(event_id))
        if raw_event is None:
            raise NotFoundError(detail="Event not found.", event_id=event_id)
        event = event_from_record(json.loads(raw_event))
        name = availability.clean_name(raw_name)
        participant = Participant(name=name, slots=availability.clean_slots(event, values))

        async with self.redis_client.pipeline(transaction=True) as pipe:
            pipe.hset(
                self.participants_key(event_id),
                availability.normalize_name(name),
                participant_to_json(participant),
            )
            if self.event_ttl_sec:
                pipe.expire(self.event_key(event_id), self.event_ttl_sec)
                pipe.expire(self.participants_key(event_id), self.event_ttl_sec)
            await pipe.execute()
        _logger.debug("Stored %d slots for key=%s event=%s", len(participant.slots), availability.normalize_name(name), event_id)
        return participant

    async def ping(self) -> bool:
        try:
            await self.redis_client.ping()
            return True
        except Exception as e:
            _logger.warning("Redis ping failed: %s", e)
            return False
