"""Process-local event store.

All events live in one dict guarded by an ``asyncio.Lock``. Writers replace
a single participant entry under the lock and readers copy the participant
map under the same lock, so an aggregation never observes a half-written
selection.
"""

import asyncio
import logging
import time
from collections.abc import Callable, Iterable

from hsync.db.base import EventRepository
from hsync.errors import NotFoundError
from hsync.scheduling import availability
from hsync.scheduling.events import Event, Participant

_logger = logging.getLogger("hsync.store")


class MemoryEventRepository(EventRepository):
    backend = "memory"

    def __init__(
        self,
        event_ttl_sec: int = 0,
        max_days: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(event_ttl_sec=event_ttl_sec, max_days=max_days)
        self._events: dict[str, Event] = {}
        self._touched: dict[str, float] = {}
        self._lock = asyncio.Lock()
        self._clock = clock

    def __len__(self) -> int:
        return len(self._events)

    def _live(self, event_id: str) -> Event | None:
        event = self._events.get(event_id)
        if event is None:
            return None
        if self.event_ttl_sec and self._clock() - self._touched[event_id] > self.event_ttl_sec:
            del self._events[event_id]
            del self._touched[event_id]
            _logger.info("Expired event id=%s", event_id)
            return None
        return event

    def _purge_expired(self) -> None:
        for event_id in list(self._events):
            self._live(event_id)

    async def _insert(self, event: Event) -> bool:
        async with self._lock:
            if self.event_ttl_sec:
                self._purge_expired()
            if event.id in self._events:
                return False
            self._events[event.id] = event.snapshot()
            self._touched[event.id] = self._clock()
            return True

    async def _load(self, event_id: str) -> Event | None:
        async with self._lock:
            event = self._live(event_id)
            return event.snapshot() if event is not None else None

    async def upsert_participant(self, event_id: str, raw_name, values: Iterable) -> Participant:
        async with self._lock:
            event = self._live(event_id)
            if event is None:
                raise NotFoundError(detail="Event not found.", event_id=event_id)
            participant = availability.upsert(event, raw_name, values)
            self._touched[event_id] = self._clock()
            return participant
