"""Repository interface shared by the storage backends.

Aggregation and geometry never touch storage directly; they work on the
``Event`` snapshots a repository hands out, so a backend can be swapped
without changing them.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import replace

from hsync.errors import NotFoundError
from hsync.scheduling.events import Event, Participant, build_event, generate_event_id

_logger = logging.getLogger("hsync.store")

ID_ATTEMPTS = 10


class EventRepository(ABC):
    backend: str = "abstract"

    def __init__(self, event_ttl_sec: int = 0, max_days: int | None = None) -> None:
        self.event_ttl_sec = event_ttl_sec
        self.max_days = max_days

    async def create(
        self,
        title: str,
        start_date,
        end_date,
        start_time: str,
        end_time: str,
        slot_minutes,
    ) -> Event:
        """Validate the input and store a new event under a fresh id.

        Raises:
            ValidationError: The input does not describe a usable poll.
            RuntimeError: No unused id was found.
        """
        event = build_event(
            title,
            start_date,
            end_date,
            start_time,
            end_time,
            slot_minutes,
            max_days=self.max_days,
        )
        for _ in range(ID_ATTEMPTS):
            if await self._insert(event):
                _logger.info("Stored event id=%s backend=%s", event.id, self.backend)
                return event
            event = replace(event, id=generate_event_id())
        raise RuntimeError("Failed to generate unique event ID")

    async def get(self, event_id: str) -> Event:
        """Consistent snapshot of one event and its participants.

        Raises:
            NotFoundError: No event is stored under ``event_id``.
        """
        event = await self._load(event_id)
        if event is None:
            raise NotFoundError(detail="Event not found.", event_id=event_id)
        return event

    @abstractmethod
    async def upsert_participant(self, event_id: str, raw_name, values: Iterable) -> Participant:
        """Replace the selection stored under the participant's normalized name.

        Raises:
            NotFoundError: No event is stored under ``event_id``.
            ValidationError: The name is blank.
        """

    @abstractmethod
    async def _insert(self, event: Event) -> bool:
        """Store ``event``; False when its id is already taken."""

    @abstractmethod
    async def _load(self, event_id: str) -> Event | None:
        ...

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        return
