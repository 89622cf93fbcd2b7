"""Dependency injection for FastAPI endpoints.

Controllers receive the event repository and the optional Redis client
through these dependencies instead of reading ``hsync.state`` directly.

Usage in controllers:
    from hsync.dependencies import Repository

    @router.get("/events/{event_id}")
    async def get_event(event_id: str, repo: Repository):
        return await repo.get(event_id)
"""

from typing import Annotated

import redis.asyncio as redis
from fastapi import Depends

from hsync import state
from hsync.db.base import EventRepository
from hsync.errors import ServiceUnavailableError


def get_repository() -> EventRepository:
    """Get the event repository.

    Raises:
        ServiceUnavailableError: If the store has not been initialized.

    Returns:
        The active EventRepository.
    """
    if state.repository is None:
        raise ServiceUnavailableError(detail="Event store not initialized")
    return state.repository


def get_optional_redis() -> redis.Redis | None:
    """Get the Redis client if the Redis backend is active, or None."""
    return state.redis_client


Repository = Annotated[EventRepository, Depends(get_repository)]
OptionalRedis = Annotated[redis.Redis | None, Depends(get_optional_redis)]
