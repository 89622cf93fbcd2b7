"""Application startup and shutdown.

``setup_resources`` builds the event repository selected by
``StoreSettings.backend`` (creating the Redis client when needed) and
publishes it through ``hsync.state``; ``cleanup_resources`` undoes that.
"""

import logging
from dataclasses import dataclass

import redis.asyncio as redis
from redis.asyncio import BlockingConnectionPool as RedisConnectionPool

from hsync import state
from hsync.config import get_settings
from hsync.db.base import EventRepository
from hsync.db.memory import MemoryEventRepository
from hsync.db.redis_store import RedisEventRepository

logger = logging.getLogger(__name__)


@dataclass
class LifespanResources:
    """Container for resources initialized during lifespan."""

    redis_client: redis.Redis | None = None
    repository: EventRepository | None = None


async def init_redis() -> redis.Redis:
    """Initialize Redis connection with connection pool.

    Returns:
        Configured Redis client.
    """
    settings = get_settings()

    redis_pool = RedisConnectionPool(
        host=settings.redis.host,
        port=settings.redis.port,
        password=settings.redis.password if settings.redis.password else None,
        max_connections=settings.redis.max_connections,
        timeout=settings.redis.pool_timeout_sec,
        health_check_interval=settings.redis.health_check_interval,
        socket_timeout=settings.redis.socket_timeout,
        socket_connect_timeout=settings.redis.socket_connect_timeout,
        retry_on_timeout=settings.redis.retry_on_timeout,
        decode_responses=True,
    )

    candidate_client = redis.Redis(connection_pool=redis_pool, decode_responses=True)
    if hasattr(candidate_client, "__await__"):
        return await candidate_client
    return candidate_client


def init_repository(redis_client: redis.Redis | None = None) -> EventRepository:
    """Build the configured event repository.

    Args:
        redis_client: Client for the Redis backend; required when it is selected.
    """
    settings = get_settings()
    store = settings.store
    if store.backend == "redis":
        if redis_client is None:
            raise RuntimeError("Redis backend selected without a Redis client")
        return RedisEventRepository(
            redis_client,
            key_prefix=store.key_prefix,
            event_ttl_sec=store.event_ttl_sec,
            max_days=settings.polls.max_days,
        )
    return MemoryEventRepository(
        event_ttl_sec=store.event_ttl_sec,
        max_days=settings.polls.max_days,
    )


async def setup_resources() -> LifespanResources:
    """Set up the event store and publish it to ``hsync.state``."""
    settings = get_settings()
    resources = LifespanResources()

    if settings.store.backend == "redis":
        resources.redis_client = await init_redis()
    resources.repository = init_repository(resources.redis_client)
    logger.info(
        "Event store ready backend=%s ttl_sec=%d",
        resources.repository.backend,
        settings.store.event_ttl_sec,
    )

    state.redis_client = resources.redis_client
    state.repository = resources.repository
    return resources


async def cleanup_resources(resources: LifespanResources) -> None:
    """Close connections and clear ``hsync.state``."""
    if resources.repository is not None:
        await resources.repository.close()

    if resources.redis_client:
        aclose = getattr(resources.redis_client, "aclose", None)
        if callable(aclose):
            await aclose()
        else:
            close = getattr(resources.redis_client, "close", None)
            if callable(close):
                await close()

    state.redis_client = None
    state.repository = None
