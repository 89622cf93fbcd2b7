from typing import Optional
import redis.asyncio as redis
from hsync.db.base import EventRepository

# Global runtime state initialized in hsync.lifespan
redis_client: Optional[redis.Redis] = None
repository: Optional[EventRepository] = None
