from fastapi import APIRouter
from typing import Dict

from hsync import state
from hsync.dependencies import OptionalRedis

router = APIRouter()


@router.get("/health")
async def health(redis_client: OptionalRedis) -> Dict[str, str]:
    repository = state.repository
    if repository is None:
        return {"status": "starting", "store": "uninitialized", "redis": "disabled"}

    redis_status = "disabled"
    if redis_client is not None:
        redis_status = "healthy" if await repository.ping() else "unhealthy"

    return {"status": "ok", "store": repository.backend, "redis": redis_status}
