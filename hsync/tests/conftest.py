import os
import sys
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
import fakeredis.aioredis as fakeredis

import hsync.lifespan as lifespan
import hsync.main as main
from hsync.config import clear_settings_cache
from hsync.scheduling import geometry
from hsync.scheduling.events import Event


class _AwaitableRedis:
    def __init__(self, client):
        self._client = client

    def __await__(self):
        async def _coro():
            return self._client

        return _coro().__await__()


@pytest.fixture(autouse=True)
def _fresh_settings():
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setenv("STORE_BACKEND", "memory")
    clear_settings_cache()
    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def redis_client_app(monkeypatch):
    fake = fakeredis.FakeRedis(decode_responses=True)

    def fake_redis_constructor(*_args, **_kwargs):
        return _AwaitableRedis(fake)

    monkeypatch.setenv("STORE_BACKEND", "redis")
    clear_settings_cache()
    monkeypatch.setattr(lifespan.redis, "Redis", fake_redis_constructor)

    with TestClient(main.app) as c:
        yield c


@pytest.fixture
def fake_redis():
    return fakeredis.FakeRedis(decode_responses=True)


def make_event(days=2, start="09:00", end="10:00", slot_minutes=30, first=date(2026, 3, 2)):
    """Event with ``days`` consecutive dates from ``first``; geometry only."""
    dates = geometry.date_range(first, first + timedelta(days=days - 1))
    return Event(
        id="evt",
        title="Planning",
        dates=dates,
        start_time_minutes=geometry.parse_time(start),
        end_time_minutes=geometry.parse_time(end),
        slot_minutes=slot_minutes,
    )


@pytest.fixture
def event_factory():
    return make_event
