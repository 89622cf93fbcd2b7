"""Tests for startup/shutdown and dependency wiring."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from hsync import state
from hsync.db.memory import MemoryEventRepository
from hsync.db.redis_store import RedisEventRepository
from hsync.errors import ServiceUnavailableError


def _settings(backend="memory", ttl=0):
    settings = MagicMock()
    settings.store.backend = backend
    settings.store.key_prefix = "hs"
    settings.store.event_ttl_sec = ttl
    settings.polls.max_days = 31
    settings.redis.host = "localhost"
    settings.redis.port = 6379
    settings.redis.password = ""
    settings.redis.max_connections = 10
    settings.redis.pool_timeout_sec = 5.0
    settings.redis.health_check_interval = 30
    settings.redis.socket_timeout = 5.0
    settings.redis.socket_connect_timeout = 5.0
    settings.redis.retry_on_timeout = True
    return settings


class TestLifespanResources:
    """Test LifespanResources dataclass."""

    def test_defaults(self):
        from hsync.lifespan import LifespanResources

        resources = LifespanResources()
        assert resources.redis_client is None
        assert resources.repository is None


class TestInitRepository:
    """Backend selection."""

    def test_memory_backend(self):
        from hsync.lifespan import init_repository

        with patch("hsync.lifespan.get_settings", return_value=_settings("memory", ttl=30)):
            repo = init_repository()
        assert isinstance(repo, MemoryEventRepository)
        assert repo.event_ttl_sec == 30
        assert repo.max_days == 31

    def test_redis_backend(self, fake_redis):
        from hsync.lifespan import init_repository

        with patch("hsync.lifespan.get_settings", return_value=_settings("redis")):
            repo = init_repository(fake_redis)
        assert isinstance(repo, RedisEventRepository)
        assert repo.key_prefix == "hs"
        assert repo.redis_client is fake_redis

    def test_redis_backend_requires_client(self):
        from hsync.lifespan import init_repository

        with patch("hsync.lifespan.get_settings", return_value=_settings("redis")):
            with pytest.raises(RuntimeError):
                init_repository()


class TestInitRedis:
    """Test init_redis function."""

    @pytest.mark.asyncio
    async def test_init_redis_creates_client(self):
        from hsync.lifespan import init_redis

        mock_redis_class = MagicMock()
        mock_client = MagicMock(spec=["ping"])
        mock_redis_class.return_value = mock_client

        with patch("hsync.lifespan.redis.Redis", mock_redis_class):
            with patch("hsync.lifespan.get_settings", return_value=_settings("redis")):
                result = await init_redis()

        assert result is mock_client
        mock_redis_class.assert_called_once()


class TestSetupAndCleanup:
    """Resources are published to and cleared from hsync.state."""

    @pytest.mark.asyncio
    async def test_memory_setup_and_cleanup(self):
        from hsync.lifespan import cleanup_resources, setup_resources

        with patch("hsync.lifespan.get_settings", return_value=_settings("memory")):
            resources = await setup_resources()
        assert resources.redis_client is None
        assert state.repository is resources.repository
        assert state.redis_client is None

        await cleanup_resources(resources)
        assert state.repository is None

    @pytest.mark.asyncio
    async def test_redis_setup_and_cleanup(self, fake_redis):
        from hsync.lifespan import cleanup_resources, setup_resources

        with patch("hsync.lifespan.get_settings", return_value=_settings("redis")):
            with patch("hsync.lifespan.init_redis", AsyncMock(return_value=fake_redis)):
                resources = await setup_resources()
        assert isinstance(state.repository, RedisEventRepository)
        assert state.redis_client is fake_redis

        await cleanup_resources(resources)
        assert state.redis_client is None
        assert state.repository is None


class TestDependencies:
    """FastAPI dependencies read hsync.state."""

    def test_get_repository_returns_repository(self):
        from hsync.dependencies import get_repository

        repo = MemoryEventRepository()
        with patch.object(state, "repository", repo):
            assert get_repository() is repo

    def test_get_repository_raises_when_uninitialized(self):
        from hsync.dependencies import get_repository

        with patch.object(state, "repository", None):
            with pytest.raises(ServiceUnavailableError) as exc_info:
                get_repository()
        assert "not initialized" in exc_info.value.detail

    def test_get_optional_redis(self):
        from hsync.dependencies import get_optional_redis

        with patch.object(state, "redis_client", None):
            assert get_optional_redis() is None
