"""
Cache Manager Tests

Unit tests for lifecycle, health and statistics of the cache manager.
"""

import pytest
import pytest_asyncio

from spotcache.infrastructure.memory.ttl_store import ShardedTTLStore
from spotcache.services.cache.cache_manager import CacheManager, cache_manager


@pytest_asyncio.fixture
async def manager(clock, test_settings):
    """Create a cache manager with its own store."""
    store = ShardedTTLStore(shard_count=4, sweep_interval_seconds=60, clock=clock)
    instance = CacheManager(store=store, settings=test_settings)
    yield instance
    await instance.close()


class TestCacheManagerLifecycle:
    """Test cases for CacheManager lifecycle."""

    def test_global_instance_is_not_started(self):
        """Test importing the module starts nothing."""
        assert isinstance(cache_manager, CacheManager)
        assert cache_manager.store.is_running is False

    @pytest.mark.asyncio
    async def test_initialize_and_close(self, manager):
        """Test initialize starts the sweep and close stops it."""
        await manager.initialize()
        await manager.initialize()
        assert manager.store.is_running is True

        await manager.close()
        assert manager.store.is_running is False
        assert manager.store.is_closed is True

    @pytest.mark.asyncio
    async def test_context_manager(self, clock, test_settings):
        """Test async context manager usage."""
        store = ShardedTTLStore(shard_count=1, sweep_interval_seconds=60, clock=clock)
        async with CacheManager(store=store, settings=test_settings) as manager:
            assert manager.store.is_running is True

        assert store.is_closed is True

    @pytest.mark.asyncio
    async def test_facades_share_the_store(self, manager, sample_spots):
        """Test spot and favorites facades write to one store."""
        await manager.spots.set_spot(sample_spots[0])
        await manager.favorites.set_favorite_status(7, 1, True)

        assert await manager.store.count() == 2


class TestCacheManagerHealth:
    """Test cases for health and statistics."""

    @pytest.mark.asyncio
    async def test_healthy_when_running(self, manager):
        """Test healthy status with a running sweep."""
        await manager.initialize()

        health = await manager.health_check()

        assert health["status"] == "healthy"
        assert health["cache_manager"]["initialized"] is True
        assert health["cache_manager"]["sweeper_running"] is True
        assert health["cache_manager"]["default_ttls"] == {
            "spot": 1800,
            "area": 900,
            "media": 3600,
        }

    @pytest.mark.asyncio
    async def test_unhealthy_when_closed(self, manager):
        """Test unhealthy status after close."""
        await manager.initialize()
        await manager.close()

        health = await manager.health_check()
        assert health["status"] == "unhealthy"

    @pytest.mark.asyncio
    async def test_statistics(self, manager, sample_spots):
        """Test statistics reflect store traffic."""
        await manager.spots.set_spot(sample_spots[0])
        await manager.spots.get_spot(1)
        await manager.spots.get_spot(2)

        stats = await manager.get_cache_statistics()

        assert stats["entries"] == 1
        assert stats["hits"] == 1
        assert stats["misses"] == 1
        assert stats["hit_ratio"] == 0.5
        assert "timestamp" in stats

    @pytest.mark.asyncio
    async def test_cleanup_expired_entries(self, manager, sample_spots, clock):
        """Test on-demand sweep."""
        await manager.spots.set_spots_in_area(43.3, 5.4, 10, sample_spots)
        clock.advance(900)

        assert await manager.cleanup_expired_entries() == 4
        assert await manager.store.count() == 0

    @pytest.mark.asyncio
    async def test_invalidation_shortcuts(self, manager, sample_spots, sample_media):
        """Test invalidation entry points."""
        await manager.spots.set_spots_in_area(43.3, 5.4, 10, sample_spots)
        await manager.spots.set_spot_media(1, sample_media)

        assert await manager.invalidate_spot(1) == 2
        assert await manager.invalidate_area(43.3, 5.4, 10) == 1
        assert await manager.clear_all() == 2
