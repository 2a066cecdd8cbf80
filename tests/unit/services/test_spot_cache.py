"""
Spot Cache Service Tests

Unit tests for the spot, area and media cache facade.
"""

import pytest
import pytest_asyncio

from spotcache.domain.cache.value_objects import TTL, CacheKey
from spotcache.services.cache.spot_cache import SpotCacheService


class TestSpotCacheService:
    """Test cases for SpotCacheService."""

    @pytest_asyncio.fixture
    async def spot_cache(self, store, test_settings):
        """Create spot cache service on the test store."""
        return SpotCacheService(store, settings=test_settings)

    @pytest.mark.asyncio
    async def test_default_ttls(self, spot_cache):
        """Test namespace TTLs come from settings."""
        assert spot_cache.spot_ttl == TTL.spot()
        assert spot_cache.area_ttl == TTL.area()
        assert spot_cache.media_ttl == TTL.media()

    @pytest.mark.asyncio
    async def test_spot_round_trip(self, spot_cache, sample_spots):
        """Test caching and reading a spot."""
        spot = sample_spots[0]
        await spot_cache.set_spot(spot)

        assert await spot_cache.get_spot(spot.id) is spot
        assert await spot_cache.get_spot(999) is None

    @pytest.mark.asyncio
    async def test_spot_default_ttl(self, spot_cache, sample_spots, clock):
        """Test spot lives 30 minutes by default."""
        await spot_cache.set_spot(sample_spots[0])

        clock.advance(1799)
        assert await spot_cache.get_spot(1) is not None
        clock.advance(1)
        assert await spot_cache.get_spot(1) is None

    @pytest.mark.asyncio
    async def test_spot_ttl_override(self, spot_cache, sample_spots, clock):
        """Test explicit TTL wins over the default."""
        await spot_cache.set_spot(sample_spots[0], ttl=TTL(10))
        clock.advance(10)

        assert await spot_cache.get_spot(1) is None

    @pytest.mark.asyncio
    async def test_blank_spot_id_is_a_miss(self, spot_cache, store, sample_media):
        """Test blank ids read as misses and writes are ignored."""
        assert await spot_cache.get_spot("") is None
        assert await spot_cache.get_spot("   ") is None
        assert await spot_cache.get_spot_media("") == []
        assert await spot_cache.remove_spot("") is False

        await spot_cache.set_spot_media("", sample_media)
        assert await store.count() == 0
        assert await spot_cache.invalidate_spot("") == 0

    @pytest.mark.asyncio
    async def test_set_none_spot_is_noop(self, spot_cache, store):
        """Test None spot is ignored."""
        await spot_cache.set_spot(None)

        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_remove_spot(self, spot_cache, sample_spots):
        """Test spot removal."""
        await spot_cache.set_spot(sample_spots[0])

        assert await spot_cache.remove_spot(1) is True
        assert await spot_cache.get_spot(1) is None
        assert await spot_cache.remove_spot(1) is False

    @pytest.mark.asyncio
    async def test_area_miss_returns_empty_list(self, spot_cache):
        """Test area miss."""
        assert await spot_cache.get_spots_in_area(43.3, 5.4, 10) == []

    @pytest.mark.asyncio
    async def test_area_round_trip_with_quantization(self, spot_cache, sample_spots):
        """Test nearby windows hit the same area entry."""
        await spot_cache.set_spots_in_area(43.29691, 5.38112, 10.04, sample_spots)

        spots = await spot_cache.get_spots_in_area(43.2969, 5.3811, 10.0)
        assert [spot.id for spot in spots] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_area_returns_copy(self, spot_cache, sample_spots):
        """Test callers cannot mutate the cached list."""
        await spot_cache.set_spots_in_area(43.3, 5.4, 10, sample_spots)

        spots = await spot_cache.get_spots_in_area(43.3, 5.4, 10)
        spots.clear()

        assert len(await spot_cache.get_spots_in_area(43.3, 5.4, 10)) == 3

    @pytest.mark.asyncio
    async def test_area_set_warms_spot_entries(self, spot_cache, sample_spots, clock):
        """Test each spot of an area is cached individually at the area TTL."""
        await spot_cache.set_spots_in_area(43.3, 5.4, 10, sample_spots)

        for spot in sample_spots:
            assert await spot_cache.get_spot(spot.id) is spot

        clock.advance(900)
        assert await spot_cache.get_spot(1) is None
        assert await spot_cache.get_spots_in_area(43.3, 5.4, 10) == []

    @pytest.mark.asyncio
    async def test_cached_empty_area(self, spot_cache, store):
        """Test an empty area result is cached."""
        await spot_cache.set_spots_in_area(0, 0, 1, [])

        assert await store.exists(CacheKey.area(0, 0, 1)) is True
        assert await spot_cache.get_spots_in_area(0, 0, 1) == []

    @pytest.mark.asyncio
    async def test_set_none_area_is_noop(self, spot_cache, store):
        """Test None area list is ignored."""
        await spot_cache.set_spots_in_area(0, 0, 1, None)

        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_media_order_preserved(self, spot_cache, sample_media):
        """Test media list is returned in stored order."""
        await spot_cache.set_spot_media(1, sample_media)

        media = await spot_cache.get_spot_media(1)
        assert [item.id for item in media] == [10, 11, 12]

    @pytest.mark.asyncio
    async def test_media_miss_and_ttl(self, spot_cache, sample_media, clock):
        """Test media miss and 60 minute default TTL."""
        assert await spot_cache.get_spot_media(1) == []

        await spot_cache.set_spot_media(1, sample_media)
        clock.advance(3599)
        assert len(await spot_cache.get_spot_media(1)) == 3
        clock.advance(1)
        assert await spot_cache.get_spot_media(1) == []

    @pytest.mark.asyncio
    async def test_set_none_media_is_noop(self, spot_cache, store):
        """Test None media list is ignored."""
        await spot_cache.set_spot_media(1, None)

        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_remove_spot_media(self, spot_cache, sample_media):
        """Test media removal."""
        await spot_cache.set_spot_media(1, sample_media)

        assert await spot_cache.remove_spot_media(1) is True
        assert await spot_cache.get_spot_media(1) == []

    @pytest.mark.asyncio
    async def test_invalidate_spot_cascades_to_media(
        self, spot_cache, sample_spots, sample_media
    ):
        """Test spot invalidation removes spot and media but keeps areas."""
        await spot_cache.set_spots_in_area(43.3, 5.4, 10, sample_spots)
        await spot_cache.set_spot_media(1, sample_media)

        removed = await spot_cache.invalidate_spot(1)

        assert removed == 2
        assert await spot_cache.get_spot(1) is None
        assert await spot_cache.get_spot_media(1) == []
        # Area entries are keyed by geography and keep the old copy
        area = await spot_cache.get_spots_in_area(43.3, 5.4, 10)
        assert [spot.id for spot in area] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_invalidate_area(self, spot_cache, sample_spots):
        """Test area invalidation through the facade."""
        await spot_cache.set_spots_in_area(43.3, 5.4, 10, sample_spots)

        assert await spot_cache.invalidate_area(43.30001, 5.40002, 10.01) == 1
        assert await spot_cache.get_spots_in_area(43.3, 5.4, 10) == []
        assert await spot_cache.get_spot(1) is not None

    @pytest.mark.asyncio
    async def test_clear_all(self, spot_cache, sample_spots, store):
        """Test full invalidation."""
        await spot_cache.set_spots_in_area(43.3, 5.4, 10, sample_spots)

        assert await spot_cache.clear_all() == 4
        assert await store.count() == 0


class TestSpotCacheReadThrough:
    """Test cases for read-through helpers."""

    @pytest_asyncio.fixture
    async def spot_cache(self, store, test_settings):
        """Create spot cache service on the test store."""
        return SpotCacheService(store, settings=test_settings)

    @pytest.mark.asyncio
    async def test_get_or_load_spot(self, spot_cache, spot_factory):
        """Test loader runs once for repeated reads."""
        calls = []

        async def loader():
            calls.append(1)
            return spot_factory(7)

        first = await spot_cache.get_or_load_spot(7, loader)
        second = await spot_cache.get_or_load_spot(7, loader)

        assert first is second
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_get_or_load_missing_spot(self, spot_cache, store):
        """Test a missing spot is not cached."""
        assert await spot_cache.get_or_load_spot(7, lambda: None) is None
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_get_or_load_spot_failure(self, spot_cache, store):
        """Test loader errors propagate."""

        def loader():
            raise ConnectionError("backing store unavailable")

        with pytest.raises(ConnectionError):
            await spot_cache.get_or_load_spot(7, loader)
        assert await store.count() == 0

    @pytest.mark.asyncio
    async def test_get_or_load_spot_media(self, spot_cache, sample_media):
        """Test media read-through."""
        media = await spot_cache.get_or_load_spot_media(1, lambda: iter(sample_media))

        assert [item.id for item in media] == [10, 11, 12]
        assert len(await spot_cache.get_spot_media(1)) == 3

    @pytest.mark.asyncio
    async def test_get_or_load_spot_media_none(self, spot_cache):
        """Test a None media result maps to an empty list."""
        assert await spot_cache.get_or_load_spot_media(1, lambda: None) == []

    @pytest.mark.asyncio
    async def test_get_or_load_spots_in_area(self, spot_cache, sample_spots):
        """Test area read-through warms the spot entries."""
        calls = []

        def loader():
            calls.append(1)
            return sample_spots

        first = await spot_cache.get_or_load_spots_in_area(43.3, 5.4, 10, loader)
        second = await spot_cache.get_or_load_spots_in_area(43.30001, 5.4, 10, loader)

        assert [spot.id for spot in first] == [1, 2, 3]
        assert [spot.id for spot in second] == [1, 2, 3]
        assert len(calls) == 1
        assert await spot_cache.get_spot(2) is sample_spots[1]

    @pytest.mark.asyncio
    async def test_get_or_load_spots_in_area_failure(self, spot_cache, store):
        """Test area loader errors propagate and cache nothing."""

        async def loader():
            raise RuntimeError("query failed")

        with pytest.raises(RuntimeError, match="query failed"):
            await spot_cache.get_or_load_spots_in_area(0, 0, 1, loader)
        assert await store.count() == 0
