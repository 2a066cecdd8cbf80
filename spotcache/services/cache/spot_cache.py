"""
Spot Cache Service

Domain cache facade for spots, area query results and spot media.
Translates entity-shaped operations into generic store operations with
per-namespace default TTLs.
"""

import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from opentelemetry import trace

from ...core.config import Settings, get_settings
from ...domain.cache.domain_services import CacheInvalidationService
from ...domain.cache.repository_interfaces import (
    CacheStoreRepository,
    SpotCacheRepository,
)
from ...domain.cache.value_objects import (
    TTL,
    AreaQuery,
    CacheKey,
    Coordinate,
    SpotId,
    TTLLike,
    coerce_ttl,
    key_or_empty,
)
from ...domain.spots.entities import Spot, SpotMedia

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

Loader = Callable[[], Union[Any, Awaitable[Any]]]


def _spot_key(spot_id: SpotId):
    return key_or_empty(CacheKey.spot, spot_id)


def _media_key(spot_id: SpotId):
    return key_or_empty(CacheKey.media, spot_id)


async def _call_loader(loader: Loader) -> Any:
    result = loader()
    if inspect.isawaitable(result):
        result = await result
    return result


class SpotCacheService(SpotCacheRepository):
    """
    Cache facade for spot entities, area results and media lists.

    Default TTLs: spot 30 min, area 15 min, media 60 min, each overridable
    per call. Area and media misses are returned as empty lists.
    """

    def __init__(
        self,
        store: CacheStoreRepository,
        settings: Optional[Settings] = None,
        invalidation_service: Optional[CacheInvalidationService] = None,
    ):
        settings = settings or get_settings()
        self.store = store
        self.invalidation_service = invalidation_service or CacheInvalidationService(
            store
        )
        self.spot_ttl = TTL.from_seconds(settings.SPOT_CACHE_TTL_SECONDS)
        self.area_ttl = TTL.from_seconds(settings.AREA_CACHE_TTL_SECONDS)
        self.media_ttl = TTL.from_seconds(settings.MEDIA_CACHE_TTL_SECONDS)

    # Spot operations

    async def get_spot(self, spot_id: SpotId) -> Optional[Spot]:
        """
        Get cached spot.

        Args:
            spot_id: Spot ID

        Returns:
            Cached spot or None if not found/expired
        """
        spot = await self.store.get(_spot_key(spot_id))
        if spot is not None:
            logger.debug(f"Spot cache hit for ID: {spot_id}")
        else:
            logger.debug(f"Spot cache miss for ID: {spot_id}")
        return spot

    async def set_spot(
        self, spot: Optional[Spot], ttl: Optional[TTLLike] = None
    ) -> None:
        """
        Cache spot under its ID. A None spot is ignored.

        Args:
            spot: Spot to cache
            ttl: Time to live (defaults to the spot TTL)
        """
        if spot is None:
            return

        cache_ttl = coerce_ttl(ttl) or self.spot_ttl
        await self.store.set(_spot_key(spot.id), spot, cache_ttl)
        logger.debug(
            f"Spot cached for ID: {spot.id}",
            extra={"spot_id": str(spot.id), "ttl": cache_ttl.seconds},
        )

    async def remove_spot(self, spot_id: SpotId) -> bool:
        """Remove cached spot."""
        removed = await self.store.remove(_spot_key(spot_id))
        logger.debug(f"Spot cache removed for ID: {spot_id}")
        return removed

    # Area operations

    async def get_spots_in_area(
        self, latitude: Coordinate, longitude: Coordinate, radius_km: Coordinate
    ) -> List[Spot]:
        """
        Get cached spots for a geographic window.

        A miss and a cached empty area both return an empty list.

        Args:
            latitude: Window center latitude
            longitude: Window center longitude
            radius_km: Window radius in kilometres

        Returns:
            Cached spots, or an empty list
        """
        area = AreaQuery(latitude, longitude, radius_km)
        spots = await self.store.get(area.to_key())
        if spots is not None:
            logger.debug(f"Area cache hit for {area}")
            return list(spots)

        logger.debug(f"Area cache miss for {area}")
        return []

    async def set_spots_in_area(
        self,
        latitude: Coordinate,
        longitude: Coordinate,
        radius_km: Coordinate,
        spots: Optional[Iterable[Spot]],
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """
        Cache spots for a geographic window.

        Every spot in the list is also cached individually at the same TTL,
        so browsing an area keeps the single spot lookups warm.

        Args:
            latitude: Window center latitude
            longitude: Window center longitude
            radius_km: Window radius in kilometres
            spots: Spots inside the window
            ttl: Time to live (defaults to the area TTL)
        """
        if spots is None:
            return

        area = AreaQuery(latitude, longitude, radius_km)
        cache_ttl = coerce_ttl(ttl) or self.area_ttl
        spot_list = list(spots)

        await self.store.set(area.to_key(), spot_list, cache_ttl)
        logger.debug(
            f"Area cache set for {area}, {len(spot_list)} spots",
            extra={"area": str(area), "count": len(spot_list), "ttl": cache_ttl.seconds},
        )

        for spot in spot_list:
            await self.set_spot(spot, cache_ttl)

    # Media operations

    async def get_spot_media(self, spot_id: SpotId) -> List[SpotMedia]:
        """
        Get cached media for spot.

        Args:
            spot_id: Spot ID

        Returns:
            Cached media in stored order, or an empty list
        """
        media = await self.store.get(_media_key(spot_id))
        if media is not None:
            logger.debug(f"Media cache hit for spot ID: {spot_id}")
            return list(media)

        logger.debug(f"Media cache miss for spot ID: {spot_id}")
        return []

    async def set_spot_media(
        self,
        spot_id: SpotId,
        media: Optional[Iterable[SpotMedia]],
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """
        Cache media list for spot. A None list is ignored.

        Args:
            spot_id: Spot ID
            media: Ordered media list
            ttl: Time to live (defaults to the media TTL)
        """
        if media is None:
            return

        cache_ttl = coerce_ttl(ttl) or self.media_ttl
        media_list = list(media)
        await self.store.set(_media_key(spot_id), media_list, cache_ttl)
        logger.debug(
            f"Media cache set for spot ID: {spot_id}, {len(media_list)} items",
            extra={"spot_id": str(spot_id), "count": len(media_list)},
        )

    async def remove_spot_media(self, spot_id: SpotId) -> bool:
        """Remove cached media for spot."""
        removed = await self.store.remove(_media_key(spot_id))
        logger.debug(f"Media cache removed for spot ID: {spot_id}")
        return removed

    # Invalidation

    async def invalidate_spot(self, spot_id: SpotId) -> int:
        """Invalidate spot and its media. Area entries are left untouched."""
        return await self.invalidation_service.invalidate_spot(spot_id)

    async def invalidate_area(
        self, latitude: Coordinate, longitude: Coordinate, radius_km: Coordinate
    ) -> int:
        """Invalidate the area entry matching the quantized window."""
        return await self.invalidation_service.invalidate_area(
            latitude, longitude, radius_km
        )

    async def clear_all(self) -> int:
        """Clear every cached entry."""
        return await self.invalidation_service.invalidate_all()

    # Read-through helpers

    async def get_or_load_spot(
        self, spot_id: SpotId, loader: Loader, ttl: Optional[TTLLike] = None
    ) -> Optional[Spot]:
        """
        Get cached spot or load it from the backing store.

        Args:
            spot_id: Spot ID
            loader: Sync or async callable fetching the spot
            ttl: Time to live (defaults to the spot TTL)

        Returns:
            Spot, or None if the loader found nothing
        """
        with tracer.start_as_current_span("spot_cache.get_or_load_spot") as span:
            span.set_attribute("spot_id", str(spot_id))
            try:
                return await self.store.get_or_set(
                    _spot_key(spot_id), loader, coerce_ttl(ttl) or self.spot_ttl
                )
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

    async def get_or_load_spot_media(
        self, spot_id: SpotId, loader: Loader, ttl: Optional[TTLLike] = None
    ) -> List[SpotMedia]:
        """
        Get cached media or load it from the backing store.

        Args:
            spot_id: Spot ID
            loader: Sync or async callable fetching the media list
            ttl: Time to live (defaults to the media TTL)

        Returns:
            Media list, empty if the loader found nothing
        """

        async def load_list() -> Optional[List[SpotMedia]]:
            media = await _call_loader(loader)
            return list(media) if media is not None else None

        with tracer.start_as_current_span("spot_cache.get_or_load_media") as span:
            span.set_attribute("spot_id", str(spot_id))
            try:
                media = await self.store.get_or_set(
                    _media_key(spot_id),
                    load_list,
                    coerce_ttl(ttl) or self.media_ttl,
                )
            except Exception as e:
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise
            return list(media) if media is not None else []

    async def get_or_load_spots_in_area(
        self,
        latitude: Coordinate,
        longitude: Coordinate,
        radius_km: Coordinate,
        loader: Loader,
        ttl: Optional[TTLLike] = None,
    ) -> List[Spot]:
        """
        Get cached area result or load it from the backing store.

        A loaded result is cached through set_spots_in_area, so the
        individual spots are warmed as well.

        Args:
            latitude: Window center latitude
            longitude: Window center longitude
            radius_km: Window radius in kilometres
            loader: Sync or async callable fetching the spots in the window
            ttl: Time to live (defaults to the area TTL)

        Returns:
            Spots inside the window
        """
        area = AreaQuery(latitude, longitude, radius_km)
        with tracer.start_as_current_span("spot_cache.get_or_load_area") as span:
            span.set_attribute("area_key", area.to_key().value)

            entry = await self.store.get_entry(area.to_key())
            if entry is not None and entry.value is not None:
                span.set_attribute("cache_hit", True)
                return list(entry.value)

            span.set_attribute("cache_hit", False)
            try:
                spots = await _call_loader(loader)
            except Exception as e:
                logger.error(f"Failed to load spots for area {area}: {e}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

            if spots is None:
                return []

            spot_list = list(spots)
            await self.set_spots_in_area(latitude, longitude, radius_km, spot_list, ttl)
            return spot_list
