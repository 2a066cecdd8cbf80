"""
Cache Domain Services

Business logic services for cache domain operations.
Maps domain invalidation requests onto the generic store keys.
"""

import logging
from typing import List, Union

from opentelemetry import trace

from .repository_interfaces import CacheStoreRepository
from .value_objects import AreaQuery, CacheKey, Coordinate, SpotId, key_or_empty

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class CacheInvalidationService:
    """
    Domain service for cache invalidation.

    Spot invalidation cascades to the spot's media. Area entries are keyed
    by geography and are not reached from a spot id: no reverse index from
    spot to containing areas is kept, so an area entry may serve a stale
    copy of a changed spot until its own TTL lapses.
    """

    def __init__(self, store: CacheStoreRepository):
        self.store = store

    @staticmethod
    def spot_keys(spot_id: SpotId) -> List[Union[CacheKey, str]]:
        """Keys removed when a spot is invalidated."""
        return [
            key_or_empty(CacheKey.spot, spot_id),
            key_or_empty(CacheKey.media, spot_id),
        ]

    async def invalidate_spot(self, spot_id: SpotId, reason: str = "spot_update") -> int:
        """
        Invalidate the cached spot and its media.

        Args:
            spot_id: Spot ID to invalidate
            reason: Reason for invalidation (for logging)

        Returns:
            Number of cache entries removed
        """
        with tracer.start_as_current_span("cache.invalidate_spot") as span:
            span.set_attribute("spot_id", str(spot_id))
            span.set_attribute("reason", reason)

            try:
                removed = 0
                for key in self.spot_keys(spot_id):
                    if await self.store.remove(key):
                        removed += 1

                span.set_attribute("invalidated_count", removed)
                logger.debug(
                    f"Invalidated {removed} cache entries for spot {spot_id}",
                    extra={"spot_id": str(spot_id), "reason": reason, "count": removed},
                )
                return removed

            except Exception as e:
                logger.error(f"Failed to invalidate caches for spot {spot_id}: {e}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

    async def invalidate_area(
        self,
        latitude: Coordinate,
        longitude: Coordinate,
        radius_km: Coordinate,
        reason: str = "area_update",
    ) -> int:
        """
        Invalidate exactly the area entry matching the quantized window.

        Args:
            latitude: Window center latitude
            longitude: Window center longitude
            radius_km: Window radius in kilometres
            reason: Reason for invalidation (for logging)

        Returns:
            Number of cache entries removed (0 or 1)
        """
        area = AreaQuery(latitude, longitude, radius_km)
        with tracer.start_as_current_span("cache.invalidate_area") as span:
            span.set_attribute("area_key", area.to_key().value)
            span.set_attribute("reason", reason)

            try:
                removed = 1 if await self.store.remove(area.to_key()) else 0

                span.set_attribute("invalidated_count", removed)
                logger.debug(
                    f"Invalidated area cache for {area}",
                    extra={"area": str(area), "reason": reason, "count": removed},
                )
                return removed

            except Exception as e:
                logger.error(f"Failed to invalidate area cache for {area}: {e}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise

    async def invalidate_all(self, reason: str = "full_invalidation") -> int:
        """
        Remove every cached entry.

        Args:
            reason: Reason for invalidation (for logging)

        Returns:
            Number of cache entries removed
        """
        with tracer.start_as_current_span("cache.invalidate_all") as span:
            span.set_attribute("reason", reason)

            try:
                removed = await self.store.clear()

                span.set_attribute("invalidated_count", removed)
                logger.info(
                    f"Cleared {removed} cache entries",
                    extra={"reason": reason, "count": removed},
                )
                return removed

            except Exception as e:
                logger.error(f"Failed to clear cache: {e}")
                span.set_status(trace.Status(trace.StatusCode.ERROR, str(e)))
                raise
