"""
Cache Manager Service

High-level cache management service that wires the in-memory store,
the domain cache facades and the invalidation service, and owns the
lifetime of the background expiration sweep.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from opentelemetry import trace

from ...core.config import Settings, get_settings
from ...domain.cache.domain_services import CacheInvalidationService
from ...infrastructure.memory.ttl_store import ShardedTTLStore
from .favorite_cache import FavoriteSpotCacheService
from .spot_cache import SpotCacheService

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class CacheManager:
    """
    High-level cache management service.

    Provides a single entry point to spot, area, media and favorites
    caching together with lifecycle, health and statistics operations.
    """

    def __init__(
        self,
        store: Optional[ShardedTTLStore] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.store: ShardedTTLStore = store or ShardedTTLStore(
            shard_count=self.settings.CACHE_SHARD_COUNT,
            sweep_interval_seconds=self.settings.CACHE_SWEEP_INTERVAL_SECONDS,
        )
        self.invalidation_service = CacheInvalidationService(self.store)
        self.spots = SpotCacheService(
            self.store,
            settings=self.settings,
            invalidation_service=self.invalidation_service,
        )
        self.favorites = FavoriteSpotCacheService(self.store)
        self._initialized = False

    async def initialize(self) -> None:
        """Start the background expiration sweep."""
        if self._initialized:
            return

        try:
            await self.store.start()
            self._initialized = True
            logger.info("Cache manager initialized successfully")

        except Exception as e:
            logger.error(f"Failed to initialize cache manager: {e}")
            raise

    async def close(self) -> None:
        """Stop the sweep and release every cached entry."""
        await self.store.close()
        self._initialized = False
        logger.info("Cache manager closed successfully")

    async def __aenter__(self) -> "CacheManager":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def health_check(self) -> Dict[str, Any]:
        """Report store state and counters."""
        with tracer.start_as_current_span("cache_manager.health_check") as span:
            stats = await self.store.get_stats()
            if self.store.is_closed:
                status = "unhealthy"
            elif self._initialized and not stats.sweeper_running:
                status = "degraded"
            else:
                status = "healthy"

            span.set_attribute("status", status)
            span.set_attribute("entries", stats.entries)

            return {
                "status": status,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "cache_manager": {
                    "initialized": self._initialized,
                    "sweeper_running": stats.sweeper_running,
                    "entries": stats.entries,
                    "hit_ratio": stats.hit_ratio,
                    "default_ttls": {
                        "spot": self.spots.spot_ttl.seconds,
                        "area": self.spots.area_ttl.seconds,
                        "media": self.spots.media_ttl.seconds,
                    },
                },
            }

    async def get_cache_statistics(self) -> Dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Store counters plus the derived hit ratio
        """
        stats = await self.store.get_stats()
        return {
            **stats.model_dump(),
            "hit_ratio": stats.hit_ratio,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    async def cleanup_expired_entries(self) -> int:
        """
        Run an expiration sweep immediately.

        Returns:
            Number of expired entries removed
        """
        with tracer.start_as_current_span("cache_manager.cleanup_expired") as span:
            removed = await self.store.sweep_expired()
            span.set_attribute("total_cleaned", removed)
            logger.info(f"Cleaned up {removed} expired cache entries")
            return removed

    async def invalidate_spot(self, spot_id) -> int:
        """Invalidate a spot after a backing-store write."""
        return await self.invalidation_service.invalidate_spot(spot_id)

    async def invalidate_area(self, latitude, longitude, radius_km) -> int:
        """Invalidate an area after a backing-store write."""
        return await self.invalidation_service.invalidate_area(
            latitude, longitude, radius_km
        )

    async def clear_all(self) -> int:
        """Invalidate everything."""
        return await self.invalidation_service.invalidate_all()


# Global cache manager instance
cache_manager = CacheManager()
