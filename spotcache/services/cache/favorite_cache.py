"""
Favorite Spot Cache Service

Caches per-user favorite lists, favorite flags and statistics, and
per-spot favorite counts on top of the generic store.
"""

import logging
from typing import Iterable, List, Optional

from ...domain.cache.repository_interfaces import (
    CacheStoreRepository,
    FavoriteSpotCacheRepository,
)
from ...domain.cache.value_objects import (
    TTL,
    CacheKey,
    SpotId,
    TTLLike,
    coerce_ttl,
    key_or_empty,
)
from ...domain.spots.entities import FavoriteSpotStats, UserFavoriteSpot

logger = logging.getLogger(__name__)


class FavoriteSpotCacheService(FavoriteSpotCacheRepository):
    """Cache facade for favorite spot data."""

    def __init__(self, store: CacheStoreRepository):
        self.store = store

    async def get_user_favorites(
        self, user_id: SpotId, by_priority: bool = False
    ) -> Optional[List[UserFavoriteSpot]]:
        """
        Get cached favorites for user.

        Args:
            user_id: User ID
            by_priority: Whether the list is ordered by priority

        Returns:
            Cached favorites or None if not cached
        """
        key = key_or_empty(CacheKey.user_favorites, user_id, by_priority)
        cached = await self.store.get(key)
        if cached is None:
            logger.debug(
                f"Cache miss for user {user_id} favorites (by_priority: {by_priority})"
            )
            return None

        logger.debug(
            f"Cache hit for user {user_id} favorites (by_priority: {by_priority})"
        )
        return list(cached)

    async def set_user_favorites(
        self,
        user_id: SpotId,
        favorites: Iterable[UserFavoriteSpot],
        by_priority: bool = False,
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache favorites for user (5 minutes by default)."""
        favorites_list = list(favorites)
        await self.store.set(
            key_or_empty(CacheKey.user_favorites, user_id, by_priority),
            favorites_list,
            coerce_ttl(ttl) or TTL.favorites(),
        )
        logger.debug(
            f"Cached {len(favorites_list)} favorites for user {user_id} "
            f"(by_priority: {by_priority})"
        )

    async def get_favorite_status(
        self, user_id: SpotId, spot_id: SpotId
    ) -> Optional[bool]:
        """
        Get cached favorite flag for a spot.

        Returns:
            True/False when cached, None when not cached
        """
        key = key_or_empty(CacheKey.favorite_status, user_id, spot_id)
        entry = await self.store.get_entry(key)
        if entry is None:
            logger.debug(f"Cache miss for favorite status: user {user_id}, spot {spot_id}")
            return None
        return bool(entry.value)

    async def set_favorite_status(
        self,
        user_id: SpotId,
        spot_id: SpotId,
        is_favorite: bool,
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache favorite flag (15 minutes by default)."""
        await self.store.set(
            key_or_empty(CacheKey.favorite_status, user_id, spot_id),
            bool(is_favorite),
            coerce_ttl(ttl) or TTL.favorite_status(),
        )

    async def get_favorite_stats(self, user_id: SpotId) -> Optional[FavoriteSpotStats]:
        """Get cached favorite statistics."""
        return await self.store.get(key_or_empty(CacheKey.favorite_stats, user_id))

    async def set_favorite_stats(
        self,
        user_id: SpotId,
        stats: FavoriteSpotStats,
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache favorite statistics (10 minutes by default)."""
        await self.store.set(
            key_or_empty(CacheKey.favorite_stats, user_id),
            stats,
            coerce_ttl(ttl) or TTL.favorite_stats(),
        )
        logger.debug(
            f"Cached favorite stats for user {user_id}: "
            f"{stats.total_favorites} total"
        )

    async def get_spot_favorites_count(self, spot_id: SpotId) -> Optional[int]:
        """Get cached number of users who favorited a spot."""
        key = key_or_empty(CacheKey.spot_favorites_count, spot_id)
        entry = await self.store.get_entry(key)
        return int(entry.value) if entry is not None else None

    async def set_spot_favorites_count(
        self, spot_id: SpotId, count: int, ttl: Optional[TTLLike] = None
    ) -> None:
        """Cache number of users who favorited a spot (5 minutes by default)."""
        if count < 0:
            raise ValueError("Favorites count cannot be negative")
        await self.store.set(
            key_or_empty(CacheKey.spot_favorites_count, spot_id),
            count,
            coerce_ttl(ttl) or TTL.favorites(),
        )

    async def invalidate_user_favorites(self, user_id: SpotId) -> int:
        """
        Invalidate both favorites orderings and the statistics of a user.

        Args:
            user_id: User ID

        Returns:
            Number of cache entries removed
        """
        keys = [
            key_or_empty(CacheKey.user_favorites, user_id, False),
            key_or_empty(CacheKey.user_favorites, user_id, True),
            key_or_empty(CacheKey.favorite_stats, user_id),
        ]
        removed = 0
        for key in keys:
            if await self.store.remove(key):
                removed += 1

        logger.debug(f"Invalidated favorite cache for user {user_id}")
        return removed

    async def invalidate_spot_favorites(self, spot_id: SpotId) -> int:
        """Invalidate the favorites count of a spot."""
        key = key_or_empty(CacheKey.spot_favorites_count, spot_id)
        removed = 1 if await self.store.remove(key) else 0
        logger.debug(f"Invalidated favorite cache for spot {spot_id}")
        return removed
