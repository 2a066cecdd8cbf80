"""
Cache Repository Interfaces

Abstract repository interfaces following DDD Repository pattern.
Defines contracts for the generic store and the domain cache facades.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List, Optional, Union

from ..spots.entities import FavoriteSpotStats, Spot, SpotMedia, UserFavoriteSpot
from .entities import CacheEntry
from .value_objects import CacheKey, CacheStats, Coordinate, SpotId, TTLLike

KeyLike = Union[str, CacheKey]
Factory = Callable[[], Union[Any, Awaitable[Any]]]


class CacheStoreRepository(ABC):
    """
    Abstract repository for generic TTL storage.

    Misses are reported as empty results, never as errors.
    """

    @abstractmethod
    async def get(self, key: KeyLike) -> Optional[Any]:
        """Get live value for key, None when absent or expired."""
        pass

    @abstractmethod
    async def get_entry(self, key: KeyLike) -> Optional[CacheEntry]:
        """Get live entry for key, None when absent or expired."""
        pass

    @abstractmethod
    async def set(self, key: KeyLike, value: Any, ttl: Optional[TTLLike] = None) -> None:
        """Store value; without a TTL it never expires."""
        pass

    @abstractmethod
    async def remove(self, key: KeyLike) -> bool:
        """Remove key; removing an absent key is a no-op."""
        pass

    @abstractmethod
    async def clear(self) -> int:
        """Remove every entry."""
        pass

    @abstractmethod
    async def exists(self, key: KeyLike) -> bool:
        """Check if a live entry exists for key."""
        pass

    @abstractmethod
    async def get_or_set(
        self, key: KeyLike, factory: Factory, ttl: Optional[TTLLike] = None
    ) -> Any:
        """Return live value or populate it from factory."""
        pass

    @abstractmethod
    async def count(self) -> int:
        """Number of physically stored entries."""
        pass

    @abstractmethod
    async def sweep_expired(self) -> int:
        """Physically remove every dead entry."""
        pass

    @abstractmethod
    async def get_stats(self) -> CacheStats:
        """Get store counters."""
        pass


class SpotCacheRepository(ABC):
    """
    Abstract repository for spot, area and media caching.

    Defines contract for the domain cache facade.
    """

    @abstractmethod
    async def get_spot(self, spot_id: SpotId) -> Optional[Spot]:
        """Get cached spot."""
        pass

    @abstractmethod
    async def set_spot(self, spot: Optional[Spot], ttl: Optional[TTLLike] = None) -> None:
        """Cache spot."""
        pass

    @abstractmethod
    async def remove_spot(self, spot_id: SpotId) -> bool:
        """Remove cached spot."""
        pass

    @abstractmethod
    async def get_spots_in_area(
        self, latitude: Coordinate, longitude: Coordinate, radius_km: Coordinate
    ) -> List[Spot]:
        """Get cached spots for a geographic window."""
        pass

    @abstractmethod
    async def set_spots_in_area(
        self,
        latitude: Coordinate,
        longitude: Coordinate,
        radius_km: Coordinate,
        spots: Optional[List[Spot]],
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache spots for a geographic window."""
        pass

    @abstractmethod
    async def get_spot_media(self, spot_id: SpotId) -> List[SpotMedia]:
        """Get cached media for spot."""
        pass

    @abstractmethod
    async def set_spot_media(
        self,
        spot_id: SpotId,
        media: Optional[List[SpotMedia]],
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache media for spot."""
        pass

    @abstractmethod
    async def remove_spot_media(self, spot_id: SpotId) -> bool:
        """Remove cached media for spot."""
        pass

    @abstractmethod
    async def invalidate_spot(self, spot_id: SpotId) -> int:
        """Invalidate spot and its media."""
        pass

    @abstractmethod
    async def invalidate_area(
        self, latitude: Coordinate, longitude: Coordinate, radius_km: Coordinate
    ) -> int:
        """Invalidate a geographic window."""
        pass

    @abstractmethod
    async def clear_all(self) -> int:
        """Clear every cached entry."""
        pass


class FavoriteSpotCacheRepository(ABC):
    """Abstract repository for favorite spot caching."""

    @abstractmethod
    async def get_user_favorites(
        self, user_id: SpotId, by_priority: bool = False
    ) -> Optional[List[UserFavoriteSpot]]:
        """Get cached favorites for user."""
        pass

    @abstractmethod
    async def set_user_favorites(
        self,
        user_id: SpotId,
        favorites: List[UserFavoriteSpot],
        by_priority: bool = False,
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache favorites for user."""
        pass

    @abstractmethod
    async def get_favorite_status(
        self, user_id: SpotId, spot_id: SpotId
    ) -> Optional[bool]:
        """Get cached favorite flag."""
        pass

    @abstractmethod
    async def set_favorite_status(
        self,
        user_id: SpotId,
        spot_id: SpotId,
        is_favorite: bool,
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache favorite flag."""
        pass

    @abstractmethod
    async def get_favorite_stats(self, user_id: SpotId) -> Optional[FavoriteSpotStats]:
        """Get cached favorite statistics."""
        pass

    @abstractmethod
    async def set_favorite_stats(
        self,
        user_id: SpotId,
        stats: FavoriteSpotStats,
        ttl: Optional[TTLLike] = None,
    ) -> None:
        """Cache favorite statistics."""
        pass

    @abstractmethod
    async def invalidate_user_favorites(self, user_id: SpotId) -> int:
        """Invalidate every favorites entry of a user."""
        pass

    @abstractmethod
    async def invalidate_spot_favorites(self, spot_id: SpotId) -> int:
        """Invalidate the favorites count of a spot."""
        pass
