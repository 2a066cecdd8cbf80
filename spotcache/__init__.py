"""
SpotCache

Process-local TTL caching for spots, area query results and spot media.
"""

from .domain.cache.value_objects import TTL, AreaQuery, CacheKey, CacheStats
from .infrastructure.memory.ttl_store import ShardedTTLStore
from .services.cache.cache_manager import CacheManager, cache_manager
from .services.cache.favorite_cache import FavoriteSpotCacheService
from .services.cache.spot_cache import SpotCacheService

__all__ = [
    "TTL",
    "AreaQuery",
    "CacheKey",
    "CacheStats",
    "ShardedTTLStore",
    "CacheManager",
    "cache_manager",
    "FavoriteSpotCacheService",
    "SpotCacheService",
]
