"""
Sharded In-Memory TTL Store

Process-local implementation of the generic cache store repository.
Keys are striped over shards, each guarded by its own asyncio lock, so
readers and writers of different keys never wait on one another and the
expiration sweep only ever holds one shard lock at a time.
"""

import asyncio
import inspect
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import structlog

from ...core.config import get_settings
from ...domain.cache.entities import CacheEntry, utcnow
from ...domain.cache.repository_interfaces import (
    CacheStoreRepository,
    Factory,
    KeyLike,
)
from ...domain.cache.value_objects import CacheKey, CacheStats, TTLLike, coerce_ttl
from .exceptions import CacheClosedException, CacheConfigurationException

logger = structlog.get_logger(__name__)

Clock = Callable[[], datetime]


class _Shard:
    """One lock-striped partition of the key space."""

    __slots__ = ("entries", "lock")

    def __init__(self) -> None:
        self.entries: Dict[str, CacheEntry] = {}
        self.lock = asyncio.Lock()


class ShardedTTLStore(CacheStoreRepository):
    """
    Concurrency-safe TTL key-value store.

    Expired entries are removed lazily when observed and periodically by a
    background sweep owned by the store instance. Correctness of reads never
    depends on the sweep having run.
    """

    def __init__(
        self,
        shard_count: Optional[int] = None,
        sweep_interval_seconds: Optional[float] = None,
        clock: Optional[Clock] = None,
    ):
        settings = get_settings()
        self.shard_count = (
            shard_count if shard_count is not None else settings.CACHE_SHARD_COUNT
        )
        self.sweep_interval_seconds = (
            sweep_interval_seconds
            if sweep_interval_seconds is not None
            else settings.CACHE_SWEEP_INTERVAL_SECONDS
        )

        if self.shard_count < 1:
            raise CacheConfigurationException(
                message="Shard count must be at least 1",
                config_key="shard_count",
                config_value=self.shard_count,
            )
        if self.sweep_interval_seconds <= 0:
            raise CacheConfigurationException(
                message="Sweep interval must be positive",
                config_key="sweep_interval_seconds",
                config_value=self.sweep_interval_seconds,
            )

        self._clock: Clock = clock or utcnow
        self._shards: List[_Shard] = [_Shard() for _ in range(self.shard_count)]
        self._sweep_task: Optional[asyncio.Task] = None
        self._closed = False
        self._counters: Dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "removals": 0,
            "expired_removals": 0,
            "swept": 0,
            "sweeps": 0,
        }

    # Lifecycle

    @property
    def is_running(self) -> bool:
        """Check if the background sweep is active."""
        return self._sweep_task is not None and not self._sweep_task.done()

    @property
    def is_closed(self) -> bool:
        """Check if the store has been closed."""
        return self._closed

    async def start(self) -> None:
        """Start the background expiration sweep."""
        if self._closed:
            raise CacheClosedException()
        if not self.is_running:
            self._sweep_task = asyncio.create_task(self._sweep_loop())
            logger.info(
                "Cache sweep started",
                interval_seconds=self.sweep_interval_seconds,
                shard_count=self.shard_count,
            )

    async def close(self) -> None:
        """Stop the background sweep and release every entry."""
        if self._closed:
            return
        self._closed = True

        if self._sweep_task:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None

        removed = await self.clear()
        logger.info("Cache store closed", released_entries=removed)

    async def __aenter__(self) -> "ShardedTTLStore":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _sweep_loop(self) -> None:
        """Background expiration loop."""
        while True:
            try:
                await asyncio.sleep(self.sweep_interval_seconds)
                await self.sweep_expired()
            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error("Cache sweep error", error=str(e))

    # Key routing

    @staticmethod
    def _normalize(key: KeyLike) -> str:
        if isinstance(key, CacheKey):
            return key.value
        return "" if key is None else str(key)

    def _shard_for(self, name: str) -> _Shard:
        return self._shards[hash(name) % self.shard_count]

    # Operations

    async def get(self, key: KeyLike) -> Optional[Any]:
        """
        Get live value for key.

        Args:
            key: Cache key

        Returns:
            Cached value, or None if the key is absent or expired
        """
        entry = await self.get_entry(key)
        return entry.value if entry is not None else None

    async def get_entry(self, key: KeyLike) -> Optional[CacheEntry]:
        """
        Get live entry for key, removing it if it has expired.

        Unlike get(), a cached None value is returned as an entry.
        """
        name = self._normalize(key)
        if not name:
            self._counters["misses"] += 1
            return None

        shard = self._shard_for(name)
        now = self._clock()
        async with shard.lock:
            entry = shard.entries.get(name)
            if entry is not None and entry.is_expired(now):
                del shard.entries[name]
                self._counters["expired_removals"] += 1
                logger.debug("Removed expired cache entry", key=name)
                entry = None
            if entry is not None:
                entry.touch(now)

        if entry is None:
            self._counters["misses"] += 1
            logger.debug("Cache miss", key=name)
            return None

        self._counters["hits"] += 1
        logger.debug("Cache hit", key=name)
        return entry

    async def set(
        self, key: KeyLike, value: Any, ttl: Optional[TTLLike] = None
    ) -> None:
        """
        Store value under key, replacing any previous entry.

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live; None means the entry never expires
        """
        name = self._normalize(key)
        if not name:
            return

        cache_ttl = coerce_ttl(ttl)
        shard = self._shard_for(name)
        entry = CacheEntry.create(value, cache_ttl, self._clock())
        async with shard.lock:
            shard.entries[name] = entry

        self._counters["sets"] += 1
        logger.debug(
            "Cache entry set",
            key=name,
            ttl_seconds=cache_ttl.seconds if cache_ttl else None,
        )

    async def remove(self, key: KeyLike) -> bool:
        """Remove key. Removing an absent key is a no-op."""
        name = self._normalize(key)
        if not name:
            return False

        shard = self._shard_for(name)
        async with shard.lock:
            removed = shard.entries.pop(name, None) is not None

        if removed:
            self._counters["removals"] += 1
            logger.debug("Cache entry removed", key=name)
        return removed

    async def clear(self) -> int:
        """Remove every entry and return how many were dropped."""
        removed = 0
        for shard in self._shards:
            async with shard.lock:
                removed += len(shard.entries)
                shard.entries.clear()

        self._counters["removals"] += removed
        logger.info("Cache cleared", removed=removed)
        return removed

    async def exists(self, key: KeyLike) -> bool:
        """Check if a live entry exists for key."""
        return await self.get_entry(key) is not None

    async def get_or_set(
        self, key: KeyLike, factory: Factory, ttl: Optional[TTLLike] = None
    ) -> Any:
        """
        Return the live value for key, populating it from factory on a miss.

        Concurrent misses are not de-duplicated: each may call factory and the
        last writer wins. Factory errors propagate and leave nothing cached.
        A None result is returned without being cached.

        Args:
            key: Cache key
            factory: Sync or async zero-argument callable producing the value
            ttl: Time to live for the populated value

        Returns:
            Cached or freshly produced value
        """
        entry = await self.get_entry(key)
        if entry is not None:
            return entry.value

        try:
            value = factory()
            if inspect.isawaitable(value):
                value = await value
        except Exception as e:
            logger.error(
                "Cache factory failed",
                key=self._normalize(key),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        if value is not None:
            await self.set(key, value, ttl)
        return value

    async def count(self) -> int:
        """Number of physically stored entries, live or dead."""
        return sum(len(shard.entries) for shard in self._shards)

    async def sweep_expired(self) -> int:
        """
        Physically remove every expired entry.

        Shards are swept one at a time; each shard lock is held only while
        that shard's dead keys are collected and dropped.

        Returns:
            Number of entries removed
        """
        removed = 0
        for shard in self._shards:
            now = self._clock()
            async with shard.lock:
                dead = [
                    name
                    for name, entry in shard.entries.items()
                    if entry.is_expired(now)
                ]
                for name in dead:
                    del shard.entries[name]
            removed += len(dead)
            # Let readers and writers in between shards
            await asyncio.sleep(0)

        self._counters["sweeps"] += 1
        self._counters["swept"] += removed
        if removed:
            logger.debug(
                "Swept expired cache entries",
                removed=removed,
                remaining=await self.count(),
            )
        return removed

    async def get_stats(self) -> CacheStats:
        """Get store counters."""
        return CacheStats(
            entries=await self.count(),
            shard_count=self.shard_count,
            sweep_interval_seconds=self.sweep_interval_seconds,
            sweeper_running=self.is_running,
            **self._counters,
        )
