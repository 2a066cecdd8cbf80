"""
Cache Domain Entities

Core domain entity for stored cache values.
Encapsulates the live/dead lifecycle of a single cache entry.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from .value_objects import TTL, CacheEntryStatus

# "+infinity" sentinel: the entry lives until explicitly removed
NEVER_EXPIRES = datetime.max.replace(tzinfo=timezone.utc)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass
class CacheEntry:
    """
    Cache entry entity.

    Holds an opaque value with creation, access and absolute expiry times.
    Entries are replaced on overwrite, never merged.
    """

    value: Any
    created_at: datetime
    expires_at: datetime
    last_accessed_at: Optional[datetime] = None
    access_count: int = 0

    def __post_init__(self) -> None:
        """Initialize cache entry."""
        if self.expires_at < self.created_at:
            raise ValueError("Cache entry cannot expire before it is created")
        if not self.last_accessed_at:
            self.last_accessed_at = self.created_at

    @classmethod
    def create(
        cls, value: Any, ttl: Optional[TTL] = None, now: Optional[datetime] = None
    ) -> "CacheEntry":
        """Create new cache entry; without a TTL it never expires."""
        now = now or utcnow()
        if ttl is None:
            expires_at = NEVER_EXPIRES
        else:
            remaining = (NEVER_EXPIRES - now).total_seconds()
            if ttl.seconds >= remaining:
                expires_at = NEVER_EXPIRES
            else:
                expires_at = now + ttl.as_timedelta()

        return cls(value=value, created_at=now, expires_at=expires_at)

    @property
    def never_expires(self) -> bool:
        """Check if entry has no expiry."""
        return self.expires_at == NEVER_EXPIRES

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check if cache entry is expired (dead) once its TTL has fully elapsed."""
        if self.never_expires:
            return False
        return (now or utcnow()) >= self.expires_at

    def touch(self, now: Optional[datetime] = None) -> None:
        """Record access to cache entry."""
        self.access_count += 1
        self.last_accessed_at = now or utcnow()

    def remaining_seconds(self, now: Optional[datetime] = None) -> Optional[float]:
        """Seconds until expiry, None for never-expiring entries."""
        if self.never_expires:
            return None
        return max(0.0, (self.expires_at - (now or utcnow())).total_seconds())

    def get_status(self, now: Optional[datetime] = None) -> CacheEntryStatus:
        """Get current status of cache entry."""
        if self.is_expired(now):
            return CacheEntryStatus.EXPIRED
        return CacheEntryStatus.ACTIVE
