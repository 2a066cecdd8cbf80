"""
Cache Value Objects

Immutable value objects for the cache domain.
Provides type safety for cache keys, TTLs and geographic key quantization.
"""

import math
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from typing import Callable, Optional, Union
from uuid import UUID

from pydantic import BaseModel, Field

SpotId = Union[int, str, UUID]
Coordinate = Union[float, int, str, Decimal]
TTLLike = Union["TTL", timedelta, int, float]

# Quantization steps for area keys
LATITUDE_STEP = Decimal("0.0001")
LONGITUDE_STEP = Decimal("0.0001")
RADIUS_STEP = Decimal("0.1")


class CacheEntryStatus(str, Enum):
    """Cache entry status enumeration."""

    ACTIVE = "active"
    EXPIRED = "expired"


class CacheNamespace(str, Enum):
    """Key prefixes owned by the domain cache."""

    SPOT = "spot"
    AREA = "area"
    MEDIA = "media"
    USER_FAVORITES = "user_favorites"
    FAVORITE_STATUS = "favorite_status"
    FAVORITE_STATS = "favorite_stats"
    SPOT_FAVORITES_COUNT = "spot_favorites_count"


def _identifier(value: SpotId, label: str) -> str:
    text = str(value)
    if not text or text.isspace():
        raise ValueError(f"{label} cannot be empty")
    return text


def _quantize(value: Coordinate, step: Decimal) -> str:
    """Round a coordinate half-to-even and render it with a fixed scale."""
    number = value if isinstance(value, Decimal) else Decimal(str(value))
    if not number.is_finite():
        # NaN/Infinity are not validated; they never match a real query
        return str(number)
    rounded = number.quantize(step, rounding=ROUND_HALF_EVEN)
    if rounded.is_zero():
        rounded = abs(rounded)
    return str(rounded)


@dataclass(frozen=True)
class AreaQuery:
    """
    Geographic window used as an area cache key.

    Latitude and longitude are quantized to 4 decimal places, the radius
    to 1 decimal place, so near-identical viewports share one entry.
    """

    latitude: Coordinate
    longitude: Coordinate
    radius_km: Coordinate
    rounded_latitude: str = field(init=False)
    rounded_longitude: str = field(init=False)
    rounded_radius_km: str = field(init=False)

    def __post_init__(self) -> None:
        """Compute the quantized triple."""
        object.__setattr__(
            self, "rounded_latitude", _quantize(self.latitude, LATITUDE_STEP)
        )
        object.__setattr__(
            self, "rounded_longitude", _quantize(self.longitude, LONGITUDE_STEP)
        )
        object.__setattr__(
            self, "rounded_radius_km", _quantize(self.radius_km, RADIUS_STEP)
        )

    @property
    def quantized(self) -> tuple:
        """Rounded (latitude, longitude, radius) triple as strings."""
        return (self.rounded_latitude, self.rounded_longitude, self.rounded_radius_km)

    def same_area(self, other: "AreaQuery") -> bool:
        """Check whether two queries collapse onto the same cache entry."""
        return self.quantized == other.quantized

    def to_key(self) -> "CacheKey":
        """Build the area cache key."""
        return CacheKey(f"{CacheNamespace.AREA.value}:{':'.join(self.quantized)}")

    def __str__(self) -> str:
        return (
            f"({self.rounded_latitude}, {self.rounded_longitude}) "
            f"r={self.rounded_radius_km}km"
        )


@dataclass(frozen=True)
class CacheKey:
    """
    Immutable cache key value object.

    Enforces key naming conventions and provides validation.
    """

    value: str

    def __post_init__(self) -> None:
        """Validate cache key format."""
        if not self.value:
            raise ValueError("Cache key cannot be empty")

        if len(self.value) > 250:
            raise ValueError("Cache key too long (max 250 characters)")

        if any(char.isspace() for char in self.value):
            raise ValueError("Cache key cannot contain whitespace")

    @classmethod
    def spot(cls, spot_id: SpotId) -> "CacheKey":
        """Create single spot cache key."""
        return cls(f"{CacheNamespace.SPOT.value}:{_identifier(spot_id, 'Spot ID')}")

    @classmethod
    def media(cls, spot_id: SpotId) -> "CacheKey":
        """Create spot media cache key."""
        return cls(f"{CacheNamespace.MEDIA.value}:{_identifier(spot_id, 'Spot ID')}")

    @classmethod
    def area(
        cls, latitude: Coordinate, longitude: Coordinate, radius_km: Coordinate
    ) -> "CacheKey":
        """Create area query cache key."""
        return AreaQuery(latitude, longitude, radius_km).to_key()

    @classmethod
    def user_favorites(cls, user_id: SpotId, by_priority: bool = False) -> "CacheKey":
        """Create user favorites list cache key."""
        user = _identifier(user_id, "User ID")
        return cls(f"{CacheNamespace.USER_FAVORITES.value}:{user}:{bool(by_priority)}")

    @classmethod
    def favorite_status(cls, user_id: SpotId, spot_id: SpotId) -> "CacheKey":
        """Create favorite status cache key."""
        user = _identifier(user_id, "User ID")
        spot = _identifier(spot_id, "Spot ID")
        return cls(f"{CacheNamespace.FAVORITE_STATUS.value}:{user}:{spot}")

    @classmethod
    def favorite_stats(cls, user_id: SpotId) -> "CacheKey":
        """Create favorite statistics cache key."""
        user = _identifier(user_id, "User ID")
        return cls(f"{CacheNamespace.FAVORITE_STATS.value}:{user}")

    @classmethod
    def spot_favorites_count(cls, spot_id: SpotId) -> "CacheKey":
        """Create per-spot favorites count cache key."""
        spot = _identifier(spot_id, "Spot ID")
        return cls(f"{CacheNamespace.SPOT_FAVORITES_COUNT.value}:{spot}")

    @property
    def namespace(self) -> Optional[CacheNamespace]:
        """Namespace derived from the key prefix, if it is a domain key."""
        prefix = self.value.split(":", 1)[0]
        try:
            return CacheNamespace(prefix)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


def key_or_empty(
    build: Callable[..., CacheKey], *identifiers: SpotId
) -> Union[CacheKey, str]:
    """
    Build a domain key, or the empty key when an identifier is blank.

    The store treats the empty key as a permanent miss, so facade reads
    of blank ids return nothing and writes are ignored.
    """
    for identifier in identifiers:
        text = str(identifier)
        if not text or text.isspace():
            return ""
    return build(*identifiers)


@dataclass(frozen=True)
class TTL:
    """
    Time To Live value object for cache expiration.

    A zero TTL describes an entry that is already dead when written.
    There is no upper bound: expiry past the representable range is
    clamped to "never expires" when the entry is created.
    """

    seconds: float

    def __post_init__(self) -> None:
        """Validate TTL value."""
        if math.isnan(self.seconds):
            raise ValueError("TTL must be a number")
        if self.seconds < 0:
            raise ValueError("TTL cannot be negative")

    @classmethod
    def from_seconds(cls, seconds: float) -> "TTL":
        """Create TTL from seconds."""
        return cls(seconds)

    @classmethod
    def minutes(cls, minutes: float) -> "TTL":
        """Create TTL from minutes."""
        return cls(minutes * 60)

    @classmethod
    def hours(cls, hours: float) -> "TTL":
        """Create TTL from hours."""
        return cls(hours * 3600)

    @classmethod
    def days(cls, days: float) -> "TTL":
        """Create TTL from days."""
        return cls(days * 86400)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> "TTL":
        """Create TTL from a timedelta."""
        return cls(delta.total_seconds())

    # Namespace presets
    @classmethod
    def spot(cls) -> "TTL":
        """Single spot TTL (30 minutes)."""
        return cls.minutes(30)

    @classmethod
    def area(cls) -> "TTL":
        """Area query TTL (15 minutes)."""
        return cls.minutes(15)

    @classmethod
    def media(cls) -> "TTL":
        """Spot media TTL (60 minutes)."""
        return cls.minutes(60)

    @classmethod
    def favorites(cls) -> "TTL":
        """User favorites list TTL (5 minutes)."""
        return cls.minutes(5)

    @classmethod
    def favorite_stats(cls) -> "TTL":
        """Favorite statistics TTL (10 minutes)."""
        return cls.minutes(10)

    @classmethod
    def favorite_status(cls) -> "TTL":
        """Favorite status TTL (15 minutes)."""
        return cls.minutes(15)

    def as_timedelta(self) -> timedelta:
        """Convert to timedelta."""
        return timedelta(seconds=self.seconds)

    def __str__(self) -> str:
        return f"{self.seconds:g}s"


def coerce_ttl(ttl: Optional[TTLLike]) -> Optional[TTL]:
    """
    Normalize TTL, timedelta or seconds into a TTL; None stays None.

    Negative durations are clamped to zero, so they produce entries that
    are dead on arrival.
    """
    if ttl is None or isinstance(ttl, TTL):
        return ttl
    if isinstance(ttl, timedelta):
        seconds = ttl.total_seconds()
    elif isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        raise TypeError(f"Unsupported TTL type: {type(ttl).__name__}")
    else:
        seconds = ttl
    if seconds < 0:
        seconds = 0.0
    return TTL(seconds)


class CacheStats(BaseModel):
    """Cache store counters for monitoring."""

    entries: int = Field(..., ge=0, description="Entries physically stored")
    hits: int = Field(0, ge=0, description="Live reads")
    misses: int = Field(0, ge=0, description="Reads of absent or dead keys")
    sets: int = Field(0, ge=0, description="Writes")
    removals: int = Field(0, ge=0, description="Explicit removals")
    expired_removals: int = Field(
        0, ge=0, description="Dead entries removed on observation"
    )
    swept: int = Field(0, ge=0, description="Dead entries removed by the sweep")
    sweeps: int = Field(0, ge=0, description="Completed sweep passes")
    shard_count: int = Field(..., ge=1, description="Lock-striped shards")
    sweep_interval_seconds: float = Field(..., gt=0, description="Sweep interval")
    sweeper_running: bool = Field(False, description="Background sweep active")

    @property
    def hit_ratio(self) -> float:
        """Share of reads that were hits."""
        total = self.hits + self.misses
        if total == 0:
            return 0.0
        return self.hits / total
