"""
Spot Domain Entities

Entities served by the domain cache. They are owned by the backing store;
the cache treats them as opaque values keyed by their identifiers.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class DifficultyLevel(int, Enum):
    """Spot difficulty levels."""

    BEGINNER = 1
    INTERMEDIATE = 2
    ADVANCED = 3
    EXPERT = 4
    TECHNICAL_ONLY = 5


class SpotValidationStatus(str, Enum):
    """Moderation status of a spot."""

    DRAFT = "draft"
    PENDING = "pending"
    NEEDS_REVISION = "needs_revision"
    APPROVED = "approved"
    REJECTED = "rejected"
    ARCHIVED = "archived"


class CurrentStrength(str, Enum):
    """Water current strength at a spot."""

    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    STRONG = "strong"
    EXTREME = "extreme"


class MediaType(str, Enum):
    """Spot media types."""

    PHOTO = "photo"
    VIDEO = "video"
    PANORAMA = "panorama"
    DOCUMENT = "document"


class MediaStatus(str, Enum):
    """Spot media processing status."""

    PENDING = "pending"
    PROCESSING = "processing"
    ACTIVE = "active"
    REJECTED = "rejected"
    ARCHIVED = "archived"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Spot:
    """
    Spot entity.

    A geolocated dive or activity site.
    """

    id: int
    name: str
    latitude: Decimal
    longitude: Decimal
    creator_id: int = 0
    type_id: int = 0
    description: str = ""
    difficulty_level: DifficultyLevel = DifficultyLevel.BEGINNER
    validation_status: SpotValidationStatus = SpotValidationStatus.PENDING
    required_equipment: str = ""
    safety_notes: str = ""
    best_conditions: str = ""
    max_depth: Optional[int] = None
    current_strength: Optional[CurrentStrength] = None
    has_mooring: Optional[bool] = None
    bottom_type: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        """Validate coordinates."""
        self.latitude = Decimal(str(self.latitude))
        self.longitude = Decimal(str(self.longitude))
        if not Decimal(-90) <= self.latitude <= Decimal(90):
            raise ValueError("Latitude must be between -90 and 90")
        if not Decimal(-180) <= self.longitude <= Decimal(180):
            raise ValueError("Longitude must be between -180 and 180")


@dataclass
class SpotMedia:
    """Media item attached to a spot."""

    id: int
    spot_id: int
    media_url: str
    media_type: MediaType = MediaType.PHOTO
    status: MediaStatus = MediaStatus.PENDING
    is_primary: bool = False
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    file_size: Optional[int] = None
    content_type: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)


@dataclass
class UserFavoriteSpot:
    """A user's favorite spot relationship."""

    id: int
    user_id: int
    spot_id: int
    priority: int = 5
    notification_enabled: bool = True
    notes: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Validate priority range."""
        if not 1 <= self.priority <= 10:
            raise ValueError("Priority must be between 1 and 10")


class FavoriteSpotStats(BaseModel):
    """Aggregated favorite statistics for a user."""

    total_favorites: int = Field(0, ge=0, description="Number of favorites")
    notification_enabled: int = Field(
        0, ge=0, description="Favorites with notifications enabled"
    )
    high_priority_favorites: int = Field(
        0, ge=0, description="Favorites with priority 1-3"
    )
    favorites_by_type: Dict[str, int] = Field(
        default_factory=dict, description="Favorite counts per spot type"
    )
    most_recent_favorite: Optional[datetime] = None
    oldest_favorite: Optional[datetime] = None

    @classmethod
    def from_favorites(cls, favorites: List[UserFavoriteSpot]) -> "FavoriteSpotStats":
        """Compute statistics from a list of favorites."""
        created = [favorite.created_at for favorite in favorites]
        return cls(
            total_favorites=len(favorites),
            notification_enabled=sum(1 for f in favorites if f.notification_enabled),
            high_priority_favorites=sum(1 for f in favorites if f.priority <= 3),
            most_recent_favorite=max(created) if created else None,
            oldest_favorite=min(created) if created else None,
        )
