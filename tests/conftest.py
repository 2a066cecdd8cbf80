"""
Main pytest configuration for spotcache tests.

Fixtures for a controllable clock, fresh stores and sample spot data.
"""

import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

# Set test environment variables before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"

from spotcache.core.config import Settings
from spotcache.domain.spots.entities import Spot, SpotMedia, MediaType
from spotcache.infrastructure.memory.ttl_store import ShardedTTLStore


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = None):
        self.now = start or datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Provide a manually advanced clock."""
    return FakeClock()


@pytest.fixture
def test_settings():
    """Provide settings with default TTLs."""
    return Settings(ENVIRONMENT="test")


@pytest_asyncio.fixture
async def store(clock):
    """Create a store driven by the fake clock."""
    ttl_store = ShardedTTLStore(shard_count=4, sweep_interval_seconds=300, clock=clock)
    yield ttl_store
    await ttl_store.close()


def make_spot(spot_id: int, latitude="43.2969", longitude="5.3811") -> Spot:
    """Build a sample spot."""
    return Spot(
        id=spot_id,
        name=f"Spot {spot_id}",
        latitude=Decimal(latitude),
        longitude=Decimal(longitude),
        creator_id=1,
        type_id=1,
        max_depth=18,
    )


@pytest.fixture
def sample_spots():
    """Provide three spots in the Marseille area."""
    return [
        make_spot(1, "43.2969", "5.3811"),
        make_spot(2, "43.2101", "5.4432"),
        make_spot(3, "43.1987", "5.3575"),
    ]


@pytest.fixture
def sample_media():
    """Provide an ordered media list for spot 1."""
    return [
        SpotMedia(id=10, spot_id=1, media_url="https://cdn.example.com/10.jpg", is_primary=True),
        SpotMedia(id=11, spot_id=1, media_url="https://cdn.example.com/11.mp4", media_type=MediaType.VIDEO),
        SpotMedia(id=12, spot_id=1, media_url="https://cdn.example.com/12.jpg"),
    ]


@pytest.fixture
def spot_factory():
    """Provide the sample spot builder."""
    return make_spot
