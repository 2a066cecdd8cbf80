"""
In-Memory Cache Infrastructure

Process-local TTL store with lock-striped shards and a background
expiration sweep.
"""

from .exceptions import (
    CacheException,
    CacheConfigurationException,
    CacheClosedException,
)
from .ttl_store import ShardedTTLStore

__all__ = [
    "CacheException",
    "CacheConfigurationException",
    "CacheClosedException",
    "ShardedTTLStore",
]
