"""Two-tier caching for expensive per-file computations.

Key features:
- Deterministic cache keys (namespace + canonicalized params, MD5)
- Bounded in-memory tier with lazy TTL expiry and insertion-order eviction
- Async file tier using core.io (one JSON file per key, atomic writes)
- Source file mtime invalidation
- Injectable clock for deterministic expiry
"""

from depcache.core.caching.backends.fs import FileStore
from depcache.core.caching.backends.memory import MemoryStore
from depcache.core.caching.clock import Clock, ManualClock, SystemClock
from depcache.core.caching.errors import (
    CacheError,
    CacheInitializationError,
    CacheNotInitializedError,
)
from depcache.core.caching.keys import canonicalize, generate_key
from depcache.core.caching.models import CacheEntry, CacheStats
from depcache.core.caching.tiered import TieredCache
from depcache.core.caching.wrapper import cached_call

__all__ = [
    # Core
    "TieredCache",
    "CacheEntry",
    "CacheStats",
    # Tiers
    "FileStore",
    "MemoryStore",
    # Clocks
    "Clock",
    "ManualClock",
    "SystemClock",
    # Errors
    "CacheError",
    "CacheInitializationError",
    "CacheNotInitializedError",
    # Utils
    "cached_call",
    "canonicalize",
    "generate_key",
]
