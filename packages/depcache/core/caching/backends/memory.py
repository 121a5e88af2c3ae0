"""In-memory cache tier.

Bounded, process-local store with per-entry TTL and insertion-order
eviction. Expiry is checked lazily on read.
"""

import logging
import threading
from collections import OrderedDict
from typing import Any

from depcache.core.caching.clock import Clock, SystemClock
from depcache.core.caching.models import CacheEntry

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    Thread-safe in-memory store.

    When more than ``capacity`` keys are held, the oldest-inserted key is
    evicted. Overwriting an existing key updates its value but keeps its
    position in the eviction order.
    """

    def __init__(
        self,
        ttl_ms: int,
        capacity: int | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize memory store.

        Args:
            ttl_ms: Default entry lifetime in milliseconds
            capacity: Maximum number of keys (None = unbounded)
            clock: Time provider (defaults to wall clock)
        """
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.ttl_ms = ttl_ms
        self.capacity = capacity
        self._clock = clock or SystemClock()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Any | None:
        """Return the live value for key, or None (expired entries are dropped)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock.now_ms()):
                del self._entries[key]
                logger.debug("Memory entry expired: %s", key)
                return None
            return entry.value

    def set(self, key: str, value: Any, ttl_ms: int | None = None) -> None:
        """Insert or overwrite key, evicting the oldest key when over capacity."""
        entry = CacheEntry(
            value=value,
            stored_at=self._clock.now_ms(),
            ttl=self.ttl_ms if ttl_ms is None else ttl_ms,
        )
        with self._lock:
            self._entries[key] = entry
            if self.capacity is not None and len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Memory store over capacity, evicted: %s", evicted)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        """Physical presence check (ignores expiry)."""
        with self._lock:
            return key in self._entries
