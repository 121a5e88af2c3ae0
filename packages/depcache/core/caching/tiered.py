"""Two-tier cache facade.

Composes MemoryStore (fast, process-local) and FileStore (persistent)
with read-through / write-through semantics:

- get: memory → file (backfilling memory on a file hit) → miss
- set: memory, then file (best effort; file failures are logged and counted)
"""

import logging
from pathlib import Path
from typing import Any

from pydantic_core import PydanticSerializationError

from depcache.core.caching.backends.fs import FileStore
from depcache.core.caching.backends.memory import MemoryStore
from depcache.core.caching.clock import Clock, SystemClock
from depcache.core.caching.errors import CacheInitializationError, CacheNotInitializedError
from depcache.core.caching.keys import generate_key
from depcache.core.caching.models import CacheStats
from depcache.core.config.models import CacheConfig
from depcache.core.io import AbsolutePath, FileSystem, RealFileSystem, absolute_path

logger = logging.getLogger(__name__)


def _resolve(path: str | Path) -> AbsolutePath:
    return absolute_path(Path(path).resolve())


class TieredCache:
    """
    Read-through / write-through cache over a memory and a file tier.

    Each instance owns its tiers; create as many as needed (e.g. one per test).
    When ``config.enabled`` is False every operation short-circuits without I/O.

    Example:
        >>> cache = TieredCache(CacheConfig(ttl=60_000))
        >>> await cache.initialize("/path/to/project")
        >>> value = await cache.get("ast.parse", "src/app.js")
        >>> if value is None:
        ...     value = parse("src/app.js")
        ...     await cache.set("ast.parse", value, "src/app.js")
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        fs: FileSystem | None = None,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize cache facade.

        Args:
            config: Cache configuration (defaults apply when None)
            fs: Async filesystem implementation (defaults to RealFileSystem)
            clock: Time provider shared by both tiers (defaults to wall clock)
        """
        self.config = config or CacheConfig()
        self.fs = fs or RealFileSystem()
        self.clock = clock or SystemClock()
        self.memory = MemoryStore(
            ttl_ms=self.config.ttl,
            capacity=self.config.max_memory_items,
            clock=self.clock,
        )
        self._file: FileStore | None = None
        self._file_write_errors = 0

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    @property
    def file(self) -> FileStore:
        """File tier (available after initialize())."""
        if self._file is None:
            raise CacheNotInitializedError("Cache used before initialize()")
        return self._file

    @property
    def cache_dir(self) -> AbsolutePath:
        """Resolved on-disk cache directory (available after initialize())."""
        return self.file.root

    async def initialize(self, base_dir: str | Path) -> None:
        """
        Resolve ``<base_dir>/<config.directory>`` and ensure it exists.

        Args:
            base_dir: Project directory the cache directory lives under

        Raises:
            CacheInitializationError: If the directory cannot be created
        """
        if not self.enabled:
            return

        root = _resolve(Path(base_dir) / self.config.directory)
        store = FileStore(self.fs, root, ttl_ms=self.config.ttl, clock=self.clock)
        try:
            await store.initialize()
        except OSError as e:
            raise CacheInitializationError(f"Cannot create cache directory {root}: {e}") from e

        self._file = store
        logger.debug("Cache initialized at %s", root)

    def generate_key(self, namespace: str, source_path: str | Path | None = None) -> str:
        """Key for a namespace and optional source file (paths are resolved)."""
        file_path = str(_resolve(source_path)) if source_path is not None else None
        return generate_key(namespace, {"filePath": file_path})

    async def get(self, namespace: str, source_path: str | Path | None = None) -> Any | None:
        """
        Look up a value, memory first, then disk.

        Args:
            namespace: Logical namespace of the cached computation
            source_path: Source file the value was derived from; a changed
                file invalidates the on-disk entry

        Returns:
            Cached value, or None on miss (always None when disabled)
        """
        if not self.enabled:
            return None

        store = self.file
        key = self.generate_key(namespace, source_path)

        value = self.memory.get(key)
        if value is not None:
            logger.debug("Memory hit: %s", namespace)
            return value

        source = _resolve(source_path) if source_path is not None else None
        entry = await store.get_entry(key, source)
        if entry is None or entry.value is None:
            logger.debug("Cache miss: %s", namespace)
            return None

        # Backfilled copy expires together with the file entry
        remaining = entry.stored_at + entry.ttl - self.clock.now_ms()
        logger.debug("File hit, backfilling memory: %s", namespace)
        self.memory.set(key, entry.value, ttl_ms=remaining)
        return entry.value

    async def set(self, namespace: str, value: Any, source_path: str | Path | None = None) -> None:
        """
        Store a value in both tiers.

        The memory write always happens first. A failed file write is logged
        and counted in get_stats().file_write_errors but never raised, since
        the value can still be served from memory.
        """
        if not self.enabled:
            return

        store = self.file
        key = self.generate_key(namespace, source_path)

        self.memory.set(key, value)

        source = _resolve(source_path) if source_path is not None else None
        try:
            await store.set(key, value, source)
        except (OSError, PydanticSerializationError) as e:
            self._file_write_errors += 1
            logger.warning("File cache write failed for %s (%s): %s", namespace, key, e)

    async def clear(self) -> None:
        """Empty the memory tier and remove all cache files."""
        if not self.enabled:
            return

        store = self.file
        self.memory.clear()
        removed = await store.clear()
        logger.info("Cache cleared (%d files removed)", removed)

    async def clean_expired_cache(self) -> int:
        """
        Delete expired files from the file tier.

        Memory entries expire lazily on read and need no sweep.

        Returns:
            Number of files removed
        """
        if not self.enabled:
            return 0
        return await self.file.sweep_expired()

    async def get_stats(self) -> CacheStats:
        """Entry counts for both tiers and total on-disk size."""
        if not self.enabled:
            return CacheStats(memory_items=len(self.memory))

        file_items, total_size = await self.file.stats()
        return CacheStats(
            memory_items=len(self.memory),
            file_items=file_items,
            total_size=total_size,
            file_write_errors=self._file_write_errors,
        )
