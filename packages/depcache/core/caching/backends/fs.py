"""Filesystem-backed cache tier using core.io for all operations.

One JSON file per key (``<root>/<key>.json``), written atomically.
Reads never delete; expired entries are removed by sweep_expired().
"""

import asyncio
import logging
from typing import Any

from depcache.core.caching.clock import Clock, SystemClock
from depcache.core.caching.models import CacheEntry
from depcache.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".json"


class FileStore:
    """
    Async filesystem-backed store with TTL and source mtime validation.

    Call initialize() before use.
    """

    def __init__(
        self,
        fs: FileSystem,
        root: AbsolutePath,
        ttl_ms: int,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize filesystem store.

        Args:
            fs: Async filesystem implementation
            root: Absolute path to cache directory
            ttl_ms: Default entry lifetime in milliseconds
            clock: Time provider (defaults to wall clock)
        """
        self.fs = fs
        self.root = root
        self.ttl_ms = ttl_ms
        self._clock = clock or SystemClock()

    async def initialize(self) -> None:
        """Ensure the cache directory exists. Safe to call multiple times."""
        await self.fs.mkdirs(self.root, exist_ok=True)

    def entry_path(self, key: str) -> AbsolutePath:
        """Compute entry file path (sync)."""
        return self.fs.join(self.root, f"{key}{ENTRY_SUFFIX}")

    async def _read_entry(self, path: AbsolutePath) -> CacheEntry | None:
        """Load and validate an entry file, None if missing or unreadable."""
        try:
            raw = await self.fs.read_text(path)
            return CacheEntry.model_validate_json(raw)
        except FileNotFoundError:
            return None
        except (ValueError, OSError) as e:
            logger.debug("Unreadable cache file treated as miss: %s (%s)", path, e)
            return None

    async def get_entry(
        self, key: str, source_path: AbsolutePath | None = None
    ) -> CacheEntry | None:
        """
        Load a live entry.

        Args:
            key: Cache key
            source_path: Source file the entry was derived from. When given,
                the entry is only valid if the file's current mtime equals
                the mtime recorded at write time.

        Returns:
            The stored entry, or None on miss/corruption/expiry/staleness
        """
        entry = await self._read_entry(self.entry_path(key))
        if entry is None:
            return None

        if entry.is_expired(self._clock.now_ms()):
            logger.debug("File entry expired: %s", key)
            return None

        if source_path is not None:
            try:
                current = await self.fs.stat(source_path)
            except FileNotFoundError:
                logger.debug("Source file missing, entry stale: %s", source_path)
                return None
            if entry.source_mtime != current.mtime_ms:
                logger.debug("Source file changed, entry stale: %s", source_path)
                return None

        return entry

    async def get(self, key: str, source_path: AbsolutePath | None = None) -> Any | None:
        """Load a cached value (see get_entry())."""
        entry = await self.get_entry(key, source_path)
        return None if entry is None else entry.value

    async def set(
        self,
        key: str,
        value: Any,
        source_path: AbsolutePath | None = None,
        ttl_ms: int | None = None,
    ) -> None:
        """
        Store a value atomically.

        Args:
            key: Cache key
            value: JSON-serializable payload
            source_path: Optional source file whose mtime is recorded
            ttl_ms: Optional per-entry TTL override

        Raises:
            OSError: On stat or write failure
            PydanticSerializationError: If value is not JSON-serializable
        """
        source_mtime = None
        if source_path is not None:
            source_mtime = (await self.fs.stat(source_path)).mtime_ms

        entry = CacheEntry(
            value=value,
            stored_at=self._clock.now_ms(),
            ttl=self.ttl_ms if ttl_ms is None else ttl_ms,
            source_mtime=source_mtime,
        )
        result = await self.fs.write_text(self.entry_path(key), entry.to_json())
        logger.debug("Stored %s (%d bytes)", key, result.bytes_written)

    async def delete(self, key: str) -> None:
        """Remove the entry file; a missing file is not an error."""
        await self._remove(self.entry_path(key))

    async def _remove(self, path: AbsolutePath) -> bool:
        try:
            await self.fs.remove(path)
        except FileNotFoundError:
            return False
        return True

    async def _files(self) -> list[AbsolutePath]:
        """Regular files directly under the cache directory."""
        paths = [self.fs.join(self.root, name) for name in await self.fs.listdir(self.root)]
        return [p for p in paths if await self.fs.is_file(p)]

    async def clear(self) -> int:
        """
        Remove every file in the cache directory.

        Returns:
            Number of files removed
        """
        removed = await asyncio.gather(*(self._remove(p) for p in await self._files()))
        count = sum(removed)
        logger.debug("Cleared %d cache files from %s", count, self.root)
        return count

    async def sweep_expired(self) -> int:
        """
        Delete entries whose TTL has elapsed.

        Source mtime mismatch alone never triggers deletion. Entry files that
        cannot be decoded or parsed are removed as well, since they can never
        be served.

        Returns:
            Number of files removed
        """
        now_ms = self._clock.now_ms()

        async def sweep_one(path: AbsolutePath) -> bool:
            try:
                entry = CacheEntry.model_validate_json(await self.fs.read_text(path))
            except FileNotFoundError:
                return False
            except ValueError:
                return await self._remove(path)
            if entry.is_expired(now_ms):
                return await self._remove(path)
            return False

        entries = [p for p in await self._files() if p.name.endswith(ENTRY_SUFFIX)]
        removed = await asyncio.gather(*(sweep_one(p) for p in entries))
        count = sum(removed)
        if count:
            logger.info("Swept %d expired cache files from %s", count, self.root)
        return count

    async def stats(self) -> tuple[int, int]:
        """
        Count files in the cache directory and their total size.

        Every regular file counts, matching what clear() removes.

        Returns:
            (file_items, total_size_bytes)
        """

        async def size_of(path: AbsolutePath) -> int | None:
            try:
                return (await self.fs.stat(path)).size
            except FileNotFoundError:
                return None

        sizes = await asyncio.gather(*(size_of(p) for p in await self._files()))
        present = [s for s in sizes if s is not None]
        return len(present), sum(present)
