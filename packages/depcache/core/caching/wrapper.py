"""Read-through helper for cacheable computations."""

import logging
import time
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from depcache.core.caching.tiered import TieredCache

logger = logging.getLogger(__name__)


async def cached_call(
    cache: TieredCache,
    namespace: str,
    compute: Callable[[], Awaitable[Any]],
    source_path: str | Path | None = None,
    force: bool = False,
) -> Any:
    """
    Return a cached result, computing and storing it on a miss.

    Workflow:
    1. Look up (namespace, source_path) unless force is set
    2. On miss: await compute(), store the result
    3. Return the result

    Args:
        cache: Initialized tiered cache
        namespace: Logical namespace (e.g., "ast.parse")
        compute: Async function producing the value on a miss
        source_path: Source file the value is derived from
        force: Ignore cached value and recompute (result is still stored)

    Returns:
        Cached or freshly computed value

    Example:
        >>> ast = await cached_call(
        ...     cache,
        ...     "ast.parse",
        ...     lambda: parse_file_async("src/app.js"),
        ...     source_path="src/app.js",
        ... )
    """
    if not force:
        value = await cache.get(namespace, source_path)
        if value is not None:
            return value

    start = time.perf_counter()
    value = await compute()
    compute_ms = (time.perf_counter() - start) * 1000
    logger.debug("Computed %s in %.1f ms", namespace, compute_ms)

    await cache.set(namespace, value, source_path)
    return value
