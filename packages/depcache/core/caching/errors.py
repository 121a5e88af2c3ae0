"""Exceptions raised by the cache layer."""


class CacheError(Exception):
    """Base class for cache errors."""


class CacheInitializationError(CacheError):
    """Raised when the on-disk cache root cannot be created."""


class CacheNotInitializedError(CacheError):
    """Raised when an enabled cache is used before initialize()."""
