"""Cache tier implementations."""

from depcache.core.caching.backends.fs import FileStore
from depcache.core.caching.backends.memory import MemoryStore

__all__ = ["FileStore", "MemoryStore"]
