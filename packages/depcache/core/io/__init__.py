"""Filesystem abstraction layer for depcache.

Provides safe, testable, async-first filesystem operations.

Example:
    >>> from depcache.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "cache", "test.txt")
    >>> await fs.write_text(path, "Hello, world!")
    >>> content = await fs.read_text(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, FileStat, WriteResult, absolute_path
from .protocols import FileSystem

__all__ = [
    # Path types and constructors
    "AbsolutePath",
    "absolute_path",
    # Result types
    "FileStat",
    "WriteResult",
    # Protocols
    "FileSystem",
    # Implementations
    "RealFileSystem",
    "FakeFileSystem",
]
