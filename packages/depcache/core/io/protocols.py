"""Filesystem operations needed by the on-disk cache tier."""

from typing import Protocol

from .models import AbsolutePath, FileStat, WriteResult


class FileSystem(Protocol):
    """
    Async filesystem surface consumed by FileStore.

    Implementations raise FileNotFoundError for missing targets so the
    cache can tell a miss apart from a real I/O failure.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Build a path under base (no I/O).

        Raises:
            ValueError: If the result would leave base
        """
        ...

    async def is_file(self, path: AbsolutePath) -> bool:
        """True if path is an existing regular file."""
        ...

    async def stat(self, path: AbsolutePath) -> FileStat:
        """
        Modification time (epoch ms) and size of a file.

        Used both for entry sizes and for source-file staleness checks.

        Raises:
            FileNotFoundError: If path doesn't exist
        """
        ...

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """
        Read a whole entry file.

        Raises:
            FileNotFoundError: If path doesn't exist
            UnicodeDecodeError: If the bytes are not valid in encoding
        """
        ...

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """
        Replace path with content in one step, creating parent directories.

        Concurrent readers see either the old entry or the new one. On
        failure the old entry is left untouched.

        Raises:
            OSError: On write failure
        """
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """
        Create the cache directory and its parents.

        Raises:
            FileExistsError: If a file occupies path, or it exists and not exist_ok
        """
        ...

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """
        Names directly under path.

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def remove(self, path: AbsolutePath) -> None:
        """
        Delete a file.

        Raises:
            FileNotFoundError: If path doesn't exist
        """
        ...
