"""On-disk FileSystem backed by aiofiles.

Entry files are replaced atomically: content goes to a hidden temp file in
the cache directory, which is then renamed over the target.
"""

import asyncio
import contextlib
import os
import time
from pathlib import Path
from tempfile import NamedTemporaryFile

import aiofiles  # type: ignore[import-untyped]
import aiofiles.os  # type: ignore[import-untyped]

from .models import AbsolutePath, FileStat, WriteResult

TEMP_PREFIX = ".tmp-"


class RealFileSystem:
    """Async access to the local disk for the file cache tier."""

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        root = Path(base).resolve()
        target = root.joinpath(*parts).resolve()
        if not target.is_relative_to(root):
            raise ValueError(f"Path traversal detected: {target} escapes {base}")
        return AbsolutePath(target)

    async def is_file(self, path: AbsolutePath) -> bool:
        return bool(await aiofiles.os.path.isfile(path))

    async def stat(self, path: AbsolutePath) -> FileStat:
        st = await aiofiles.os.stat(path)
        # Nanosecond source keeps sub-millisecond mtime changes visible
        return FileStat(mtime_ms=st.st_mtime_ns / 1_000_000, size=st.st_size)

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        async with aiofiles.open(path, encoding=encoding) as f:
            content: str = await f.read()
            return content

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Write content to a temp file beside path, then os.replace() it into place."""
        start = time.perf_counter()
        target = Path(path)
        await aiofiles.os.makedirs(target.parent, exist_ok=True)

        loop = asyncio.get_running_loop()

        def reserve_temp() -> str:
            with NamedTemporaryFile(
                mode="w", dir=target.parent, prefix=TEMP_PREFIX, delete=False
            ) as tmp:
                return tmp.name

        tmp_path = await loop.run_in_executor(None, reserve_temp)
        try:
            async with aiofiles.open(tmp_path, mode="w", encoding=encoding) as f:
                await f.write(content)
            await loop.run_in_executor(None, os.replace, tmp_path, target)
        except BaseException:
            with contextlib.suppress(OSError):
                await aiofiles.os.unlink(tmp_path)
            raise

        return WriteResult(
            path=str(target),
            bytes_written=len(content.encode(encoding)),
            duration_ms=(time.perf_counter() - start) * 1000,
        )

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        await aiofiles.os.makedirs(path, exist_ok=exist_ok)

    async def listdir(self, path: AbsolutePath) -> list[str]:
        names: list[str] = await aiofiles.os.listdir(path)
        return names

    async def remove(self, path: AbsolutePath) -> None:
        await aiofiles.os.unlink(path)
