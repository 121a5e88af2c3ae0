"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O.
Async operations complete immediately but maintain async interface.
"""

from pathlib import Path

from .models import AbsolutePath, FileStat, WriteResult

# Arbitrary epoch-ms origin for simulated modification times
_MTIME_ORIGIN_MS = 1_700_000_000_000.0


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    Every write bumps a simulated modification time so rewritten files
    always report a different mtime. Not thread-safe (use per-test instance).
    """

    def __init__(self) -> None:
        self._files: dict[str, str] = {}
        self._mtimes: dict[str, float] = {}
        self._dirs: set[str] = {"/"}  # Root always exists
        self._tick = _MTIME_ORIGIN_MS

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts)

        if not result.is_absolute():
            result = Path("/") / result

        return AbsolutePath(result)

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if file (async, immediate)."""
        return str(Path(path)) in self._files

    async def stat(self, path: AbsolutePath) -> FileStat:
        """Stat file (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return FileStat(
            mtime_ms=self._mtimes[path_str],
            size=len(self._files[path_str].encode("utf-8")),
        )

    def set_mtime(self, path: AbsolutePath, mtime_ms: float) -> None:
        """Override the simulated modification time of an existing file."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        self._mtimes[path_str] = mtime_ms

    async def read_text(self, path: AbsolutePath, encoding: str = "utf-8") -> str:
        """Read text (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]

    async def write_text(
        self,
        path: AbsolutePath,
        content: str,
        encoding: str = "utf-8",
    ) -> WriteResult:
        """Write text (async, immediate)."""
        path_obj = Path(path)
        path_str = str(path_obj)

        if str(path_obj.parent) not in self._dirs:
            self._ensure_parents(path_obj.parent)

        self._tick += 1.0
        self._files[path_str] = content
        self._mtimes[path_str] = self._tick

        return WriteResult(
            path=path_str,
            bytes_written=len(content.encode(encoding)),
            duration_ms=0.0,
        )

    def _ensure_parents(self, path: Path) -> None:
        """Recursively create parent directories (sync helper)."""
        parts = path.parts
        for i in range(1, len(parts) + 1):
            self._dirs.add(str(Path(*parts[:i])))

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory (async, immediate)."""
        path_str = str(Path(path))
        if not exist_ok and path_str in self._dirs:
            raise FileExistsError(f"Directory exists: {path}")
        if path_str in self._files:
            raise FileExistsError(f"File exists: {path}")
        self._ensure_parents(Path(path))

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """List directory (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        children = []
        for file_path in self._files:
            if Path(file_path).parent == Path(path_str):
                children.append(Path(file_path).name)
        for dir_path in self._dirs:
            if dir_path != path_str and Path(dir_path).parent == Path(path_str):
                children.append(Path(dir_path).name)

        return sorted(set(children))

    async def remove(self, path: AbsolutePath) -> None:
        """Remove file (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        del self._files[path_str]
        del self._mtimes[path_str]
