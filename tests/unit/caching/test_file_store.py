"""Tests for FileStore (async).

Tests the filesystem-backed cache tier.
"""

import json

import pytest

from depcache.core.caching import FileStore, ManualClock
from depcache.core.io import AbsolutePath, FakeFileSystem, absolute_path

ROOT = absolute_path("/project/.cache")


@pytest.fixture
async def store(fs: FakeFileSystem, clock: ManualClock) -> FileStore:
    """Provide initialized FileStore with 1s TTL."""
    s = FileStore(fs, ROOT, ttl_ms=1000, clock=clock)
    await s.initialize()
    return s


class TestInitialization:
    """Tests for store initialization."""

    async def test_initialize_creates_root(self, fs: FakeFileSystem, clock: ManualClock):
        """Test initialize creates cache directory."""
        s = FileStore(fs, ROOT, ttl_ms=1000, clock=clock)
        await s.initialize()

        assert await fs.listdir(ROOT) == []

    async def test_initialize_twice(self, store: FileStore):
        """Test initialize is idempotent."""
        await store.initialize()

    async def test_entry_path(self, store: FileStore):
        """Test entry file is named after the key."""
        assert str(store.entry_path("abc")) == "/project/.cache/abc.json"


class TestGetSet:
    """Tests for storing and loading entries."""

    async def test_set_then_get(self, store: FileStore):
        """Test stored value is returned."""
        data = {"message": "hello world"}
        await store.set("test-key", data)

        assert await store.get("test-key") == data

    async def test_missing_entry(self, store: FileStore):
        """Test nonexistent key is a miss."""
        assert await store.get("nonexistent") is None

    async def test_set_overwrites(self, store: FileStore):
        """Test set replaces the previous value."""
        await store.set("k", "first")
        await store.set("k", "second")

        assert await store.get("k") == "second"

    async def test_file_format(self, store: FileStore, fs: FakeFileSystem, clock: ManualClock):
        """Test on-disk JSON layout."""
        await store.set("k", [1, 2, 3])

        data = json.loads(await fs.read_text(store.entry_path("k")))
        assert data == {"value": [1, 2, 3], "storedAt": clock.now_ms(), "ttl": 1000}

    async def test_file_format_with_source(
        self, store: FileStore, fs: FakeFileSystem, source_file: AbsolutePath
    ):
        """Test source mtime is recorded when a source path is given."""
        await store.set("k", "v", source_file)

        data = json.loads(await fs.read_text(store.entry_path("k")))
        assert data["sourceMtime"] == (await fs.stat(source_file)).mtime_ms

    async def test_corrupt_file_is_miss(self, store: FileStore, fs: FakeFileSystem):
        """Test unparsable entry is treated as a miss."""
        await fs.write_text(store.entry_path("k"), "invalid json")

        assert await store.get("k") is None

    async def test_wrong_shape_is_miss(self, store: FileStore, fs: FakeFileSystem):
        """Test JSON missing required fields is a miss."""
        await fs.write_text(store.entry_path("k"), '{"value": 1}')

        assert await store.get("k") is None

    async def test_unreadable_file_is_miss(
        self, store: FileStore, fs: FakeFileSystem, monkeypatch: pytest.MonkeyPatch
    ):
        """Test read errors other than a missing file are treated as a miss."""
        await store.set("k", "v")

        async def denied(*args, **kwargs):
            raise PermissionError("denied")

        monkeypatch.setattr(fs, "read_text", denied)

        assert await store.get("k") is None

    async def test_get_entry_carries_metadata(
        self, store: FileStore, clock: ManualClock, source_file: AbsolutePath
    ):
        """Test get_entry exposes the stored timestamps alongside the value."""
        await store.set("k", "v", source_file, ttl_ms=5000)
        clock.advance(10)

        entry = await store.get_entry("k", source_file)
        assert entry is not None
        assert entry.value == "v"
        assert entry.stored_at == clock.now_ms() - 10
        assert entry.ttl == 5000

    async def test_missing_source_on_set_raises(self, store: FileStore):
        """Test storing against a nonexistent source file fails."""
        with pytest.raises(FileNotFoundError):
            await store.set("k", "v", absolute_path("/project/missing.js"))


class TestExpiry:
    """Tests for TTL handling."""

    async def test_live_before_ttl(self, store: FileStore, clock: ManualClock):
        """Test entry is live at T+999."""
        await store.set("k", "v")
        clock.advance(999)

        assert await store.get("k") == "v"

    async def test_expired_after_ttl(self, store: FileStore, clock: ManualClock):
        """Test entry is absent at T+1100."""
        await store.set("k", "v")
        clock.advance(1100)

        assert await store.get("k") is None

    async def test_expired_read_does_not_delete(
        self, store: FileStore, fs: FakeFileSystem, clock: ManualClock
    ):
        """Test reads leave expired files for the sweep."""
        await store.set("k", "v")
        clock.advance(1100)

        await store.get("k")
        assert await fs.is_file(store.entry_path("k"))

    async def test_stored_ttl_is_used(self, fs: FakeFileSystem, clock: ManualClock):
        """Test expiry follows the TTL recorded in the file."""
        writer = FileStore(fs, ROOT, ttl_ms=10_000, clock=clock)
        reader = FileStore(fs, ROOT, ttl_ms=10, clock=clock)
        await writer.initialize()

        await writer.set("k", "v")
        clock.advance(5000)

        assert await reader.get("k") == "v"

    async def test_per_call_ttl_override(self, store: FileStore, clock: ManualClock):
        """Test per-call TTL overrides the store default."""
        await store.set("k", "v", ttl_ms=5000)
        clock.advance(2000)

        assert await store.get("k") == "v"


class TestStaleness:
    """Tests for source mtime validation."""

    async def test_unchanged_source_hits(self, store: FileStore, source_file: AbsolutePath):
        """Test entry is valid while source is unchanged."""
        await store.set("k", {"parsed": True}, source_file)

        assert await store.get("k", source_file) == {"parsed": True}

    async def test_modified_source_misses(
        self, store: FileStore, fs: FakeFileSystem, source_file: AbsolutePath
    ):
        """Test entry becomes stale once the source is rewritten."""
        await store.set("k", {"parsed": True}, source_file)
        await fs.write_text(source_file, 'console.log("modified");')

        assert await store.get("k", source_file) is None

    async def test_reverted_mtime_hits_again(
        self, store: FileStore, fs: FakeFileSystem, source_file: AbsolutePath
    ):
        """Test staleness is evaluated per read, not persisted."""
        original = (await fs.stat(source_file)).mtime_ms
        await store.set("k", "v", source_file)

        fs.set_mtime(source_file, original + 5)
        assert await store.get("k", source_file) is None

        fs.set_mtime(source_file, original)
        assert await store.get("k", source_file) == "v"

    async def test_deleted_source_misses(
        self, store: FileStore, fs: FakeFileSystem, source_file: AbsolutePath
    ):
        """Test entry is stale when the source no longer exists."""
        await store.set("k", "v", source_file)
        await fs.remove(source_file)

        assert await store.get("k", source_file) is None

    async def test_entry_without_mtime_is_stale_for_source(
        self, store: FileStore, source_file: AbsolutePath
    ):
        """Test entry stored without a source fails a source-checked read."""
        await store.set("k", "v")

        assert await store.get("k", source_file) is None
        assert await store.get("k") == "v"

    async def test_read_without_source_skips_check(
        self, store: FileStore, fs: FakeFileSystem, source_file: AbsolutePath
    ):
        """Test mtime is only checked when a source path is given."""
        await store.set("k", "v", source_file)
        await fs.write_text(source_file, "changed")

        assert await store.get("k") == "v"


class TestDeleteClear:
    """Tests for removal."""

    async def test_delete(self, store: FileStore, fs: FakeFileSystem):
        """Test delete removes the backing file."""
        await store.set("k", "v")
        await store.delete("k")

        assert not await fs.is_file(store.entry_path("k"))
        assert await store.get("k") is None

    async def test_delete_missing_does_not_raise(self, store: FileStore):
        """Test deleting a nonexistent entry is a no-op."""
        await store.delete("nonexistent")

    async def test_clear_removes_all_files(self, store: FileStore, fs: FakeFileSystem):
        """Test clear removes every file in the directory."""
        await store.set("a", 1)
        await store.set("b", 2)
        await fs.write_text(fs.join(ROOT, "stray.tmp"), "x")

        assert await store.clear() == 3
        assert await fs.listdir(ROOT) == []

    async def test_clear_empty(self, store: FileStore):
        """Test clearing an empty directory."""
        assert await store.clear() == 0


class TestSweep:
    """Tests for sweep_expired()."""

    async def test_sweep_removes_expired(
        self, store: FileStore, fs: FakeFileSystem, clock: ManualClock
    ):
        """Test expired files are deleted, live files kept."""
        await store.set("old", "v")
        clock.advance(600)
        await store.set("new", "v")
        clock.advance(600)

        assert await store.sweep_expired() == 1
        assert not await fs.is_file(store.entry_path("old"))
        assert await fs.is_file(store.entry_path("new"))

    async def test_sweep_keeps_stale_but_live(
        self, store: FileStore, fs: FakeFileSystem, source_file: AbsolutePath
    ):
        """Test mtime mismatch alone does not trigger deletion."""
        await store.set("k", "v", source_file)
        await fs.write_text(source_file, "changed")

        assert await store.sweep_expired() == 0
        assert await fs.is_file(store.entry_path("k"))

    async def test_sweep_removes_corrupt(self, store: FileStore, fs: FakeFileSystem):
        """Test unparsable entry files are removed."""
        await fs.write_text(store.entry_path("bad"), "not json")

        assert await store.sweep_expired() == 1

    async def test_sweep_skips_directories(self, store: FileStore, fs: FakeFileSystem):
        """Test a directory with an entry-like name is left alone."""
        await fs.mkdirs(fs.join(ROOT, "nested.json"))

        assert await store.sweep_expired() == 0
        assert await fs.listdir(ROOT) == ["nested.json"]

    async def test_sweep_ignores_non_entry_files(self, store: FileStore, fs: FakeFileSystem):
        """Test files without the entry suffix are left alone."""
        stray = fs.join(ROOT, "notes.txt")
        await fs.write_text(stray, "keep me")

        assert await store.sweep_expired() == 0
        assert await fs.is_file(stray)


class TestStats:
    """Tests for stats()."""

    async def test_stats_counts_entries(self, store: FileStore):
        """Test file count and total size."""
        await store.set("a", "data1")
        await store.set("b", "data2")

        file_items, total_size = await store.stats()
        assert file_items == 2
        assert total_size > 0

    async def test_stats_empty(self, store: FileStore):
        """Test empty directory."""
        assert await store.stats() == (0, 0)

    async def test_stats_matches_clear(self, store: FileStore, fs: FakeFileSystem):
        """Test stats counts every file that clear() would remove."""
        await store.set("a", "data1")
        await fs.write_text(fs.join(ROOT, "notes.txt"), "stray")

        file_items, total_size = await store.stats()
        assert file_items == 2
        assert total_size == (await fs.stat(store.entry_path("a"))).size + len("stray")
        assert await store.clear() == file_items

    async def test_stats_skips_directories(self, store: FileStore, fs: FakeFileSystem):
        """Test subdirectories are not counted."""
        await fs.mkdirs(fs.join(ROOT, "nested.json"))

        assert await store.stats() == (0, 0)
