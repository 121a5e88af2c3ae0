"""Shared pytest fixtures for depcache tests."""

from __future__ import annotations

import pytest

from depcache.core.caching import ManualClock
from depcache.core.io import AbsolutePath, FakeFileSystem, absolute_path

# Arbitrary fixed start time for deterministic expiry tests
CLOCK_START_MS = 1_700_000_000_000


@pytest.fixture
def fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def clock() -> ManualClock:
    """Provide manually advanced clock."""
    return ManualClock(start_ms=CLOCK_START_MS)


@pytest.fixture
def project_root() -> AbsolutePath:
    """Project directory the cache lives under (fake filesystem)."""
    return absolute_path("/project")


@pytest.fixture
async def source_file(fs: FakeFileSystem, project_root: AbsolutePath) -> AbsolutePath:
    """Provide a source file on the fake filesystem."""
    path = fs.join(project_root, "src", "app.js")
    await fs.write_text(path, 'console.log("test");')
    return path
