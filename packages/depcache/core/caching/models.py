"""Models for cache system.

Provides the stored entry and statistics models.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CacheEntry(BaseModel):
    """
    Unit stored in either cache tier.

    Serialized to disk with camelCase field names:
    ``{"value": ..., "storedAt": ..., "ttl": ..., "sourceMtime": ...}``.
    """

    model_config = ConfigDict(populate_by_name=True)

    value: Any = Field(description="Cached payload")
    stored_at: int = Field(alias="storedAt", description="Write time (epoch milliseconds)")
    ttl: int = Field(ge=0, description="Lifetime in milliseconds")
    source_mtime: float | None = Field(
        default=None,
        alias="sourceMtime",
        description="Source file mtime (epoch milliseconds) at write time, file tier only",
    )

    def is_expired(self, now_ms: int) -> bool:
        """Entry is expired once more than ttl milliseconds have passed."""
        return now_ms - self.stored_at > self.ttl

    def to_json(self) -> str:
        """Serialize in the on-disk format (source mtime omitted when unset)."""
        exclude = {"source_mtime"} if self.source_mtime is None else None
        return self.model_dump_json(by_alias=True, exclude=exclude)


class CacheStats(BaseModel):
    """Point-in-time cache statistics."""

    memory_items: int = Field(default=0, ge=0, description="Entries held in memory")
    file_items: int = Field(default=0, ge=0, description="Files in the cache directory")
    total_size: int = Field(default=0, ge=0, description="Sum of entry file sizes in bytes")
    file_write_errors: int = Field(
        default=0, ge=0, description="File-tier write failures since construction"
    )
