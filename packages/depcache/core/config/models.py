"""Configuration models for depcache."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TTL_MS = 60 * 60 * 1000  # 1 hour
DEFAULT_CACHE_DIRECTORY = ".dep-analyzer-cache"


class CacheConfig(BaseModel):
    """Two-tier cache configuration."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    enabled: bool = Field(default=True, description="Global cache toggle")

    ttl: int = Field(default=DEFAULT_TTL_MS, ge=0, description="Entry lifetime in milliseconds")

    directory: str = Field(
        default=DEFAULT_CACHE_DIRECTORY,
        min_length=1,
        description="Cache directory, relative to the base directory given at initialize()",
    )

    max_memory_items: int | None = Field(
        default=None,
        gt=0,
        alias="maxMemoryItems",
        description="Maximum in-memory entries (None = unbounded)",
    )

    @field_validator("directory")
    @classmethod
    def _directory_is_relative(cls, value: str) -> str:
        if Path(value).is_absolute():
            raise ValueError(f"Cache directory must be relative: {value}")
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: str | None = Field(default=None, description="Log file path (None = stdout)")
    structured: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    cache: CacheConfig = CacheConfig()
    logging: LoggingConfig = LoggingConfig()

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("depcache.json")
