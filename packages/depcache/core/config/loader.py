"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from depcache.core.config.models import AppConfig

logger = logging.getLogger(__name__)

ENV_CACHE_DISABLED = "DEP_ANALYZER_CACHE_DISABLED"
ENV_CACHE_TTL = "DEP_ANALYZER_CACHE_TTL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("depcache.json")
        'json'
        >>> detect_format("depcache.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if data is None:
            data = {}

    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping in {path}, got {type(data).__name__}")
    return data


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    Missing files fall back to defaults. Environment overrides are applied last:
    a non-empty DEP_ANALYZER_CACHE_DISABLED disables the cache and
    DEP_ANALYZER_CACHE_TTL sets the TTL in milliseconds.

    Args:
        path: Path to config file (.json, .yaml, or .yml), defaults to depcache.json

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If config is invalid
        ValueError: If the file or an environment override is malformed
    """
    if path is None:
        path = AppConfig.default_path()

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug("No config file at %s, using defaults", path)
        config = AppConfig()

    return _apply_env_overrides(config)


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    """Return a copy of config with environment overrides applied."""
    updates: dict[str, Any] = {}

    if os.getenv(ENV_CACHE_DISABLED):
        logger.debug("Cache disabled via %s", ENV_CACHE_DISABLED)
        updates["enabled"] = False

    ttl_raw = os.getenv(ENV_CACHE_TTL)
    if ttl_raw:
        try:
            ttl = int(ttl_raw)
        except ValueError as e:
            raise ValueError(f"{ENV_CACHE_TTL} must be an integer, got {ttl_raw!r}") from e
        if ttl < 0:
            raise ValueError(f"{ENV_CACHE_TTL} must not be negative, got {ttl}")
        updates["ttl"] = ttl

    if not updates:
        return config

    cache = config.cache.model_copy(update=updates)
    return config.model_copy(update={"cache": cache})
