"""Configuration models and loaders."""

from depcache.core.config.loader import detect_format, load_app_config, load_config
from depcache.core.config.models import AppConfig, CacheConfig, LoggingConfig

__all__ = [
    "AppConfig",
    "CacheConfig",
    "LoggingConfig",
    "detect_format",
    "load_app_config",
    "load_config",
]
