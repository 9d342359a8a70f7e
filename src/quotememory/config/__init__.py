"""Configuration package for QuoteMemory."""

from quotememory.config.app_config import (
    AppConfig,
    PracticeConfig,
    StorageConfig,
    clear_config_cache,
    load_app_config,
)

__all__ = [
    "AppConfig",
    "PracticeConfig",
    "StorageConfig",
    "clear_config_cache",
    "load_app_config",
]
