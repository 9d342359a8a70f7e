"""Application configuration loader.

Loads centralized configuration from data/config/app_config_v1.yaml
with fallback to built-in defaults.

Usage:
    from quotememory.config.app_config import load_app_config

    config = load_app_config()
    seconds = config.practice.memorize_seconds
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

logger = structlog.get_logger(__name__)

# Config file paths (relative to project root)
CONFIG_FILE = Path("data/config/app_config_v1.yaml")

DB_PATH_ENV = "QUOTEMEMORY_DB_PATH"
DATA_DIR_ENV = "QUOTEMEMORY_DATA_DIR"


@dataclass
class PracticeConfig:
    """Configuration for memorization rounds."""

    memorize_seconds: int = 10
    tick_seconds: float = 1.0
    session_idle_seconds: float = 3600.0


@dataclass
class StorageConfig:
    """Configuration for the quote store."""

    db_path: str = "db/quotememory.db"

    def resolve_db_path(self) -> Path:
        """Get database path, honouring the environment override."""
        return Path(os.environ.get(DB_PATH_ENV, self.db_path))


@dataclass
class AppConfig:
    """Application-wide configuration."""

    practice: PracticeConfig = field(default_factory=PracticeConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    paths: dict[str, str] = field(default_factory=dict)

    @property
    def data_dir(self) -> Path:
        return Path(os.environ.get(DATA_DIR_ENV, self.paths.get("data_dir", "data")))

    @property
    def plans_file(self) -> Path:
        return self.data_dir / "config" / "plans.yaml"


# Module-level cache
_cached_config: AppConfig | None = None


def _get_defaults() -> dict[str, Any]:
    """Get default configuration values."""
    return {
        "practice": {
            "memorize_seconds": 10,
            "tick_seconds": 1.0,
            "session_idle_seconds": 3600.0,
        },
        "storage": {
            "db_path": "db/quotememory.db",
        },
        "paths": {
            "data_dir": "data",
        },
    }


def _parse_config(data: dict[str, Any]) -> AppConfig:
    """Parse configuration dictionary into AppConfig object."""
    defaults = _get_defaults()

    practice_data = {**defaults["practice"], **(data.get("practice") or {})}
    practice = PracticeConfig(
        memorize_seconds=int(practice_data["memorize_seconds"]),
        tick_seconds=float(practice_data["tick_seconds"]),
        session_idle_seconds=float(practice_data["session_idle_seconds"]),
    )

    storage_data = {**defaults["storage"], **(data.get("storage") or {})}
    storage = StorageConfig(db_path=str(storage_data["db_path"]))

    paths = {**defaults["paths"], **(data.get("paths") or {})}

    return AppConfig(practice=practice, storage=storage, paths=paths)


def load_app_config(force_reload: bool = False) -> AppConfig:
    """Load application config, falling back to defaults.

    Args:
        force_reload: If True, ignore cached config and reload from file.

    Returns:
        AppConfig object with all settings.
    """
    global _cached_config

    if _cached_config is not None and not force_reload:
        return _cached_config

    data: dict[str, Any]

    if CONFIG_FILE.exists():
        logger.debug("loading_app_config", source=str(CONFIG_FILE))
        data = yaml.safe_load(CONFIG_FILE.read_text(encoding="utf-8")) or {}
    else:
        logger.info("using_default_config")
        data = _get_defaults()

    _cached_config = _parse_config(data)
    return _cached_config


def clear_config_cache() -> None:
    """Clear the configuration cache.

    Useful for testing or when config is modified at runtime.
    """
    global _cached_config
    _cached_config = None
