"""
Configuration management with typed Pydantic models.

Provides source, storage and logging configuration loaded from YAML.
"""

from lapingest.config.loader import config_from_dict, load_config
from lapingest.config.settings import (
    IngestConfig,
    LoadingConfig,
    LoggingConfig,
    SourceConfig,
    StorageBackend,
    StorageConfig,
)

__all__ = [
    "IngestConfig",
    "LoadingConfig",
    "LoggingConfig",
    "SourceConfig",
    "StorageBackend",
    "StorageConfig",
    "config_from_dict",
    "load_config",
]
