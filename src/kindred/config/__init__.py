"""Application configuration helpers."""

from __future__ import annotations

from .detection import DEFAULT_CONFIDENCE_THRESHOLD, DetectionConfig, get_detection_config
from .env import optional_int_env
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_CONFIDENCE_THRESHOLD",
    "ConfigurationError",
    "DatabaseConfig",
    "DetectionConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_detection_config",
    "get_storage_config",
    "optional_int_env",
]
