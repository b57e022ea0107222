"""Application configuration helpers."""

from __future__ import annotations

from .complaints import (
    DEFAULT_BATCH_DEADLINE_SECONDS,
    DEFAULT_INSTITUTE,
    ComplaintsConfig,
    get_complaints_config,
)
from .errors import ConfigurationError
from .logging import configure_logging
from .storage import (
    DatabaseConfig,
    StorageConfig,
    get_database_config,
    get_database_uri,
    get_storage_config,
)

__all__ = [
    "DEFAULT_BATCH_DEADLINE_SECONDS",
    "DEFAULT_INSTITUTE",
    "ComplaintsConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "StorageConfig",
    "configure_logging",
    "get_complaints_config",
    "get_database_config",
    "get_database_uri",
    "get_storage_config",
]
