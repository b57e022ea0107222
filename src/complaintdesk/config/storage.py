"""Where complaintdesk keeps its SQLite database and the ingestion snapshot."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import env_path, optional_env_var

APP_DIR_NAME: Final[str] = "complaintdesk"
DEFAULT_DB_FILENAME: Final[str] = "complaintdesk.db"
SNAPSHOT_FILENAME: Final[str] = "complaints_snapshot.json"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path

    @property
    def root(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def database_path(self) -> Path:
        """SQLite file location; the data directory is created on first use."""

        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / DEFAULT_DB_FILENAME

    def snapshot_path(self) -> Path:
        return self.root / SNAPSHOT_FILENAME


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    if os.name == "nt":
        return Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_storage_config() -> StorageConfig:
    data_dir = env_path("COMPLAINTDESK_DATA_DIR") or _platform_data_home() / APP_DIR_NAME
    return StorageConfig(data_dir=data_dir)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    uri = optional_env_var("DATABASE_URI")
    if uri is None:
        uri = f"sqlite+pysqlite:///{(storage or get_storage_config()).database_path()}"
    return DatabaseConfig(uri=uri)


def get_database_uri() -> str:
    return get_database_config().uri
