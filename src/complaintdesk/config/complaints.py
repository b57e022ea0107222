"""Settings for complaint reconciliation and batch upserts."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from complaintdesk.domain.batch_upsert import DEFAULT_BATCH_DEADLINE_SECONDS
from complaintdesk.domain.model.complaint import DEFAULT_INSTITUTE

from .env import env_path, env_positive_float, optional_env_var
from .storage import StorageConfig, get_storage_config


@dataclass(frozen=True, slots=True)
class ComplaintsConfig:
    snapshot_path: Path
    batch_deadline_seconds: float = DEFAULT_BATCH_DEADLINE_SECONDS
    default_institute: str = DEFAULT_INSTITUTE


def get_complaints_config(*, storage: StorageConfig | None = None) -> ComplaintsConfig:
    snapshot_path = env_path("COMPLAINTS_SNAPSHOT_PATH")
    if snapshot_path is None:
        snapshot_path = (storage or get_storage_config()).snapshot_path()
    return ComplaintsConfig(
        snapshot_path=snapshot_path,
        batch_deadline_seconds=env_positive_float(
            "COMPLAINTS_BATCH_DEADLINE_SECONDS", DEFAULT_BATCH_DEADLINE_SECONDS
        ),
        default_institute=optional_env_var("COMPLAINTS_DEFAULT_INSTITUTE") or DEFAULT_INSTITUTE,
    )
