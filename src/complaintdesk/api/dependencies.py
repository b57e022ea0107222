"""FastAPI dependencies wiring request handlers to adapters and settings."""

from __future__ import annotations

from fastapi import Depends

from complaintdesk.adapters.snapshot import JsonSnapshotSource
from complaintdesk.adapters.sqlalchemy import (
    SqlAlchemyComplaintSource,
    SqlAlchemyComplaintUnitOfWork,
)
from complaintdesk.app import UnitOfWorkFactory
from complaintdesk.config import ComplaintsConfig, get_complaints_config
from complaintdesk.domain.ports.sources import ComplaintSource


def get_settings() -> ComplaintsConfig:
    return get_complaints_config()


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    return SqlAlchemyComplaintUnitOfWork


def get_store_source(
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> ComplaintSource:
    return SqlAlchemyComplaintSource(unit_of_work_factory)


def get_snapshot_source(settings: ComplaintsConfig = Depends(get_settings)) -> ComplaintSource:
    return JsonSnapshotSource(settings.snapshot_path)
