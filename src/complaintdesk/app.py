"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from complaintdesk.adapters.snapshot import JsonSnapshotSource
from complaintdesk.adapters.sqlalchemy import (
    SqlAlchemyComplaintSource,
    SqlAlchemyComplaintUnitOfWork,
    is_started,
    startup,
)
from complaintdesk.config import get_complaints_config
from complaintdesk.domain.batch_upsert import BatchOptions, apply_batch
from complaintdesk.domain.model import Department
from complaintdesk.domain.ports.unit_of_work import ComplaintUnitOfWork
from complaintdesk.domain.reconciliation import build_merged_view, build_store_report, normalize

if TYPE_CHECKING:
    from collections.abc import Sequence

    from complaintdesk.config import ComplaintsConfig
    from complaintdesk.domain.model import BatchItem, BatchItemResult, CanonicalComplaint
    from complaintdesk.domain.ports.sources import ComplaintSource

UnitOfWorkFactory = Callable[[], ComplaintUnitOfWork]


log = getLogger(__name__)


class ComplaintNotFoundError(LookupError):
    """Raised when no stored complaint carries the requested id."""

    def __init__(self, complaint_id: str) -> None:
        super().__init__(f"Complaint {complaint_id!r} not found")
        self.complaint_id = complaint_id


class DuplicateDepartmentError(ValueError):
    """Raised when a department with the same name (ignoring case) already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Department {name!r} already exists")
        self.name = name


def ensure_started() -> None:
    """Start the persistence adapter unless something already did."""

    if not is_started():
        startup()


def list_merged_complaints(
    *,
    store_source: ComplaintSource | None = None,
    snapshot_source: ComplaintSource | None = None,
    config: ComplaintsConfig | None = None,
) -> list[CanonicalComplaint]:
    """Return the merged store + snapshot view of all complaints."""

    effective_config = config or get_complaints_config()
    if store_source is None:
        try:
            ensure_started()
        except SQLAlchemyError:
            log.warning("Relational store could not be started", exc_info=True)
        store_source = SqlAlchemyComplaintSource()
    effective_snapshot = snapshot_source or JsonSnapshotSource(effective_config.snapshot_path)

    return build_merged_view(
        store_source=store_source,
        snapshot_source=effective_snapshot,
        default_institute=effective_config.default_institute,
    )


def list_store_complaints(
    *,
    store_source: ComplaintSource | None = None,
    config: ComplaintsConfig | None = None,
) -> list[CanonicalComplaint]:
    """Return canonical complaints read from the relational store only."""

    effective_config = config or get_complaints_config()
    if store_source is None:
        ensure_started()
        store_source = SqlAlchemyComplaintSource()
    return build_store_report(
        store_source=store_source,
        default_institute=effective_config.default_institute,
    )


def get_complaint(
    complaint_id: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ComplaintsConfig | None = None,
) -> CanonicalComplaint:
    """Return one stored complaint in canonical form."""

    effective_config = config or get_complaints_config()
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        raw = uow.repositories.complaints.get(complaint_id)
    if raw is None:
        raise ComplaintNotFoundError(complaint_id)
    return normalize(raw, default_institute=effective_config.default_institute).without_source()


def apply_complaint_batch(
    items: Sequence[BatchItem],
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    config: ComplaintsConfig | None = None,
) -> list[BatchItemResult]:
    """Apply a batch of complaint submissions as one transaction."""

    effective_config = config or get_complaints_config()
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    log.info(
        "Starting complaint batch: items=%s, deadline=%ss",
        len(items),
        effective_config.batch_deadline_seconds,
    )
    return apply_batch(
        items,
        unit_of_work_factory=effective_uow,
        options=BatchOptions(
            deadline_seconds=effective_config.batch_deadline_seconds,
            default_institute=effective_config.default_institute,
        ),
    )


def create_department(
    name: str,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> Department:
    """Register a department complaints can be routed to."""

    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Department name must not be empty")

    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        departments = uow.repositories.departments
        if departments.find_by_name(cleaned) is not None:
            raise DuplicateDepartmentError(cleaned)
        department = Department(name=cleaned)
        departments.add(department)
        uow.commit()

    log.info("Created department %r (dept_id=%s)", department.name, department.dept_id)
    return department


def list_departments(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> list[Department]:
    effective_uow = _unit_of_work_factory(unit_of_work_factory)
    with effective_uow() as uow:
        return list(uow.repositories.departments.list_all())


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    ensure_started()
    return SqlAlchemyComplaintUnitOfWork
