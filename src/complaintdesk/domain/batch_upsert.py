"""Apply batches of externally submitted complaints inside one transaction.

Business-rule problems (no department, unknown department, no description)
are reported as ``failed`` results and the batch moves on to the next item.
Anything raised while talking to the store is infrastructural: the whole
transaction is rolled back, collected results are discarded and a single
``BatchTransactionError`` reaches the caller.

The deadline is checked before every item and before the commit. The
statements of each item are also capped to the time left, where the store
supports statement timeouts.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from logging import getLogger
from typing import TYPE_CHECKING

from complaintdesk.domain.model import (
    DEFAULT_INSTITUTE,
    BatchItemResult,
    ComplaintUpsert,
    FailureReason,
    ItemStatus,
)
from complaintdesk.domain.reconciliation.normalize import (
    clean_text,
    parse_timestamp,
    partial_view,
    resolve_views,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from complaintdesk.domain.model import BatchItem
    from complaintdesk.domain.ports.persistence import StudentRepository
    from complaintdesk.domain.ports.unit_of_work import (
        ComplaintRepositories,
        ComplaintUnitOfWork,
    )
    from complaintdesk.domain.reconciliation.normalize import PartialView

DEFAULT_BATCH_DEADLINE_SECONDS = 30.0

log = getLogger(__name__)


class BatchTransactionError(RuntimeError):
    """Raised when a batch was rolled back because of an infrastructural failure."""

    def __init__(self, message: str, *, details: str) -> None:
        super().__init__(message)
        self.details = details


class BatchDeadlineExceededError(BatchTransactionError):
    """Raised when a batch transaction runs past its deadline."""


@dataclass(frozen=True, slots=True)
class BatchOptions:
    deadline_seconds: float = DEFAULT_BATCH_DEADLINE_SECONDS
    default_institute: str = DEFAULT_INSTITUTE


def apply_batch(
    items: Sequence[BatchItem],
    *,
    unit_of_work_factory: Callable[[], ComplaintUnitOfWork],
    options: BatchOptions | None = None,
    clock: Callable[[], float] = time.monotonic,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> list[BatchItemResult]:
    """Upsert every item in order and return one result per item, in input order."""

    effective = options or BatchOptions()
    deadline = clock() + effective.deadline_seconds
    results: list[BatchItemResult] = []

    try:
        with unit_of_work_factory() as uow:
            for position, item in enumerate(items, start=1):
                remaining = _check_deadline(clock, deadline, position=position)
                uow.limit_statement_time(remaining)
                results.append(
                    _apply_item(
                        uow.repositories,
                        item,
                        default_institute=effective.default_institute,
                        id_factory=id_factory,
                    )
                )
            _check_deadline(clock, deadline, position=len(items))
            uow.commit()
    except BatchTransactionError:
        log.exception("Complaint batch of %s item(s) rolled back", len(items))
        raise
    except Exception as exc:  # noqa: BLE001
        log.exception("Complaint batch of %s item(s) rolled back", len(items))
        raise BatchTransactionError(
            "Batch transaction rolled back",
            details=str(exc) or type(exc).__name__,
        ) from exc

    succeeded = sum(1 for result in results if result.status is ItemStatus.SUCCESS)
    log.info(
        "Applied complaint batch: items=%s, succeeded=%s, failed=%s",
        len(items),
        succeeded,
        len(results) - succeeded,
    )
    return results


def _check_deadline(clock: Callable[[], float], deadline: float, *, position: int) -> float:
    """Return the seconds left before the deadline, raising once it has passed."""
    remaining = deadline - clock()
    if remaining < 0:
        raise BatchDeadlineExceededError(
            "Batch transaction deadline exceeded",
            details=f"deadline exceeded at item {position}",
        )
    return remaining


def _apply_item(
    repositories: ComplaintRepositories,
    item: BatchItem,
    *,
    default_institute: str,
    id_factory: Callable[[], str],
) -> BatchItemResult:
    complaint_id = clean_text(item.id) or id_factory()
    student_partial = partial_view(item.student_view)
    admin_partial = partial_view(item.admin_view)

    department_name = _department_name(item, student_partial, admin_partial)
    if department_name is None:
        log.info("Complaint %s has no department", complaint_id)
        return BatchItemResult.failed(complaint_id, FailureReason.MISSING_DEPARTMENT)

    department = repositories.departments.find_by_name(department_name)
    if department is None or department.dept_id is None:
        log.info("Complaint %s names unknown department %r", complaint_id, department_name)
        return BatchItemResult.failed(complaint_id, FailureReason.DEPARTMENT_NOT_FOUND)

    now = datetime.now(UTC)
    student_view, admin_view = resolve_views(
        student_partial, admin_partial, default_institute=default_institute, now=now
    )
    if not student_view.complaint:
        log.info("Complaint %s has no description", complaint_id)
        return BatchItemResult.failed(complaint_id, FailureReason.MISSING_DESCRIPTION)

    student_id = _resolve_student_id(repositories.students, item.student_roll_number)
    repositories.complaints.upsert(
        ComplaintUpsert(
            complaint_id=complaint_id,
            description=student_view.complaint,
            status=admin_view.status,
            severity=admin_view.severity,
            institute=student_view.institute,
            contacts=student_view.contacts,
            suggestions=student_view.suggestions,
            submitted_at=_submitted_at(student_partial, admin_partial),
            dept_id=department.dept_id,
            student_id=student_id,
        )
    )
    return BatchItemResult.success(
        complaint_id, dept_id=department.dept_id, student_id=student_id
    )


def _department_name(
    item: BatchItem, student: PartialView, admin: PartialView
) -> str | None:
    for departments in (admin.departments, student.departments):
        if departments:
            return departments[0]
    return clean_text(item.category)


def _submitted_at(student: PartialView, admin: PartialView) -> datetime | None:
    """The timestamp the submission carried, if any; defaults are left to the store."""
    timestamp = student.timestamp or admin.timestamp
    return parse_timestamp(timestamp) if timestamp else None


def _resolve_student_id(students: StudentRepository, roll_number: str | None) -> int | None:
    cleaned = clean_text(roll_number)
    if cleaned is None:
        return None
    student = students.find_by_roll_number(cleaned)
    if student is None:
        log.info("No student registered with roll number %r", cleaned)
        return None
    return student.student_id
