"""Inputs and outcomes of the batch upsert transaction."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from complaintdesk.domain.model.enums import FailureReason, ItemStatus

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class BatchItem:
    """One externally produced complaint submission.

    ``id`` is optional; an item without one becomes a new complaint.
    """

    id: str | None = None
    category: str | None = None
    student_view: Mapping[str, object] = field(default_factory=dict[str, object])
    admin_view: Mapping[str, object] = field(default_factory=dict[str, object])
    student_roll_number: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class BatchItemResult:
    complaint_id: str | None
    status: ItemStatus
    reason: FailureReason | None = None
    dept_id: int | None = None
    student_id: int | None = None

    @classmethod
    def success(
        cls, complaint_id: str, *, dept_id: int | None, student_id: int | None
    ) -> BatchItemResult:
        return cls(
            complaint_id=complaint_id,
            status=ItemStatus.SUCCESS,
            dept_id=dept_id,
            student_id=student_id,
        )

    @classmethod
    def failed(cls, complaint_id: str | None, reason: FailureReason) -> BatchItemResult:
        return cls(complaint_id=complaint_id, status=ItemStatus.FAILED, reason=reason)


@dataclass(frozen=True, slots=True, kw_only=True)
class ComplaintUpsert:
    """Column values written for one complaint.

    Every field overwrites on conflict except ``submitted_at``, which only
    replaces the stored timestamp when the submission carried one.
    """

    complaint_id: str
    description: str
    status: str
    severity: int
    institute: str
    contacts: tuple[object, ...]
    suggestions: tuple[object, ...]
    submitted_at: datetime | None
    dept_id: int
    student_id: int | None
