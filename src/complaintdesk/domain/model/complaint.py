"""Complaint records in their source-native and canonical shapes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Literal

from complaintdesk.domain.model.enums import SourceTag

if TYPE_CHECKING:
    from datetime import datetime

DEFAULT_SEVERITY = 3
DEFAULT_STATUS = "Pending"
DEFAULT_CATEGORY = "other"
DEFAULT_INSTITUTE = "Main Campus"
MIN_SEVERITY = 1
MAX_SEVERITY = 3


@dataclass(frozen=True, slots=True, kw_only=True)
class ComplaintView:
    """One audience's view of a complaint (student-facing or admin-facing)."""

    complaint: str
    departments: tuple[str, ...]
    contacts: tuple[object, ...]
    suggestions: tuple[object, ...]
    severity: int
    institute: str
    timestamp: str
    status: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CanonicalComplaint:
    """Source-agnostic complaint.

    ``source`` is only populated while merging and is stripped before a record
    leaves the reconciliation layer.
    """

    id: str
    category: str
    student_view: ComplaintView
    admin_view: ComplaintView
    source: SourceTag | None = None

    def without_source(self) -> CanonicalComplaint:
        if self.source is None:
            return self
        return replace(self, source=None)


@dataclass(frozen=True, slots=True, kw_only=True)
class RawStoreRecord:
    """Flat relational row: a complaint joined with its department and submitter."""

    complaint_id: str
    description: str | None = None
    status: str | None = None
    severity: int | None = None
    institute: str | None = None
    contacts: object = None
    suggestions: object = None
    created_at: datetime | None = None
    department_name: str | None = None
    dept_id: int | None = None
    student_id: int | None = None
    roll_number: str | None = None
    source: Literal[SourceTag.STORE] = SourceTag.STORE


@dataclass(frozen=True, slots=True, kw_only=True)
class RawSnapshotRecord:
    """Nested object read from the ingestion snapshot file."""

    id: str | None = None
    category: str | None = None
    student_view: Mapping[str, object] = field(default_factory=dict[str, object])
    admin_view: Mapping[str, object] = field(default_factory=dict[str, object])
    source: Literal[SourceTag.SNAPSHOT] = SourceTag.SNAPSHOT


type RawComplaintRecord = RawStoreRecord | RawSnapshotRecord
