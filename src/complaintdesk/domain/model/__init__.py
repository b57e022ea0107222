"""Public domain model surface."""

from __future__ import annotations

from complaintdesk.domain.model.batch import BatchItem, BatchItemResult, ComplaintUpsert
from complaintdesk.domain.model.complaint import (
    DEFAULT_CATEGORY,
    DEFAULT_INSTITUTE,
    DEFAULT_SEVERITY,
    DEFAULT_STATUS,
    CanonicalComplaint,
    ComplaintView,
    RawComplaintRecord,
    RawSnapshotRecord,
    RawStoreRecord,
)
from complaintdesk.domain.model.directory import Department, Student
from complaintdesk.domain.model.enums import FailureReason, ItemStatus, SourceTag

__all__ = [
    "DEFAULT_CATEGORY",
    "DEFAULT_INSTITUTE",
    "DEFAULT_SEVERITY",
    "DEFAULT_STATUS",
    "BatchItem",
    "BatchItemResult",
    "CanonicalComplaint",
    "ComplaintUpsert",
    "ComplaintView",
    "Department",
    "FailureReason",
    "ItemStatus",
    "RawComplaintRecord",
    "RawSnapshotRecord",
    "RawStoreRecord",
    "SourceTag",
    "Student",
]
