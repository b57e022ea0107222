"""Pydantic models for the HTTP request and response bodies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from complaintdesk.domain.model import BatchItem

if TYPE_CHECKING:
    from complaintdesk.domain.model import (
        BatchItemResult,
        CanonicalComplaint,
        ComplaintView,
        Department,
    )


class ApiModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ComplaintViewOut(ApiModel):
    complaint: str
    departments: list[str]
    contacts: list[Any]
    suggestions: list[Any]
    severity: int
    institute: str
    timestamp: str
    status: str

    @classmethod
    def from_domain(cls, view: ComplaintView) -> ComplaintViewOut:
        return cls(
            complaint=view.complaint,
            departments=list(view.departments),
            contacts=list(view.contacts),
            suggestions=list(view.suggestions),
            severity=view.severity,
            institute=view.institute,
            timestamp=view.timestamp,
            status=view.status,
        )


class CanonicalComplaintOut(ApiModel):
    id: str
    category: str
    student_view: ComplaintViewOut = Field(alias="studentView")
    admin_view: ComplaintViewOut = Field(alias="adminView")

    @classmethod
    def from_domain(cls, complaint: CanonicalComplaint) -> CanonicalComplaintOut:
        return cls(
            id=complaint.id,
            category=complaint.category,
            student_view=ComplaintViewOut.from_domain(complaint.student_view),
            admin_view=ComplaintViewOut.from_domain(complaint.admin_view),
        )


def _mapping_or_empty(value: object) -> object:
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)  # pyright: ignore[reportUnknownArgumentType]
    return value


class BatchItemPayload(ApiModel):
    """One submission; view keys are accepted in camelCase or snake_case."""

    id: str | None = None
    category: str | None = None
    student_view: dict[str, Any] = Field(default_factory=dict, alias="studentView")
    admin_view: dict[str, Any] = Field(default_factory=dict, alias="adminView")
    student_roll_number: str | None = Field(default=None, alias="studentRollNumber")

    @field_validator("id", "student_roll_number", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    _coerce_student_view = field_validator("student_view", mode="before")(_mapping_or_empty)
    _coerce_admin_view = field_validator("admin_view", mode="before")(_mapping_or_empty)

    def to_domain(self) -> BatchItem:
        return BatchItem(
            id=self.id,
            category=self.category,
            student_view=self.student_view,
            admin_view=self.admin_view,
            student_roll_number=self.student_roll_number,
        )


class BatchItemResultOut(ApiModel):
    complaint_id: str | None
    status: str
    reason: str | None = None
    dept_id: int | None = None
    student_id: int | None = None

    @classmethod
    def from_domain(cls, result: BatchItemResult) -> BatchItemResultOut:
        return cls(
            complaint_id=result.complaint_id,
            status=result.status.value,
            reason=result.reason.value if result.reason is not None else None,
            dept_id=result.dept_id,
            student_id=result.student_id,
        )


class BatchReportResponse(ApiModel):
    message: str
    results: list[BatchItemResultOut]


class DepartmentIn(ApiModel):
    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=255)


class DepartmentOut(ApiModel):
    dept_id: int | None = Field(alias="deptId")
    name: str

    @classmethod
    def from_domain(cls, department: Department) -> DepartmentOut:
        return cls(dept_id=department.dept_id, name=department.name)
