"""HTTP routes for complaints and departments."""

from __future__ import annotations

from fastapi import APIRouter, Body, Depends, status

from complaintdesk.app import (
    UnitOfWorkFactory,
    apply_complaint_batch,
    create_department,
    get_complaint,
    list_departments,
    list_merged_complaints,
    list_store_complaints,
)
from complaintdesk.config import ComplaintsConfig
from complaintdesk.domain.ports.sources import ComplaintSource

from .dependencies import (
    get_settings,
    get_snapshot_source,
    get_store_source,
    get_unit_of_work_factory,
)
from .schemas import (
    BatchItemPayload,
    BatchItemResultOut,
    BatchReportResponse,
    CanonicalComplaintOut,
    DepartmentIn,
    DepartmentOut,
)

router = APIRouter(prefix="/api")


@router.get("/complaints/merged", response_model=list[CanonicalComplaintOut])
def merged_complaints(
    store_source: ComplaintSource = Depends(get_store_source),
    snapshot_source: ComplaintSource = Depends(get_snapshot_source),
    settings: ComplaintsConfig = Depends(get_settings),
) -> list[CanonicalComplaintOut]:
    complaints = list_merged_complaints(
        store_source=store_source,
        snapshot_source=snapshot_source,
        config=settings,
    )
    return [CanonicalComplaintOut.from_domain(complaint) for complaint in complaints]


@router.get("/complaints/report", response_model=list[CanonicalComplaintOut])
def complaints_report(
    store_source: ComplaintSource = Depends(get_store_source),
    settings: ComplaintsConfig = Depends(get_settings),
) -> list[CanonicalComplaintOut]:
    complaints = list_store_complaints(store_source=store_source, config=settings)
    return [CanonicalComplaintOut.from_domain(complaint) for complaint in complaints]


@router.get("/complaints/{complaint_id}", response_model=CanonicalComplaintOut)
def complaint_detail(
    complaint_id: str,
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: ComplaintsConfig = Depends(get_settings),
) -> CanonicalComplaintOut:
    complaint = get_complaint(
        complaint_id, unit_of_work_factory=unit_of_work_factory, config=settings
    )
    return CanonicalComplaintOut.from_domain(complaint)


@router.post(
    "/complaints/batch-report",
    response_model=BatchReportResponse,
    status_code=status.HTTP_201_CREATED,
)
def batch_report(
    payload: BatchItemPayload | list[BatchItemPayload] = Body(...),
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
    settings: ComplaintsConfig = Depends(get_settings),
) -> BatchReportResponse:
    payloads = payload if isinstance(payload, list) else [payload]
    results = apply_complaint_batch(
        [item.to_domain() for item in payloads],
        unit_of_work_factory=unit_of_work_factory,
        config=settings,
    )
    return BatchReportResponse(
        message=f"Processed {len(results)} complaint(s)",
        results=[BatchItemResultOut.from_domain(result) for result in results],
    )


@router.get("/departments", response_model=list[DepartmentOut])
def departments(
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> list[DepartmentOut]:
    return [
        DepartmentOut.from_domain(department)
        for department in list_departments(unit_of_work_factory=unit_of_work_factory)
    ]


@router.post(
    "/departments",
    response_model=DepartmentOut,
    status_code=status.HTTP_201_CREATED,
)
def add_department(
    payload: DepartmentIn,
    unit_of_work_factory: UnitOfWorkFactory = Depends(get_unit_of_work_factory),
) -> DepartmentOut:
    department = create_department(payload.name, unit_of_work_factory=unit_of_work_factory)
    return DepartmentOut.from_domain(department)
