from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from complaintdesk.adapters.sqlalchemy.repositories import (
    SqlAlchemyComplaintRepository,
    SqlAlchemyDepartmentRepository,
    SqlAlchemyStudentRepository,
)
from complaintdesk.domain.model import ComplaintUpsert, Department, Student


def _upsert(
    complaint_id: str,
    *,
    dept_id: int,
    description: str = "broken AC",
    submitted_at: datetime | None = None,
    student_id: int | None = None,
) -> ComplaintUpsert:
    return ComplaintUpsert(
        complaint_id=complaint_id,
        description=description,
        status="Pending",
        severity=2,
        institute="Main Campus",
        contacts=("warden@example.edu",),
        suggestions=(),
        submitted_at=submitted_at or datetime(2024, 1, 5, 10, 0, tzinfo=UTC),
        dept_id=dept_id,
        student_id=student_id,
    )


def _department(session: Session, name: str) -> Department:
    department = Department(name=name)
    SqlAlchemyDepartmentRepository(session).add(department)
    session.flush()
    return department


def test_department_lookup_is_case_insensitive_and_prefers_lowest_id(
    sqlite_session: Session,
) -> None:
    first = _department(sqlite_session, "Facilities")
    _department(sqlite_session, "FACILITIES")
    repository = SqlAlchemyDepartmentRepository(sqlite_session)

    found = repository.find_by_name("  facilities ")

    assert found is first
    assert repository.find_by_name("Library") is None
    assert [d.name for d in repository.list_all()] == ["Facilities", "FACILITIES"]


def test_student_lookup_by_roll_number(sqlite_session: Session) -> None:
    repository = SqlAlchemyStudentRepository(sqlite_session)
    student = Student(roll_number="21CS042", name="Asha")
    repository.add(student)
    sqlite_session.flush()

    assert repository.find_by_roll_number("21CS042") is student
    assert repository.find_by_roll_number("21CS043") is None


def test_upsert_inserts_then_overwrites(sqlite_session: Session) -> None:
    facilities = _department(sqlite_session, "Facilities")
    hostel = _department(sqlite_session, "Hostel Office")
    assert facilities.dept_id is not None
    assert hostel.dept_id is not None
    repository = SqlAlchemyComplaintRepository(sqlite_session)

    repository.upsert(_upsert("c1", dept_id=facilities.dept_id))
    repository.upsert(_upsert("c1", dept_id=hostel.dept_id, description="AC still broken"))

    records = list(repository.iter_joined())
    assert len(records) == 1
    assert records[0].description == "AC still broken"
    assert records[0].department_name == "Hostel Office"
    assert records[0].contacts == ["warden@example.edu"]
    assert records[0].created_at == datetime(2024, 1, 5, 10, 0, tzinfo=UTC)


def test_get_joins_department_and_submitter(sqlite_session: Session) -> None:
    department = _department(sqlite_session, "Facilities")
    student = Student(roll_number="21CS042")
    SqlAlchemyStudentRepository(sqlite_session).add(student)
    sqlite_session.flush()
    assert department.dept_id is not None
    repository = SqlAlchemyComplaintRepository(sqlite_session)

    repository.upsert(_upsert("c1", dept_id=department.dept_id, student_id=student.student_id))

    record = repository.get("c1")
    assert record is not None
    assert record.department_name == "Facilities"
    assert record.roll_number == "21CS042"
    assert record.student_id == student.student_id
    assert repository.get("missing") is None


def test_iter_joined_returns_newest_first(sqlite_session: Session) -> None:
    department = _department(sqlite_session, "Facilities")
    assert department.dept_id is not None
    repository = SqlAlchemyComplaintRepository(sqlite_session)

    repository.upsert(
        _upsert("old", dept_id=department.dept_id, submitted_at=datetime(2023, 1, 1, tzinfo=UTC))
    )
    repository.upsert(
        _upsert("new", dept_id=department.dept_id, submitted_at=datetime(2024, 6, 1, tzinfo=UTC))
    )

    assert [record.complaint_id for record in repository.iter_joined()] == ["new", "old"]


def test_upsert_without_timestamp_keeps_stored_created_at(sqlite_session: Session) -> None:
    department = _department(sqlite_session, "Facilities")
    assert department.dept_id is not None
    repository = SqlAlchemyComplaintRepository(sqlite_session)
    submitted = datetime(2024, 1, 5, 10, 0, tzinfo=UTC)

    repository.upsert(_upsert("c1", dept_id=department.dept_id, submitted_at=submitted))
    repository.upsert(
        replace(
            _upsert("c1", dept_id=department.dept_id, description="still broken"),
            submitted_at=None,
        )
    )

    record = repository.get("c1")
    assert record is not None
    assert record.description == "still broken"
    assert record.created_at == submitted


def test_upsert_without_timestamp_stamps_new_rows(sqlite_session: Session) -> None:
    department = _department(sqlite_session, "Facilities")
    assert department.dept_id is not None
    repository = SqlAlchemyComplaintRepository(sqlite_session)
    before = datetime.now(UTC)

    repository.upsert(replace(_upsert("c1", dept_id=department.dept_id), submitted_at=None))

    record = repository.get("c1")
    assert record is not None
    assert record.created_at is not None
    assert record.created_at >= before.replace(microsecond=0)
