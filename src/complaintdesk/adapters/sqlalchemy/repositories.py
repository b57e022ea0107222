"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, select
from sqlalchemy.dialects import postgresql, sqlite

from complaintdesk.adapters.sqlalchemy.mappings import (
    complaint_table,
    department_table,
    student_table,
)
from complaintdesk.domain.model import Department, RawStoreRecord, Student

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy import RowMapping
    from sqlalchemy.orm import Session

    from complaintdesk.domain.model import ComplaintUpsert


class UnsupportedDialectError(RuntimeError):
    """Raised when the bound database cannot express ``INSERT ... ON CONFLICT``."""


class SqlAlchemyDepartmentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Department) -> None:
        self.session.add(entity)

    def find_by_name(self, name: str) -> Department | None:
        stmt = (
            select(Department)
            .where(func.lower(department_table.c.name) == name.strip().lower())
            .order_by(department_table.c.dept_id)
            .limit(1)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> Sequence[Department]:
        stmt = select(Department).order_by(department_table.c.dept_id)
        return self.session.execute(stmt).scalars().all()


class SqlAlchemyStudentRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Student) -> None:
        self.session.add(entity)

    def find_by_roll_number(self, roll_number: str) -> Student | None:
        stmt = select(Student).where(student_table.c.roll_number == roll_number).limit(1)
        return self.session.execute(stmt).scalar_one_or_none()


class SqlAlchemyComplaintRepository:
    """Complaint rows are handled at the Core level: reads return joined raw records."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert(self, values: ComplaintUpsert) -> None:
        now = datetime.now(UTC)
        row: dict[str, Any] = {
            "complaint_id": values.complaint_id,
            "description": values.description,
            "status": values.status,
            "severity": values.severity,
            "institute": values.institute,
            "contacts": list(values.contacts),
            "suggestions": list(values.suggestions),
            "dept_id": values.dept_id,
            "student_id": values.student_id,
            "created_at": values.submitted_at or now,
            "updated_at": now,
        }
        # Without a submitted timestamp an existing row keeps its created_at.
        kept = {"complaint_id"}
        if values.submitted_at is None:
            kept.add("created_at")
        stmt = self._insert().values(**row)
        stmt = stmt.on_conflict_do_update(
            index_elements=[complaint_table.c.complaint_id],
            set_={name: getattr(stmt.excluded, name) for name in row if name not in kept},
        )
        self.session.execute(stmt)

    def get(self, complaint_id: str) -> RawStoreRecord | None:
        stmt = _joined_select().where(complaint_table.c.complaint_id == complaint_id)
        row = self.session.execute(stmt).mappings().one_or_none()
        return _to_raw_record(row) if row is not None else None

    def iter_joined(self) -> Iterator[RawStoreRecord]:
        stmt = _joined_select().order_by(
            complaint_table.c.created_at.desc(), complaint_table.c.id.desc()
        )
        for row in self.session.execute(stmt).mappings():
            yield _to_raw_record(row)

    def _insert(self) -> sqlite.Insert | postgresql.Insert:
        dialect = self.session.get_bind().dialect.name
        if dialect == "sqlite":
            return sqlite.insert(complaint_table)
        if dialect == "postgresql":
            return postgresql.insert(complaint_table)
        raise UnsupportedDialectError(f"Complaint upserts are not supported on {dialect!r}")


def _joined_select() -> Select[Any]:
    return (
        select(
            complaint_table.c.complaint_id,
            complaint_table.c.description,
            complaint_table.c.status,
            complaint_table.c.severity,
            complaint_table.c.institute,
            complaint_table.c.contacts,
            complaint_table.c.suggestions,
            complaint_table.c.created_at,
            complaint_table.c.dept_id,
            complaint_table.c.student_id,
            department_table.c.name.label("department_name"),
            student_table.c.roll_number,
        )
        .select_from(complaint_table)
        .outerjoin(department_table, complaint_table.c.dept_id == department_table.c.dept_id)
        .outerjoin(student_table, complaint_table.c.student_id == student_table.c.student_id)
    )


def _to_raw_record(row: RowMapping) -> RawStoreRecord:
    return RawStoreRecord(
        complaint_id=row["complaint_id"],
        description=row["description"],
        status=row["status"],
        severity=row["severity"],
        institute=row["institute"],
        contacts=row["contacts"],
        suggestions=row["suggestions"],
        created_at=row["created_at"],
        department_name=row["department_name"],
        dept_id=row["dept_id"],
        student_id=row["student_id"],
        roll_number=row["roll_number"],
    )


if TYPE_CHECKING:
    from typing import cast

    from complaintdesk.domain.ports.persistence import (
        ComplaintRepository,
        DepartmentRepository,
        StudentRepository,
    )

    _session_stub = cast("Session", object())
    _complaint_repo: ComplaintRepository = SqlAlchemyComplaintRepository(_session_stub)
    _department_repo: DepartmentRepository = SqlAlchemyDepartmentRepository(_session_stub)
    _student_repo: StudentRepository = SqlAlchemyStudentRepository(_session_stub)
