"""SQLAlchemy table metadata and mappers for complaints and their references."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    func,
    orm,
)
from sqlalchemy.orm import configure_mappers

from complaintdesk.domain.model import Department, Student

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    """Aware timestamps stored as UTC; naive values are read as UTC already."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return None if value is None else _as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        return None if value is None else _as_utc(value)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

department_table = Table(
    "departments",
    mapper_registry.metadata,
    Column("dept_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
)

student_table = Table(
    "students",
    mapper_registry.metadata,
    Column("student_id", Integer, primary_key=True, autoincrement=True),
    Column("roll_number", String(64), nullable=False, unique=True),
    Column("name", String(255), nullable=True),
    Column("email", String(255), nullable=True),
)

complaint_table = Table(
    "complaints",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("complaint_id", String(64), nullable=False, unique=True),
    Column("description", Text, nullable=False),
    Column("status", String(64), nullable=False),
    Column("severity", Integer, nullable=False),
    Column("institute", String(255), nullable=True),
    Column("contacts", JSON, nullable=True),
    Column("suggestions", JSON, nullable=True),
    Column(
        "dept_id",
        Integer,
        ForeignKey("departments.dept_id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column(
        "student_id",
        Integer,
        ForeignKey("students.student_id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Column("updated_at", UTCDateTime(), nullable=False, server_default=func.now()),
    Index("ix_complaints_created_at", "created_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the department and student dataclasses onto their tables (once per process)."""

    log.debug("Mapping complaint reference entities")

    mapper_registry.map_imperatively(Department, department_table)
    mapper_registry.map_imperatively(Student, student_table)

    configure_mappers()
    return mapper_registry

