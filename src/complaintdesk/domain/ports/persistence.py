"""Ports for persisting complaints and the records they reference."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from complaintdesk.domain.model import Department, Student

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from complaintdesk.domain.model import ComplaintUpsert, RawStoreRecord


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class DepartmentRepository(Repository[Department], Protocol):
    def find_by_name(self, name: str) -> Department | None:
        """Case-insensitive exact match; the lowest id wins when several rows match."""
        ...

    def list_all(self) -> Sequence[Department]: ...


@runtime_checkable
class StudentRepository(Repository[Student], Protocol):
    def find_by_roll_number(self, roll_number: str) -> Student | None: ...


@runtime_checkable
class ComplaintRepository(Protocol):
    """Persistence contract for complaint rows."""

    def upsert(self, values: ComplaintUpsert) -> None:
        """Insert the complaint or overwrite every field of the row sharing its id."""
        ...

    def get(self, complaint_id: str) -> RawStoreRecord | None: ...

    def iter_joined(self) -> Iterator[RawStoreRecord]:
        """Complaints joined with department and submitter, newest first."""
        ...
