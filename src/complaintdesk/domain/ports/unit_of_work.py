"""Transaction boundary shared by complaint reads and batch upserts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from complaintdesk.domain.ports.persistence import (
        ComplaintRepository,
        DepartmentRepository,
        StudentRepository,
    )


@dataclass(slots=True)
class ComplaintRepositories:
    """Repositories bound to the session of one unit of work."""

    complaints: ComplaintRepository
    departments: DepartmentRepository
    students: StudentRepository


@runtime_checkable
class ComplaintUnitOfWork(Protocol):
    """One transaction over the complaint store.

    Leaving the ``with`` block without ``commit()`` discards pending writes; an
    exception escaping the block triggers a rollback before it propagates.
    """

    @property
    def repositories(self) -> ComplaintRepositories: ...

    def __enter__(self) -> ComplaintUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def limit_statement_time(self, seconds: float) -> None:
        """Cap how long each further statement in this transaction may run."""
        ...
