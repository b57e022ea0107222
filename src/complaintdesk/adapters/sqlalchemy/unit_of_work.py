"""Engine lifecycle and the SQLAlchemy unit of work for complaints."""

from __future__ import annotations

import math
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine, text
from sqlalchemy.orm import Session, sessionmaker

from complaintdesk.adapters.sqlalchemy.mappings import start_mappers
from complaintdesk.adapters.sqlalchemy.migrations import upgrade_head
from complaintdesk.adapters.sqlalchemy.repositories import (
    SqlAlchemyComplaintRepository,
    SqlAlchemyDepartmentRepository,
    SqlAlchemyStudentRepository,
)
from complaintdesk.config import get_database_uri
from complaintdesk.domain.ports.unit_of_work import ComplaintRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """Raised when the store is used before ``startup()`` or a unit of work is misused."""


@dataclass(slots=True)
class _Persistence:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


_persistence = _Persistence()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Bind the adapter to an engine and migrate its schema to the latest revision."""

    if _persistence.engine is not None and not force:
        raise StartupError("Complaint store already started; pass force=True to rebind it")

    bound = engine or create_engine(database_uri or get_database_uri(), future=True)
    start_mappers()
    upgrade_head(engine=bound)
    _persistence.engine = bound
    _persistence.sessions = sessionmaker(bind=bound, expire_on_commit=False)
    log.info("Complaint store ready on %s", bound.url.render_as_string(hide_password=True))
    return bound


def configured_engine() -> Engine | None:
    return _persistence.engine


def is_started() -> bool:
    return _persistence.engine is not None


def shutdown() -> None:
    """Dispose the bound engine and forget it (mostly for tests)."""

    if _persistence.engine is not None:
        _persistence.engine.dispose()
    _persistence.engine = None
    _persistence.sessions = None


def _session_factory() -> sessionmaker[Session]:
    if _persistence.sessions is None:
        raise StartupError(
            "Complaint store not started. Call complaintdesk.adapters.sqlalchemy.startup() "
            "before requesting a unit of work."
        )
    return _persistence.sessions


class SqlAlchemyComplaintUnitOfWork:
    """One session, and so one transaction, per ``with`` block.

    The session is closed on every exit path and rolled back first when an
    exception escapes the block.
    """

    def __init__(self) -> None:
        self._sessions = _session_factory()
        self._session: Session | None = None
        self._repositories: ComplaintRepositories | None = None

    def _build_repositories(self, session: Session) -> ComplaintRepositories:
        return ComplaintRepositories(
            complaints=SqlAlchemyComplaintRepository(session),
            departments=SqlAlchemyDepartmentRepository(session),
            students=SqlAlchemyStudentRepository(session),
        )

    def __enter__(self) -> SqlAlchemyComplaintUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already active")
        self._session = self._sessions()
        self._repositories = self._build_repositories(self._session)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not active")
        return self._session

    @property
    def repositories(self) -> ComplaintRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not active")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()

    def limit_statement_time(self, seconds: float) -> None:
        # Only PostgreSQL can cancel a running statement; elsewhere the deadline
        # is still enforced between items.
        if self.session.get_bind().dialect.name != "postgresql":
            return
        milliseconds = max(1, math.ceil(seconds * 1000))
        self.session.execute(text(f"SET LOCAL statement_timeout = {milliseconds}"))


if TYPE_CHECKING:
    from complaintdesk.domain.ports.unit_of_work import ComplaintUnitOfWork

    _uow_check: ComplaintUnitOfWork = SqlAlchemyComplaintUnitOfWork()
