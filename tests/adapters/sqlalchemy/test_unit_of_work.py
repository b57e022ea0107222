from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlalchemy import select

from complaintdesk.adapters.sqlalchemy.mappings import department_table
from complaintdesk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyComplaintUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)
from complaintdesk.domain.model import Department

if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Engine


def test_unit_of_work_requires_startup() -> None:
    shutdown()

    assert not is_started()
    with pytest.raises(StartupError):
        SqlAlchemyComplaintUnitOfWork()


def test_startup_twice_requires_force(sqlite_engine: Engine) -> None:
    startup(engine=sqlite_engine, force=True)
    try:
        with pytest.raises(StartupError):
            startup(engine=sqlite_engine)
        assert configured_engine() is sqlite_engine
    finally:
        shutdown()


def test_commit_persists_changes(
    sqlite_unit_of_work: Callable[[], SqlAlchemyComplaintUnitOfWork], sqlite_engine: Engine
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.repositories.departments.add(Department(name="Facilities"))
        uow.commit()

    with sqlite_engine.connect() as connection:
        names = connection.execute(select(department_table.c.name)).scalars().all()
    assert names == ["Facilities"]


def test_statement_time_limit_is_ignored_on_sqlite(
    sqlite_unit_of_work: Callable[[], SqlAlchemyComplaintUnitOfWork], sqlite_engine: Engine
) -> None:
    with sqlite_unit_of_work() as uow:
        uow.limit_statement_time(0.25)
        uow.repositories.departments.add(Department(name="Library"))
        uow.commit()

    with sqlite_engine.connect() as connection:
        names = connection.execute(select(department_table.c.name)).scalars().all()
    assert names == ["Library"]


def test_exception_rolls_back_and_closes_session(
    sqlite_unit_of_work: Callable[[], SqlAlchemyComplaintUnitOfWork], sqlite_engine: Engine
) -> None:
    uow = sqlite_unit_of_work()
    with pytest.raises(RuntimeError), uow:
        uow.repositories.departments.add(Department(name="Facilities"))
        uow.session.flush()
        raise RuntimeError("boom")

    with pytest.raises(StartupError):
        _ = uow.session
    with sqlite_engine.connect() as connection:
        names = connection.execute(select(department_table.c.name)).scalars().all()
    assert names == []
