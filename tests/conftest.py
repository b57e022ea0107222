from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from complaintdesk.adapters.sqlalchemy.mappings import start_mappers
from complaintdesk.adapters.sqlalchemy.migrations import upgrade_head
from complaintdesk.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyComplaintUnitOfWork,
    shutdown,
    startup,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    # One shared connection so request-handler threads see the same in-memory database.
    engine = create_engine(
        "sqlite+pysqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        future=True,
    )
    start_mappers()
    upgrade_head(engine=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session(sqlite_engine: Engine) -> Iterator[Session]:
    session_factory = sessionmaker(bind=sqlite_engine, future=True)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def sqlite_unit_of_work(
    sqlite_engine: Engine,
) -> Iterator[Callable[[], SqlAlchemyComplaintUnitOfWork]]:
    startup(engine=sqlite_engine, force=True)

    def factory() -> SqlAlchemyComplaintUnitOfWork:
        return SqlAlchemyComplaintUnitOfWork()

    try:
        yield factory
    finally:
        shutdown()
