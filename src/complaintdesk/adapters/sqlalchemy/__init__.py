"""SQLAlchemy adapter: schema, repositories, units of work and the store reader."""

from __future__ import annotations

from .reader import SqlAlchemyComplaintSource
from .unit_of_work import (
    SqlAlchemyComplaintUnitOfWork,
    StartupError,
    configured_engine,
    is_started,
    shutdown,
    startup,
)

__all__ = [
    "SqlAlchemyComplaintSource",
    "SqlAlchemyComplaintUnitOfWork",
    "StartupError",
    "configured_engine",
    "is_started",
    "shutdown",
    "startup",
]
