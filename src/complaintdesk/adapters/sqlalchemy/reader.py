"""Complaint source reading joined rows from the relational store."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from complaintdesk.domain.model import SourceTag

from .unit_of_work import SqlAlchemyComplaintUnitOfWork, StartupError

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from complaintdesk.domain.model import RawStoreRecord
    from complaintdesk.domain.ports.unit_of_work import ComplaintUnitOfWork

log = getLogger(__name__)


@dataclass(slots=True)
class SqlAlchemyComplaintSource:
    unit_of_work_factory: Callable[[], ComplaintUnitOfWork] = SqlAlchemyComplaintUnitOfWork

    @property
    def name(self) -> str:
        return SourceTag.STORE.value

    def __call__(self) -> Iterator[RawStoreRecord]:
        try:
            with self.unit_of_work_factory() as uow:
                # Materialised inside the session so the connection is released before yielding.
                records = list(uow.repositories.complaints.iter_joined())
        except (SQLAlchemyError, StartupError) as exc:
            log.warning("Complaint store unavailable, treating it as empty: %s", exc)
            return
        log.debug("Loaded %s complaint row(s) from the store", len(records))
        yield from records


if TYPE_CHECKING:
    from complaintdesk.domain.ports.sources import ComplaintSource

    _source_check: ComplaintSource = SqlAlchemyComplaintSource()
