"""Assemble canonical complaint views from the configured sources."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from complaintdesk.domain.model import DEFAULT_INSTITUTE

from .merge import merge
from .normalize import normalize

if TYPE_CHECKING:
    from datetime import datetime

    from complaintdesk.domain.model import CanonicalComplaint
    from complaintdesk.domain.ports.sources import ComplaintSource

log = getLogger(__name__)


def build_merged_view(
    *,
    store_source: ComplaintSource,
    snapshot_source: ComplaintSource,
    default_institute: str = DEFAULT_INSTITUTE,
    now: datetime | None = None,
) -> list[CanonicalComplaint]:
    """Read both sources to completion, then merge them with store priority."""

    store_records = _read_normalized(store_source, default_institute=default_institute, now=now)
    snapshot_records = _read_normalized(
        snapshot_source, default_institute=default_institute, now=now
    )
    merged = merge(store_records, snapshot_records)
    log.info(
        "Merged complaint view: store=%s, snapshot=%s, merged=%s",
        len(store_records),
        len(snapshot_records),
        len(merged),
    )
    return merged


def build_store_report(
    *,
    store_source: ComplaintSource,
    default_institute: str = DEFAULT_INSTITUTE,
    now: datetime | None = None,
) -> list[CanonicalComplaint]:
    """Canonical complaints from the relational store only."""

    records = _read_normalized(store_source, default_institute=default_institute, now=now)
    return [record.without_source() for record in records]


def _read_normalized(
    source: ComplaintSource, *, default_institute: str, now: datetime | None
) -> list[CanonicalComplaint]:
    records = [normalize(raw, default_institute=default_institute, now=now) for raw in source()]
    log.debug("Read %s complaint record(s) from %s", len(records), source.name)
    return records
