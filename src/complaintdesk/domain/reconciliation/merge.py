"""Deduplicate canonical complaints coming from the store and the snapshot.

Store records are the system of record and the snapshot is a lagging mirror
of it, so on an ``id`` collision the store entry survives regardless of which
record is newer.
"""

from __future__ import annotations

from itertools import chain
from logging import getLogger
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from complaintdesk.domain.model import CanonicalComplaint

log = getLogger(__name__)


def merge(
    store_records: Iterable[CanonicalComplaint],
    snapshot_records: Iterable[CanonicalComplaint],
) -> list[CanonicalComplaint]:
    """Return one entry per complaint id, store entries first, provenance stripped."""

    merged: dict[str, CanonicalComplaint] = {}
    dropped = 0
    for record in chain(store_records, snapshot_records):
        if record.id in merged:
            dropped += 1
            continue
        merged[record.id] = record

    if dropped:
        log.debug("Dropped %s duplicate complaint record(s) while merging", dropped)
    return [record.without_source() for record in merged.values()]

