"""Complaint source reading the JSON snapshot produced by the ingestion pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, cast

from pydantic import ValidationError

from complaintdesk.config import get_complaints_config
from complaintdesk.domain.model import RawSnapshotRecord, SourceTag

from .schema import SnapshotComplaint

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

log = getLogger(__name__)


def _default_snapshot_path() -> Path:
    return get_complaints_config().snapshot_path


@dataclass(slots=True)
class JsonSnapshotSource:
    """Read a JSON array of complaint objects.

    A missing, unreadable or malformed file is treated as an empty snapshot.
    Entries that are not objects are skipped one by one.
    """

    path: Path = field(default_factory=_default_snapshot_path)

    @property
    def name(self) -> str:
        return SourceTag.SNAPSHOT.value

    def __call__(self) -> Iterator[RawSnapshotRecord]:
        entries = self._load_entries()
        for position, entry in enumerate(entries):
            if not isinstance(entry, dict):
                log.warning("Skipping snapshot entry %s: not an object", position)
                continue
            try:
                payload = SnapshotComplaint.model_validate(entry)
            except ValidationError as exc:
                log.warning("Skipping snapshot entry %s: %s", position, exc)
                continue
            yield RawSnapshotRecord(
                id=payload.id,
                category=payload.category,
                student_view=payload.student_view,
                admin_view=payload.admin_view,
            )

    def _load_entries(self) -> list[object]:
        if not self.path.exists():
            log.info("No complaint snapshot at %s", self.path)
            return []
        try:
            with self.path.open(encoding="utf-8") as snapshot_file:
                document = json.load(snapshot_file)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            log.warning(
                "Complaint snapshot %s unreadable, treating it as empty: %s", self.path, exc
            )
            return []
        if not isinstance(document, list):
            log.warning("Complaint snapshot %s is not a JSON array, ignoring it", self.path)
            return []
        return cast(list[object], document)


if TYPE_CHECKING:
    from complaintdesk.domain.ports.sources import ComplaintSource

    _source_check: ComplaintSource = JsonSnapshotSource()
