from __future__ import annotations

from datetime import UTC, datetime

from complaintdesk.domain.model import CanonicalComplaint, RawSnapshotRecord, RawStoreRecord
from complaintdesk.domain.reconciliation import merge, normalize

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def _store(
    complaint_id: str, description: str, *, created_at: datetime | None = None
) -> CanonicalComplaint:
    return normalize(
        RawStoreRecord(complaint_id=complaint_id, description=description, created_at=created_at),
        now=NOW,
    )


def _snapshot(
    complaint_id: str, description: str, *, timestamp: str | None = None
) -> CanonicalComplaint:
    view: dict[str, object] = {"complaint": description}
    if timestamp is not None:
        view["timestamp"] = timestamp
    return normalize(RawSnapshotRecord(id=complaint_id, student_view=view), now=NOW)


def test_store_entry_wins_over_newer_snapshot_entry() -> None:
    store = [_store("x", "store text", created_at=datetime(2020, 1, 1, tzinfo=UTC))]
    snapshot = [_snapshot("x", "snapshot text", timestamp="2030-01-01T00:00:00Z")]

    merged = merge(store, snapshot)

    assert len(merged) == 1
    assert merged[0].student_view.complaint == "store text"


def test_source_tag_is_stripped() -> None:
    merged = merge([_store("a", "one")], [_snapshot("b", "two")])

    assert [record.source for record in merged] == [None, None]


def test_store_entries_come_first_then_unseen_snapshot_entries() -> None:
    merged = merge(
        [_store("a", "one"), _store("b", "two")],
        [_snapshot("b", "dup"), _snapshot("c", "three")],
    )

    assert [record.id for record in merged] == ["a", "b", "c"]


def test_duplicates_within_one_source_keep_the_first_occurrence() -> None:
    merged = merge([], [_snapshot("s", "first"), _snapshot("s", "second")])

    assert [record.student_view.complaint for record in merged] == ["first"]


def test_merging_nothing_yields_nothing() -> None:
    assert merge([], []) == []
