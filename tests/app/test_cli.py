from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from complaintdesk.domain.model import (
    BatchItem,
    BatchItemResult,
    Department,
    FailureReason,
    RawSnapshotRecord,
)
from complaintdesk.domain.reconciliation import normalize
from complaintdesk.ui import cli

if TYPE_CHECKING:
    from pathlib import Path


def test_apply_batch_reads_file_and_prints_results(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    captured: list[BatchItem] = []

    def fake_apply(items: list[BatchItem]) -> list[BatchItemResult]:
        captured.extend(items)
        return [
            BatchItemResult.success("c1", dept_id=4, student_id=None),
            BatchItemResult.failed("c2", FailureReason.DEPARTMENT_NOT_FOUND),
        ]

    monkeypatch.setattr(cli, "apply_complaint_batch", fake_apply)
    batch_file = tmp_path / "batch.json"
    batch_file.write_text(
        json.dumps(
            [
                {"id": "c1", "studentView": {"complaint": "broken AC"}},
                {"id": "c2", "student_view": {"complaint": "x"}, "studentRollNumber": "21CS042"},
            ]
        ),
        encoding="utf-8",
    )

    cli.main(["apply-batch", str(batch_file)])

    assert [item.id for item in captured] == ["c1", "c2"]
    assert captured[0].student_view == {"complaint": "broken AC"}
    assert captured[1].student_roll_number == "21CS042"
    printed = json.loads(capsys.readouterr().out)
    assert printed == [
        {
            "complaint_id": "c1",
            "status": "success",
            "reason": None,
            "dept_id": 4,
            "student_id": None,
        },
        {
            "complaint_id": "c2",
            "status": "failed",
            "reason": "department not found",
            "dept_id": None,
            "student_id": None,
        },
    ]


def test_apply_batch_accepts_single_object(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    captured: list[BatchItem] = []

    def fake_apply(items: list[BatchItem]) -> list[BatchItemResult]:
        captured.extend(items)
        return []

    monkeypatch.setattr(cli, "apply_complaint_batch", fake_apply)
    batch_file = tmp_path / "batch.json"
    batch_file.write_text(json.dumps({"id": 7, "category": "Library"}), encoding="utf-8")

    cli.main(["apply-batch", str(batch_file)])

    assert [(item.id, item.category) for item in captured] == [("7", "Library")]


def test_apply_batch_with_unreadable_file_exits_with_usage_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply-batch", str(tmp_path / "missing.json")])

    assert excinfo.value.code == 2


def test_apply_batch_with_invalid_json_exits_with_usage_error(tmp_path: Path) -> None:
    batch_file = tmp_path / "batch.json"
    batch_file.write_text("{broken", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["apply-batch", str(batch_file)])

    assert excinfo.value.code == 2


def test_add_department(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "create_department", lambda name: Department(name=name, dept_id=3))

    cli.main(["add-department", "Library"])

    assert json.loads(capsys.readouterr().out) == {"name": "Library", "dept_id": 3}


def test_rejected_input_exits_with_usage_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_create(name: str) -> Department:
        raise ValueError(f"Department {name!r} already exists")

    monkeypatch.setattr(cli, "create_department", failing_create)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["add-department", "Library"])

    assert excinfo.value.code == 2


def test_command_failure_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_create(name: str) -> Department:
        raise RuntimeError("database is locked")

    monkeypatch.setattr(cli, "create_department", failing_create)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["add-department", "Library"])

    assert excinfo.value.code == 1


def test_merged_prints_canonical_complaints(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    complaint = normalize(
        RawSnapshotRecord(id="s1", admin_view={"departments": ["Library"]})
    ).without_source()
    monkeypatch.setattr(cli, "list_merged_complaints", lambda: [complaint])

    cli.main(["merged"])

    (printed,) = json.loads(capsys.readouterr().out)
    assert printed["id"] == "s1"
    assert printed["category"] == "library"
    assert printed["studentView"]["departments"] == ["Library"]


def test_serve_runs_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    import uvicorn  # noqa: PLC0415

    calls: list[dict[str, object]] = []

    def fake_run(app: object, **kwargs: object) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(uvicorn, "run", fake_run)

    cli.main(["serve", "--port", "9001"])

    assert calls[0]["host"] == cli.DEFAULT_HOST
    assert calls[0]["port"] == 9001
