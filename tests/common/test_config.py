from __future__ import annotations

from pathlib import Path  # noqa: TC003

import pytest

from complaintdesk.config import (
    DEFAULT_BATCH_DEADLINE_SECONDS,
    DEFAULT_INSTITUTE,
    ConfigurationError,
    get_complaints_config,
    get_database_uri,
    get_storage_config,
)
from complaintdesk.config.storage import DEFAULT_DB_FILENAME, SNAPSHOT_FILENAME

_COMPLAINT_VARS = (
    "COMPLAINTS_SNAPSHOT_PATH",
    "COMPLAINTS_BATCH_DEADLINE_SECONDS",
    "COMPLAINTS_DEFAULT_INSTITUTE",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _COMPLAINT_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("COMPLAINTDESK_DATA_DIR", str(tmp_path / "data"))


def test_storage_prefers_explicit_data_dir(tmp_path: Path) -> None:
    assert get_storage_config().root == (tmp_path / "data").resolve()


def test_database_uri_uses_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DATABASE_URI", "postgresql+psycopg://desk@localhost/complaints")

    assert get_database_uri() == "postgresql+psycopg://desk@localhost/complaints"


def test_database_uri_defaults_to_sqlite_in_data_dir(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.delenv("DATABASE_URI", raising=False)

    uri = get_database_uri()

    expected_path = (tmp_path / "data" / DEFAULT_DB_FILENAME).resolve()
    assert uri == f"sqlite+pysqlite:///{expected_path}"
    assert expected_path.parent.exists()


def test_complaints_config_defaults(tmp_path: Path) -> None:
    config = get_complaints_config()

    assert config.snapshot_path == (tmp_path / "data").resolve() / SNAPSHOT_FILENAME
    assert config.batch_deadline_seconds == DEFAULT_BATCH_DEADLINE_SECONDS
    assert config.default_institute == DEFAULT_INSTITUTE


def test_complaints_config_reads_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("COMPLAINTS_SNAPSHOT_PATH", str(tmp_path / "exports" / "snap.json"))
    monkeypatch.setenv("COMPLAINTS_BATCH_DEADLINE_SECONDS", "2.5")
    monkeypatch.setenv("COMPLAINTS_DEFAULT_INSTITUTE", "  City Campus ")

    config = get_complaints_config()

    assert config.snapshot_path == tmp_path / "exports" / "snap.json"
    assert config.batch_deadline_seconds == 2.5
    assert config.default_institute == "City Campus"


@pytest.mark.parametrize("value", ["soon", "0", "-3", "nan"])
def test_invalid_deadline_is_rejected(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("COMPLAINTS_BATCH_DEADLINE_SECONDS", value)

    with pytest.raises(ConfigurationError) as exc:
        get_complaints_config()

    assert "COMPLAINTS_BATCH_DEADLINE_SECONDS" in str(exc.value)


def test_blank_values_count_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMPLAINTS_BATCH_DEADLINE_SECONDS", "   ")
    monkeypatch.setenv("COMPLAINTS_DEFAULT_INSTITUTE", "")

    config = get_complaints_config()

    assert config.batch_deadline_seconds == DEFAULT_BATCH_DEADLINE_SECONDS
    assert config.default_institute == DEFAULT_INSTITUTE
