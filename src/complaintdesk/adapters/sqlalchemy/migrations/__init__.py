"""Apply the Alembic migrations bundled with the SQLAlchemy adapter."""

from __future__ import annotations

from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

from complaintdesk.config import get_database_uri

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent

log = getLogger(__name__)


def alembic_config(*, database_uri: str | None = None) -> Config:
    """Alembic configuration pointing at the revisions shipped with the package."""

    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    config.set_main_option("version_locations", str(MIGRATIONS_PATH / "versions"))
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def current_revision(connection: Connection) -> str | None:
    return MigrationContext.configure(connection).get_current_revision()


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Upgrade the database schema to the latest revision.

    With ``engine`` the upgrade runs on one of its connections inside a single
    transaction; otherwise Alembic opens its own engine for ``database_uri``.
    """

    if engine is None:
        command.upgrade(alembic_config(database_uri=database_uri or get_database_uri()), "head")
        return

    config = alembic_config()
    with engine.begin() as connection:
        before = current_revision(connection)
        config.attributes["connection"] = connection
        command.upgrade(config, "head")
        after = current_revision(connection)
    if before != after:
        log.info("Upgraded complaint schema from %s to %s", before or "<empty>", after)
