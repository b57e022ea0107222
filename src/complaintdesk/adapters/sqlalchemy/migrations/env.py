"""Alembic environment for the complaintdesk schema."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from alembic import context
from sqlalchemy import create_engine, pool

from complaintdesk.adapters.sqlalchemy.mappings import mapper_registry, start_mappers
from complaintdesk.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection

config = context.config
log = getLogger("alembic.env")

start_mappers()

_COMPARE_OPTIONS: dict[str, Any] = {
    "target_metadata": mapper_registry.metadata,
    "render_as_batch": True,
    "compare_type": True,
    "compare_server_default": True,
}


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_database_config().uri


def _run_on(connection: Connection) -> None:
    context.configure(connection=connection, **_COMPARE_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_offline() -> None:
    """Emit SQL for the pending revisions instead of executing it."""

    context.configure(url=_database_url(), literal_binds=True, **_COMPARE_OPTIONS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run the pending revisions, reusing a caller-supplied connection when given."""

    shared = config.attributes.get("connection")
    if shared is not None:
        _run_on(shared)
        return

    engine = create_engine(_database_url(), poolclass=pool.NullPool, future=True)
    try:
        with engine.connect() as connection:
            _run_on(connection)
    finally:
        engine.dispose()


if context.is_offline_mode():
    log.info("Rendering complaintdesk migrations as SQL")
    run_migrations_offline()
else:
    run_migrations_online()
