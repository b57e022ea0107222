"""Root logger setup shared by the CLI and the HTTP server."""

from __future__ import annotations

import logging
from typing import Final

LOG_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S"

# Alembic reports its migration context at INFO on every startup.
_CHATTY_LOGGERS: Final[tuple[str, ...]] = ("alembic.runtime.migration",)


def configure_logging(*, level: int | str = logging.INFO, force: bool = False) -> None:
    """Configure the root logger once; ``force=True`` replaces existing handlers."""

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=DATE_FORMAT, force=force)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
