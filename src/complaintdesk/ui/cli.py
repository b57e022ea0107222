from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic import TypeAdapter, ValidationError

from complaintdesk.api.schemas import BatchItemPayload, BatchItemResultOut, CanonicalComplaintOut
from complaintdesk.app import (
    apply_complaint_batch,
    create_department,
    list_merged_complaints,
)
from complaintdesk.config import configure_logging

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

log = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

_BATCH_ADAPTER: TypeAdapter[BatchItemPayload | list[BatchItemPayload]] = TypeAdapter(
    BatchItemPayload | list[BatchItemPayload]
)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Campus complaint desk backend")
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        help="Logging level (default: %(default)s)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=DEFAULT_HOST, help="Bind address")
    serve.add_argument("--port", type=int, default=DEFAULT_PORT, help="Bind port")

    subparsers.add_parser("merged", help="Print the merged complaint view as JSON")

    apply_batch = subparsers.add_parser(
        "apply-batch",
        help="Apply a JSON file holding one complaint submission or an array of them",
    )
    apply_batch.add_argument("file", type=Path, help="Path to the batch JSON file")

    department = subparsers.add_parser("add-department", help="Register a department")
    department.add_argument("name", type=str, help="Department name")

    return parser.parse_args(list(argv))


def _load_batch(path: Path) -> list[BatchItemPayload]:
    try:
        payload = _BATCH_ADAPTER.validate_json(path.read_bytes())
    except OSError as exc:
        raise ValueError(f"Cannot read batch file {path}: {exc}") from exc
    except ValidationError as exc:
        raise ValueError(f"Invalid batch file {path}: {exc}") from exc
    return payload if isinstance(payload, list) else [payload]


def _print_json(document: object) -> None:
    sys.stdout.write(json.dumps(document, indent=2, ensure_ascii=False) + "\n")


def _serve(host: str, port: int) -> None:
    import uvicorn  # noqa: PLC0415

    from complaintdesk.api import create_app  # noqa: PLC0415

    # log_config=None keeps the root logging configured by configure_logging.
    uvicorn.run(create_app(), host=host, port=port, log_config=None)


def _command_merged(_args: argparse.Namespace) -> None:
    _print_json(
        [
            CanonicalComplaintOut.from_domain(complaint).model_dump(by_alias=True)
            for complaint in list_merged_complaints()
        ]
    )


def _command_apply_batch(args: argparse.Namespace) -> None:
    batch = _load_batch(args.file)
    results = apply_complaint_batch([item.to_domain() for item in batch])
    _print_json([BatchItemResultOut.from_domain(result).model_dump() for result in results])


def _command_add_department(args: argparse.Namespace) -> None:
    _print_json(asdict(create_department(args.name)))


def _command_serve(args: argparse.Namespace) -> None:
    _serve(args.host, args.port)


_COMMANDS: dict[str, Callable[[argparse.Namespace], None]] = {
    "serve": _command_serve,
    "merged": _command_merged,
    "apply-batch": _command_apply_batch,
    "add-department": _command_add_department,
}


def main(argv: Sequence[str] | None = None) -> None:
    """Parse arguments, configure logging and run one subcommand.

    Exits with status 2 on unusable input (for example an unreadable batch
    file) and 1 on any other failure.
    """
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(level=args.log_level.upper())
    command = _COMMANDS[args.command]

    try:
        command(args)
    except ValueError as exc:
        log.error("Invalid input for %s: %s", args.command, exc)  # noqa: TRY400
        sys.exit(2)
    except Exception:
        log.exception("%s failed", args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
