from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any
from uuid import UUID

from dotenv import load_dotenv

from cultivate.adapters.sqlalchemy.migrations import upgrade_head
from cultivate.app import build_services
from cultivate.config import configure_logging
from cultivate.domain.errors import PipelineError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Cultivate relationship pipeline")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", type=str, default=DEFAULT_HOST, help="Interface to bind")
    serve.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")

    subparsers.add_parser("migrate", help="Upgrade the database schema to the latest revision")

    add_contact = subparsers.add_parser("add-contact", help="Register a contact")
    add_contact.add_argument("--user-id", type=str, required=True, help="Owning user id")
    add_contact.add_argument(
        "--fields",
        type=str,
        default="{}",
        help="Contact fields as a JSON object, e.g. '{\"name\": \"Ada\"}'",
    )

    request_parse = subparsers.add_parser(
        "request-parse", help="Request parsing of an artifact and run it in-process"
    )
    request_parse.add_argument("artifact_id", type=str)

    reprocess = subparsers.add_parser(
        "reprocess", help="Re-run parsing for an artifact, superseding its open suggestion"
    )
    reprocess.add_argument("artifact_id", type=str)

    transcribe = subparsers.add_parser(
        "transcribe", help="Transcribe a voice memo artifact from an audio file"
    )
    transcribe.add_argument("artifact_id", type=str)
    transcribe.add_argument("audio_file", type=Path)

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_fields(value: str) -> dict[str, Any]:
    try:
        loaded = json.loads(value)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON for --fields: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ValueError("--fields must be a JSON object")
    return loaded


def _serve(host: str, port: int) -> None:
    import uvicorn  # noqa: PLC0415

    from cultivate.ui.api import create_app  # noqa: PLC0415

    uvicorn.run(create_app(), host=host, port=port, log_config=None)


def _run(parsed_args: argparse.Namespace) -> None:
    command = parsed_args.command
    if command == "serve":
        _serve(parsed_args.host, parsed_args.port)
    elif command == "migrate":
        upgrade_head()
        log.info("Database schema is up to date")
    elif command == "add-contact":
        services = build_services()
        contact = services.register_contact(
            user_id=_parse_uuid(parsed_args.user_id), fields=_parse_fields(parsed_args.fields)
        )
        log.info("Created contact %s", contact.id)
    elif command == "request-parse":
        services = build_services()
        artifact_id = _parse_uuid(parsed_args.artifact_id)
        services.orchestrator.request_parse(artifact_id)
        artifact = services.orchestrator.get(artifact_id)
        log.info("Artifact %s is now %s", artifact.id, artifact.stage)
    elif command == "reprocess":
        services = build_services()
        artifact_id = _parse_uuid(parsed_args.artifact_id)
        services.orchestrator.reprocess(artifact_id)
        artifact = services.orchestrator.get(artifact_id)
        log.info("Artifact %s is now %s", artifact.id, artifact.stage)
    elif command == "transcribe":
        services = build_services()
        audio_path: Path = parsed_args.audio_file
        artifact = services.transcribe(
            _parse_uuid(parsed_args.artifact_id),
            audio_path.read_bytes(),
            filename=audio_path.name,
        )
        log.info("Artifact %s is now %s", artifact.id, artifact.stage)
    else:
        raise ValueError(f"Unsupported command: {command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _run(parsed_args)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)
    except PipelineError as exc:
        log.error("%s: %s", type(exc).__name__, exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    signal(SIGINT, sigint_handler)
    main()
