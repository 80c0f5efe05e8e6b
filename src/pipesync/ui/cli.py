# ruff: noqa: T201

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import asdict
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from pipesync import __version__
from pipesync.app import PipefySession
from pipesync.config import ConfigurationError, configure_logging, get_api_config
from pipesync.domain.errors import EntityNotFoundError, PipesyncError
from pipesync.domain.model import EntityKind

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    import httpx

    from pipesync.config import ApiConfig
    from pipesync.domain.model import RemoteState

log = logging.getLogger(__name__)

_KINDS = [kind.value for kind in EntityKind]


def _add_entity_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("kind", choices=_KINDS, help="Entity kind")
    parser.add_argument("entity_id", help="Remote id of the entity")
    parser.add_argument(
        "--phase-id",
        type=str,
        help="Id of the phase owning the field (required for fields)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect and remove Pipefy entities")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds after which the whole command is abandoned",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Print the remote state of an entity as JSON")
    _add_entity_arguments(show)

    delete = subparsers.add_parser("delete", help="Delete an entity")
    _add_entity_arguments(delete)

    return parser.parse_args(list(argv))


def _validate(args: argparse.Namespace) -> None:
    if args.kind == EntityKind.FIELD and not args.phase_id:
        raise ValueError("--phase-id is required for fields")
    if args.timeout is not None and args.timeout <= 0:
        raise ValueError("Timeout must be positive")


def _render(state: RemoteState) -> str:
    return json.dumps({"kind": state.kind.value, **asdict(state)}, indent=2, sort_keys=True)


async def _show(session: PipefySession, args: argparse.Namespace, deadline: float | None) -> str:
    match args.kind:
        case EntityKind.PIPE:
            state = await session.pipes.lookup(args.entity_id, deadline=deadline)
        case EntityKind.PHASE:
            state = await session.phases.lookup(args.entity_id, deadline=deadline)
        case EntityKind.FIELD:
            state = await session.fields.lookup(
                args.entity_id, phase_id=args.phase_id, deadline=deadline
            )
        case _:
            state = await session.automations.lookup(args.entity_id, deadline=deadline)
    return _render(state)


async def _delete(session: PipefySession, args: argparse.Namespace, deadline: float | None) -> str:
    match args.kind:
        case EntityKind.PIPE:
            await session.pipes.delete(args.entity_id, deadline=deadline)
        case EntityKind.PHASE:
            await session.phases.delete(args.entity_id, deadline=deadline)
        case EntityKind.FIELD:
            await session.fields.delete(
                args.entity_id, phase_id=args.phase_id, deadline=deadline
            )
        case _:
            await session.automations.delete(args.entity_id, deadline=deadline)
    return f"Deleted {args.kind} {args.entity_id}"


async def _run(
    args: argparse.Namespace,
    config: ApiConfig,
    transport: httpx.AsyncBaseTransport | None,
) -> str:
    deadline = None
    if args.timeout is not None:
        deadline = asyncio.get_running_loop().time() + args.timeout

    async with PipefySession(config, transport=transport) as session:
        if args.command == "show":
            return await _show(session, args, deadline)
        return await _delete(session, args, deadline)


def main(
    argv: Sequence[str] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        _validate(parsed_args)
        config = get_api_config()
    except (ValueError, ConfigurationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        output = asyncio.run(_run(parsed_args, config, transport))
    except EntityNotFoundError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    except PipesyncError:
        log.exception("Remote operation failed")
        sys.exit(1)

    print(output)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
