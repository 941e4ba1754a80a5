"""Command line entry point: choose directories, load settings, run the batch."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import get_args

from .config import CONFIG_FILE, RunMode, RunnerConfig, load_config
from .connections import ConnectionManager
from .credentials import TomlCredentialStore
from .errors import MongorunError
from .runner import execute_for_directories
from .scripts import ScriptSourceReader

LOG = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="mongorun", description=__doc__)
    parser.add_argument("--config", type=Path, default=CONFIG_FILE, help="Path to mongorun.toml")
    parser.add_argument("--credentials", type=Path, default=None, help="Credential store for credential_ref lookups")
    parser.add_argument("--encoding", default=None, help="Character encoding of the scripts")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")

    commands = parser.add_subparsers(dest="command", required=True)
    for mode in get_args(RunMode):
        sub = commands.add_parser(mode, help=f"Run the configured {mode} script directories")
        sub.add_argument(
            "--directory",
            "-d",
            dest="directories",
            action="append",
            type=Path,
            help="Script directory to run instead of the configured ones (repeatable)",
        )
    drop = commands.add_parser("drop", help="Drop the configured database")
    drop.add_argument("--yes", action="store_true", help="Confirm the drop")
    return parser.parse_args(argv)


def configure_logging(args: argparse.Namespace) -> None:
    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")


def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    mode: RunMode | None = args.command if args.command in get_args(RunMode) else None
    config = config.with_overrides(
        mode=mode,
        directories=getattr(args, "directories", None),
        script_encoding=args.encoding,
        credentials_file=args.credentials,
    )
    manager = _connection_manager(config)
    manager.check("connection")

    if args.command == "drop":
        if not args.yes:
            LOG.error("Refusing to drop %s without --yes", manager.settings.database)
            return 2
        with manager.client() as client:
            manager.drop_database(client)
        return 0

    reader = ScriptSourceReader(config.script_encoding)
    execute_for_directories(config.directories_for(args.command), manager, reader, label=args.command)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args)
    try:
        return run(args)
    except MongorunError as exc:
        LOG.error("%s", exc)
        return 1


def _connection_manager(config: RunnerConfig) -> ConnectionManager:
    return ConnectionManager(config.connection, TomlCredentialStore(config.credentials_file))


if __name__ == "__main__":
    raise SystemExit(main())
