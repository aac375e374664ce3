"""
Command-line interface for the application.

This module provides the main entry point for the CLI.
"""

from __future__ import annotations

import argparse
import sys

from restaurant_signals import __version__
from restaurant_signals.bootstrap import (
    CollectionService,
    StartupError,
    build_collectors,
    build_triggers,
)
from restaurant_signals.config import get_settings
from restaurant_signals.log import configure_logging
from restaurant_signals.schemas import OutcomeStatus
from restaurant_signals.store import SignalStore, StoreError

COLLECTOR_NAMES = ("weather", "events", "calendar", "social")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="restaurant-signals",
        description="Scheduled collection of weather, event and calendar signals",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'run' command - bootstrap and keep collecting until signalled
    subparsers.add_parser("run", help="Start the collection service")

    # 'collect' command - one collector, once
    collect_parser = subparsers.add_parser("collect", help="Run one collector once")
    collect_parser.add_argument("collector", choices=COLLECTOR_NAMES)

    # 'info' command
    subparsers.add_parser("info", help="Show configuration and collector status")

    return parser


def _setup_logging(args: argparse.Namespace) -> None:
    settings = get_settings()
    level = "DEBUG" if args.debug or settings.debug else settings.log_level
    configure_logging(level, settings.log_dir)


def cmd_run(args: argparse.Namespace) -> int:
    """Handle the 'run' command."""
    _setup_logging(args)
    try:
        service = CollectionService(get_settings())
        service.start()
    except StartupError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    service.wait()
    return 0


def cmd_collect(args: argparse.Namespace) -> int:
    """Handle the 'collect' command: run a single collector and report the outcome."""
    _setup_logging(args)
    settings = get_settings()
    try:
        store = SignalStore(settings.database_url)
    except StoreError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    try:
        store.health_check()
        store.create_schema()
    except StoreError as e:
        store.close()
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        outcome = build_collectors(settings, store)[args.collector].run()
    finally:
        store.close()

    if outcome.status is OutcomeStatus.SUCCESS:
        print(f"Success: {outcome.count} rows in {outcome.elapsed_ms:.0f}ms")
        return 0
    if outcome.status is OutcomeStatus.SKIPPED:
        print(f"Skipped: {outcome.reason}")
        return 0
    print(f"Error ({outcome.error_kind}): {outcome.error}", file=sys.stderr)
    return 1


def cmd_info(_args: argparse.Namespace) -> int:
    """Handle the 'info' command."""
    settings = get_settings()
    collectors = build_collectors(settings, None)
    triggers = build_triggers(settings)
    print(f"Application: {settings.app_name}")
    print(f"Version: {__version__}")
    print(f"Environment: {settings.app_env}")
    print(f"Database: {settings.database_url.split('@')[-1]}")
    lat, lon = settings.reference_point
    print(f"Reference point: ({lat}, {lon})")
    print("Collectors:")
    for name in COLLECTOR_NAMES:
        reason = collectors[name].skip_reason()
        state = "configured" if reason is None else f"skips ({reason})"
        print(f"  {name}: {triggers[name].describe()}, {state}")
    return 0


def main() -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "collect": cmd_collect,
        "info": cmd_info,
    }

    handler = commands.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
