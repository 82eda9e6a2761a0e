"""
Command-line interface for zfs-autosnap.

Usage:
    zfs-autosnap status            # show what would be kept and deleted
    zfs-autosnap snap              # snapshot every tracked dataset
    zfs-autosnap gc [--dry-run]    # destroy snapshots the policy no longer keeps
    zfs-autosnap help | version
"""

from __future__ import annotations

import argparse
import sys

from loguru import logger

from autosnap import __url__, __version__
from autosnap.reporting import format_gc, format_status
from autosnap.retention.cleanup import SnapshotCleanupJob, SnapshotJob, gc_find
from autosnap.utils.config import Config, get_config
from autosnap.utils.logging import configure_logging
from autosnap.zfs.client import ZfsClient
from autosnap.zfs.errors import ZfsError

EXIT_USAGE = 111

COMMANDS = ("status", "snap", "gc")
HELP_ALIASES = ("help", "-h", "--help")
VERSION_ALIASES = ("version", "-v", "--version")


class UsageError(Exception):
    """Command line could not be parsed."""

    pass


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting, so main() owns the exit code."""

    def error(self, message: str):
        raise UsageError(message)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="zfs-autosnap",
        description="Generational snapshot rotation for ZFS",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument("command", nargs="?", help="status | snap | gc | help | version")
    parser.add_argument("-h", "--help", action="store_true", help="Show usage and exit")
    parser.add_argument("-v", "--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="gc: report what would be destroyed without destroying it",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Suppress log output except errors",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every zfs command and per-dataset decision",
    )
    parser.add_argument(
        "--zfs",
        type=str,
        metavar="PATH",
        help="zfs executable (default: $AUTOSNAP_ZFS_BIN or 'zfs')",
    )
    parser.add_argument(
        "--property",
        type=str,
        metavar="KEY",
        help="Retention annotation property (default: $AUTOSNAP_PROPERTY)",
    )
    return parser


def print_version() -> None:
    print(f"zfs-autosnap v{__version__} <{__url__}>")


def print_help(property_key: str) -> None:
    print("Usage:")
    print("    zfs-autosnap <status | snap | gc | help | version>")
    print("Tips:")
    print(f"    use 'zfs set {property_key}=h24d30w8m6y1 some/dataset' to enable.")
    print(f"    use 'zfs set {property_key}=- some/dataset@some-snap' to retain.")
    print("    add 'zfs-autosnap snap' to cron.hourly.")
    print("    add 'zfs-autosnap gc'   to cron.daily.")
    print_version()


def do_status(zfs: ZfsClient, config: Config) -> int:
    """Print the keep/delete summary without touching anything."""
    report = format_status(gc_find(zfs, config.property_key))
    if report:
        print(report)
    return 0


def do_snap(zfs: ZfsClient) -> int:
    """Snapshot each tracked dataset."""
    for snapshot in SnapshotJob(zfs).run():
        print(f"snapshot: {snapshot.name}")
    return 0


def do_gc(zfs: ZfsClient, config: Config, dry_run: bool) -> int:
    """Find every snapshot to delete, print it, and destroy it."""
    check = gc_find(zfs, config.property_key)
    report = format_gc(check)
    if report:
        print(report)

    if dry_run:
        logger.warning(f"Dry run: {len(check.delete)} snapshots left in place")

    result = SnapshotCleanupJob(zfs, dry_run=dry_run, property_key=config.property_key).run(check)
    if not result.success:
        print(
            f"Error: failed to destroy {len(result.errors)} of {len(check.delete)} snapshots",
            file=sys.stderr,
        )
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Run the zfs-autosnap command line.

    Args:
        argv: Arguments without the program name (defaults to sys.argv[1:])

    Returns:
        Process exit code: 0 on success, 1 on error, 111 on bad usage
    """
    parser = _build_parser()
    try:
        args, unknown = parser.parse_known_args(argv)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        print_help(get_config().property_key)
        return EXIT_USAGE

    config = get_config().with_overrides(zfs_binary=args.zfs, property_key=args.property)
    configure_logging("DEBUG" if args.verbose else config.log_level, quiet=args.quiet)

    command = args.command
    if args.help or command is None or command in HELP_ALIASES:
        print_help(config.property_key)
        return 0
    if args.version or command in VERSION_ALIASES:
        print_version()
        return 0
    if command not in COMMANDS or unknown:
        print_help(config.property_key)
        return EXIT_USAGE

    zfs = ZfsClient(
        zfs_binary=config.zfs_binary,
        property_key=config.property_key,
        snapshot_suffix=config.snapshot_suffix,
    )

    try:
        if command == "status":
            return do_status(zfs, config)
        elif command == "snap":
            return do_snap(zfs)
        else:
            return do_gc(zfs, config, args.dry_run)

    except (ZfsError, OSError) as e:
        logger.error(f"{command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
