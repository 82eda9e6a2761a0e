"""
ZFS command-line client.

Wraps the `zfs` tool behind the narrow list / get-property / create /
destroy boundary used by the retention core. All reads use `-H`
(scripted mode: no headers, tab-separated columns).

Usage:
    from autosnap.zfs.client import ZfsClient

    zfs = ZfsClient()
    for snapshot in zfs.list_snapshots():
        print(snapshot.name, snapshot.created_at, snapshot.size_bytes)
"""

from __future__ import annotations

import os
import re
import subprocess
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from loguru import logger

from autosnap.utils.config import get_config
from autosnap.zfs.errors import NotASnapshotError, ZfsCommandError, ZfsParseError
from autosnap.zfs.models import SNAPSHOT_SEPARATOR, SnapshotRecord

# zfs(8) prints creation times like "Sat Oct  2 09:59 2021"
CREATION_FORMAT = "%a %b %d %H:%M %Y"

# zfs(8) says e.g. 1.2M but means 1.2MiB
_SIZE_RE = re.compile(r"^(\d+(?:\.\d+)?)([BKMGTPEZ]?)$")
_SIZE_MULTIPLIERS = {
    "": 1,
    "B": 1,
    "K": 1024,
    "M": 1024**2,
    "G": 1024**3,
    "T": 1024**4,
    "P": 1024**5,
    "E": 1024**6,
    "Z": 1024**7,
}


def parse_used(text: str) -> int:
    """
    Parse a zfs human-readable size into bytes.

    Args:
        text: Size as printed by zfs (e.g. '0', '512', '1.5K', '13G')

    Returns:
        Size in bytes

    Raises:
        ZfsParseError: If the size cannot be parsed
    """
    match = _SIZE_RE.match(text.strip())
    if match is None:
        raise ZfsParseError(f"Invalid size: {text!r}")

    number, suffix = match.groups()
    try:
        return int(Decimal(number) * _SIZE_MULTIPLIERS[suffix])
    except InvalidOperation as e:
        raise ZfsParseError(f"Invalid size: {text!r}") from e


def parse_creation(text: str) -> datetime:
    """
    Parse a zfs creation timestamp, interpreted as UTC.

    Args:
        text: Creation time as printed by zfs (e.g. 'Sat Oct  2 09:59 2021')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ZfsParseError: If the timestamp cannot be parsed
    """
    try:
        created = datetime.strptime(text.strip(), CREATION_FORMAT)
    except ValueError as e:
        raise ZfsParseError(f"Invalid creation time: {text!r}") from e
    return created.replace(tzinfo=timezone.utc)


def parse_snapshots(rows: list[list[str]]) -> list[SnapshotRecord]:
    """
    Convert `zfs list -o name,creation,used,<key>` rows into records.

    Rows whose retention annotation is '-' are skipped. This covers both
    snapshots of datasets that are not managed (the property was never
    inherited) and snapshots explicitly opted out of rotation.

    Args:
        rows: Tab-split output rows (name, creation, used, annotation)

    Returns:
        Tracked snapshots, in listing order

    Raises:
        ZfsParseError: On rows with the wrong number of columns or bad values
    """
    snapshots = []
    for row in rows:
        if len(row) != 4:
            raise ZfsParseError("list snapshots parse error")

        name, created, used, annotation = row
        if annotation == "-":
            continue

        snapshots.append(
            SnapshotRecord(
                name=name,
                created_at=parse_creation(created),
                size_bytes=parse_used(used),
            )
        )
    return snapshots


class ZfsClient:
    """
    Client for the zfs command-line tool.

    Implements SnapshotLister, PropertyStore, SnapshotCreator and
    SnapshotDestroyer.
    """

    def __init__(
        self,
        zfs_binary: str | None = None,
        property_key: str | None = None,
        snapshot_suffix: str | None = None,
    ):
        """
        Initialize the client.

        Args:
            zfs_binary: zfs executable (defaults to configured value)
            property_key: Retention annotation key (defaults to configured value)
            snapshot_suffix: Suffix for auto-generated snapshot names
        """
        config = get_config()
        self.zfs_binary = zfs_binary or config.zfs_binary
        self.property_key = property_key or config.property_key
        self.snapshot_suffix = snapshot_suffix or config.snapshot_suffix

    def list_snapshots(self) -> list[SnapshotRecord]:
        """List all snapshots under our control."""
        rows = self._call_read(
            "list",
            "-t",
            "snapshot",
            "-o",
            f"name,creation,used,{self.property_key}",
        )
        snapshots = parse_snapshots(rows)
        logger.debug(f"Listed {len(snapshots)} tracked snapshots ({len(rows)} total)")
        return snapshots

    def get_property(self, name: str, property_key: str) -> str:
        """Get a single named property on a dataset or snapshot."""
        rows = self._call_read("get", "-o", "value", property_key, name)
        if not rows or not rows[0]:
            raise ZfsParseError(f"No value for property {property_key} on {name}")
        return rows[0][0]

    def list_datasets_for_snapshot(self) -> list[str]:
        """Return filesystems and volumes whose retention annotation is set."""
        rows = self._call_read(
            "get",
            "-t",
            "filesystem,volume",
            "-o",
            "name,value",
            self.property_key,
        )
        datasets = []
        for row in rows:
            if len(row) != 2:
                raise ZfsParseError("list datasets parse error")
            name, value = row
            if value != "-":
                datasets.append(name)
        return datasets

    def create_snapshot(self, dataset: str) -> SnapshotRecord:
        """
        Take a snapshot of the given dataset, with an auto-generated name.

        Args:
            dataset: Filesystem or volume to snapshot

        Returns:
            Record for the new snapshot
        """
        now = datetime.now(timezone.utc).replace(microsecond=0)
        name = (
            f"{dataset}{SNAPSHOT_SEPARATOR}"
            f"{now.strftime('%Y-%m-%dT%H:%M:%SZ')}-{self.snapshot_suffix}"
        )
        self._call_do("snapshot", name)
        logger.info(f"Created snapshot {name}")

        return SnapshotRecord(
            name=name,
            created_at=now,
            size_bytes=parse_used(self.get_property(name, "used")),
        )

    def destroy_snapshot(self, name: str) -> None:
        """
        Destroy the named snapshot.

        zfs has a single verb for destroying anything, so a name without
        '@' would take out a whole dataset. Such names are refused.

        Raises:
            NotASnapshotError: If `name` does not look like a snapshot
            ZfsCommandError: If zfs fails to destroy it
        """
        if SNAPSHOT_SEPARATOR not in name:
            raise NotASnapshotError(name)
        self._call_do("destroy", name)
        logger.info(f"Destroyed snapshot {name}")

    def _run(self, command: list[str]) -> subprocess.CompletedProcess:
        """Run a zfs command in the C locale, raising on non-zero exit."""
        logger.debug(f"Running: {' '.join(command)}")
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            env={**os.environ, "LC_ALL": "C"},
        )
        if result.returncode != 0:
            raise ZfsCommandError(command, result.returncode, result.stderr or "")
        return result

    def _call_read(self, action: str, *args: str) -> list[list[str]]:
        """Run a read-only zfs command and return its output as a table."""
        result = self._run([self.zfs_binary, action, "-H", *args])
        return [line.split("\t") for line in result.stdout.splitlines() if line]

    def _call_do(self, action: str, *args: str) -> None:
        """Perform a side effect, like snapshot or destroy."""
        self._run([self.zfs_binary, action, *args])
