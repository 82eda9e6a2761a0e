"""
Fleet-wide retention decisions and the jobs that act on them.

`aggregate_retention` groups every tracked snapshot by dataset, resolves
each dataset's policy and merges the per-dataset decisions. The jobs use
that decision to destroy expired snapshots (gc) or take new ones (snap).
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from loguru import logger

from autosnap.retention.policy import AgeCheckResult, RetentionPolicy, check_age
from autosnap.utils.config import get_config
from autosnap.zfs.errors import ZfsCommandError
from autosnap.zfs.models import SnapshotRecord
from autosnap.zfs.protocols import (
    DatasetSnapshotter,
    PropertyStore,
    SnapshotInventory,
    SnapshotStore,
)


def group_by_dataset(snapshots: list[SnapshotRecord]) -> dict[str, list[SnapshotRecord]]:
    """Group snapshots by owning dataset, preserving first-seen order."""
    groups: dict[str, list[SnapshotRecord]] = {}
    for snapshot in snapshots:
        groups.setdefault(snapshot.dataset, []).append(snapshot)
    return groups


def aggregate_retention(
    snapshots: list[SnapshotRecord],
    properties: PropertyStore,
    property_key: str | None = None,
) -> AgeCheckResult:
    """
    Check every dataset's snapshots against that dataset's policy.

    The policy string is looked up once per dataset. Any lookup failure
    propagates and aborts the whole run: callers feed the result into a
    destructive cleanup, which must never act on a partial decision.

    Args:
        snapshots: Tracked snapshots across all datasets
        properties: Property lookup for per-dataset policy strings
        property_key: Retention annotation key (defaults to configured value)

    Returns:
        Merged AgeCheckResult. Order across datasets is unspecified.
    """
    property_key = property_key or get_config().property_key
    aggregate = AgeCheckResult()

    for dataset, group in group_by_dataset(snapshots).items():
        spec = properties.get_property(dataset, property_key)
        policy = RetentionPolicy.parse(spec)
        logger.debug(f"{dataset}: policy {spec!r} -> {policy!r}")

        if policy.is_empty:
            logger.warning(
                f"{dataset}: policy {spec!r} retains nothing, "
                f"all {len(group)} snapshots will be marked for deletion"
            )

        check = check_age(group, policy)
        logger.info(f"{dataset}: keep={len(check.keep)}, delete={len(check.delete)}")
        aggregate.extend(check)

    return aggregate


def gc_find(zfs: SnapshotInventory, property_key: str | None = None) -> AgeCheckResult:
    """
    List all tracked snapshots and decide which to keep.

    The result can be presented to the user (status) or handed to the
    garbage collector (gc).
    """
    return aggregate_retention(zfs.list_snapshots(), zfs, property_key)


@dataclass
class CleanupResult:
    """
    Result of a garbage collection run.

    Attributes:
        dry_run: Whether this was a dry run
        kept: Snapshots retained by policy
        destroyed: Snapshots destroyed (or that would be, on a dry run)
        bytes_freed: Space used by the destroyed snapshots
        duration_seconds: Time taken for cleanup
        errors: One message per snapshot that could not be destroyed
    """

    dry_run: bool
    kept: list[SnapshotRecord] = field(default_factory=list)
    destroyed: list[SnapshotRecord] = field(default_factory=list)
    bytes_freed: int = 0
    duration_seconds: float = 0.0
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Check if cleanup was successful."""
        return len(self.errors) == 0


class SnapshotCleanupJob:
    """
    Garbage collector for expired snapshots.

    Finds every snapshot its dataset's policy no longer retains and
    destroys it without asking twice. Use dry_run (or the status command)
    to only look.
    """

    def __init__(
        self,
        zfs: SnapshotStore,
        dry_run: bool = False,
        property_key: str | None = None,
    ):
        """
        Initialize the cleanup job.

        Args:
            zfs: Storage to list, inspect and destroy snapshots on
            dry_run: If True, only report what would be destroyed
            property_key: Retention annotation key (defaults to configured value)
        """
        self._zfs = zfs
        self._dry_run = dry_run
        self._property_key = property_key

    def run(self, check: AgeCheckResult | None = None) -> CleanupResult:
        """
        Run garbage collection across all tracked datasets.

        A snapshot zfs refuses to destroy (e.g. one with a hold) is recorded
        in the result and the run continues. A name that is not a snapshot
        raises NotASnapshotError immediately.

        Args:
            check: Decision to act on; computed fresh from zfs when omitted

        Returns:
            CleanupResult with operation details
        """
        start_time = time.time()
        if check is None:
            check = gc_find(self._zfs, self._property_key)
        result = CleanupResult(dry_run=self._dry_run, kept=list(check.keep))

        logger.info(
            f"Running cleanup job (dry_run={self._dry_run}): "
            f"{len(check.delete)} snapshots to delete"
        )

        for snapshot in check.delete:
            if self._dry_run:
                logger.info(f"Dry run: would destroy {snapshot.name}")
            else:
                try:
                    self._zfs.destroy_snapshot(snapshot.name)
                except ZfsCommandError as e:
                    logger.error(f"Error destroying {snapshot.name}: {e}")
                    result.errors.append(str(e))
                    continue

            result.destroyed.append(snapshot)
            result.bytes_freed += snapshot.size_bytes

        result.duration_seconds = time.time() - start_time
        logger.info(
            f"Cleanup complete: destroyed={len(result.destroyed)}, "
            f"bytes_freed={result.bytes_freed}, errors={len(result.errors)}"
        )
        return result


class SnapshotJob:
    """
    Snapshot every tracked dataset.

    Stops at the first dataset that cannot be snapshotted.
    """

    def __init__(self, zfs: DatasetSnapshotter):
        self._zfs = zfs

    def run(self) -> list[SnapshotRecord]:
        """Take one snapshot per tracked dataset and return the new records."""
        datasets = self._zfs.list_datasets_for_snapshot()
        logger.info(f"Snapshotting {len(datasets)} datasets")
        return [self._zfs.create_snapshot(dataset) for dataset in datasets]
