"""
Snapshot retention for zfs-autosnap.

Parses compact generational policies and decides which snapshots to keep.

Usage:
    from autosnap.retention import RetentionPolicy, check_age

    policy = RetentionPolicy.parse("h24d30w8m6y1")
    check = check_age(snapshots, policy)
    for snapshot in check.delete:
        ...
"""

from autosnap.retention.policy import AgeCheckResult, RetentionPolicy, RetentionRule, check_age
from autosnap.retention.cleanup import (
    CleanupResult,
    SnapshotCleanupJob,
    SnapshotJob,
    aggregate_retention,
    gc_find,
)

__all__ = [
    "AgeCheckResult",
    "RetentionPolicy",
    "RetentionRule",
    "check_age",
    "aggregate_retention",
    "gc_find",
    "CleanupResult",
    "SnapshotCleanupJob",
    "SnapshotJob",
]
