"""
ZFS storage boundary.

Typed snapshot records, the protocols the retention core depends on, and
the `zfs` command-line client implementing them.
"""

from autosnap.zfs.client import ZfsClient, parse_snapshots, parse_used
from autosnap.zfs.errors import NotASnapshotError, ZfsCommandError, ZfsError, ZfsParseError
from autosnap.zfs.models import SnapshotRecord

__all__ = [
    "SnapshotRecord",
    "ZfsClient",
    "ZfsError",
    "ZfsCommandError",
    "ZfsParseError",
    "NotASnapshotError",
    "parse_snapshots",
    "parse_used",
]
