"""
Typed records for ZFS snapshots.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

SNAPSHOT_SEPARATOR = "@"


@dataclass(frozen=True)
class SnapshotRecord:
    """
    A single ZFS snapshot as reported by `zfs list`.

    Attributes:
        name: Full snapshot name, ``<dataset>@<snapshot>``
        created_at: Creation time (timezone-aware, UTC)
        size_bytes: Space used by the snapshot in bytes
    """

    name: str
    created_at: datetime
    size_bytes: int

    @property
    def dataset(self) -> str:
        """Name of the owning dataset (text before the first '@')."""
        return self.name.split(SNAPSHOT_SEPARATOR, 1)[0]
