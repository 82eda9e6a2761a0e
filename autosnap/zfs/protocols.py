"""Storage protocols consumed by the retention core.

The retention engine and the jobs never call the zfs tool directly; they
depend on these narrow boundaries instead. `ZfsClient` implements all of
them, tests pass in-memory fakes.
"""

from __future__ import annotations

from typing import Protocol

from autosnap.zfs.models import SnapshotRecord


class SnapshotLister(Protocol):
    """Source of every tracked snapshot on the system."""

    def list_snapshots(self) -> list[SnapshotRecord]:
        """Return all snapshots whose retention annotation is not '-'."""


class PropertyStore(Protocol):
    """Per-dataset property lookup."""

    def get_property(self, name: str, property_key: str) -> str:
        """Return the raw value of `property_key` on dataset or snapshot `name`."""


class SnapshotCreator(Protocol):
    """Creates new tracked snapshots."""

    def create_snapshot(self, dataset: str) -> SnapshotRecord:
        """Snapshot `dataset` under an auto-generated name."""


class SnapshotDestroyer(Protocol):
    """Destroys snapshots by name."""

    def destroy_snapshot(self, name: str) -> None:
        """Destroy snapshot `name`; must refuse names without '@'."""


class SnapshotInventory(SnapshotLister, PropertyStore, Protocol):
    """Everything needed to compute a retention decision."""


class SnapshotStore(SnapshotInventory, SnapshotDestroyer, Protocol):
    """Everything needed for a garbage collection pass."""


class DatasetSnapshotter(SnapshotCreator, Protocol):
    """Enumerates tracked datasets and snapshots them."""

    def list_datasets_for_snapshot(self) -> list[str]:
        """Return datasets whose retention annotation is not '-'."""
