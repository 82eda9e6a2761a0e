"""
Plain-text reports for the status and gc commands.

Lines are tab-separated so the output stays easy to grep and cut:

    keep: 1.50 GiB
    keep: tank/home@2021-10-02T09:59:00Z-autosnap\t2021-10-02T09:59:00Z\t1.50 GiB
    delete: 512 B
    delete: tank/home@2021-10-01T08:00:00Z-autosnap\t2021-10-01T08:00:00Z\t512 B
"""

from __future__ import annotations

from datetime import timezone

from autosnap.retention.policy import AgeCheckResult
from autosnap.zfs.models import SnapshotRecord

_BINARY_UNITS = ("KiB", "MiB", "GiB", "TiB", "PiB", "EiB", "ZiB")


def format_size(size_bytes: int) -> str:
    """Format a byte count in the largest binary unit that keeps it >= 1."""
    if size_bytes < 1024:
        return f"{size_bytes} B"

    value = float(size_bytes)
    unit = "B"
    for unit in _BINARY_UNITS:
        value /= 1024
        if value < 1024:
            break
    return f"{value:.2f} {unit}"


def format_timestamp(snapshot: SnapshotRecord) -> str:
    """RFC 3339 creation time with seconds precision and a Z suffix."""
    created = snapshot.created_at.astimezone(timezone.utc)
    return created.strftime("%Y-%m-%dT%H:%M:%SZ")


def format_snapshot(label: str, snapshot: SnapshotRecord) -> str:
    """One report line for a single snapshot."""
    return (
        f"{label}: {snapshot.name}\t{format_timestamp(snapshot)}"
        f"\t{format_size(snapshot.size_bytes)}"
    )


def _format_section(label: str, snapshots: list[SnapshotRecord], total: int) -> list[str]:
    if not snapshots:
        return []
    return [f"{label}: {format_size(total)}"] + [
        format_snapshot(label, s) for s in snapshots
    ]


def format_status(check: AgeCheckResult) -> str:
    """
    Render the full keep/delete summary.

    Each section starts with its total size and is omitted when empty.

    Args:
        check: Retention decision to present

    Returns:
        Report text, empty if there are no tracked snapshots
    """
    lines = _format_section("keep", check.keep, check.keep_bytes) + _format_section(
        "delete", check.delete, check.delete_bytes
    )
    return "\n".join(lines)


def format_gc(check: AgeCheckResult) -> str:
    """Render only the delete section, as printed before a gc pass."""
    return "\n".join(_format_section("delete", check.delete, check.delete_bytes))
