"""
Generational retention policy engine.

A policy keeps, for each configured granularity (hour, day, week, month,
year), the newest snapshot of each of the N most recent period buckets.
Policies are written as compact strings such as ``h24d30w8m6y1``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from autosnap.zfs.models import SnapshotRecord

_RULE_RE = re.compile(r"([hdwmy])([0-9]+)")

_MARKERS = {
    "h": "hourly",
    "d": "daily",
    "w": "weekly",
    "m": "monthly",
    "y": "yearly",
}


@dataclass(frozen=True)
class RetentionRule:
    """
    One granularity of a retention policy.

    Attributes:
        name: Rule name ('hourly', 'daily', ...)
        pattern: strftime pattern mapping a timestamp to its period bucket
        count: Number of buckets to keep (None, 0 or negative keeps nothing)
    """

    name: str
    pattern: str
    count: int | None

    @property
    def enabled(self) -> bool:
        """True if this rule retains anything."""
        return self.count is not None and self.count > 0

    def period(self, snapshot: SnapshotRecord) -> str:
        """Return the period bucket label for a snapshot."""
        return snapshot.created_at.strftime(self.pattern)


@dataclass(frozen=True)
class RetentionPolicy:
    """
    Number of snapshots to keep for each period.

    Unset (None) and zero are equivalent: that granularity keeps nothing.
    """

    yearly: int | None = None
    monthly: int | None = None
    weekly: int | None = None
    daily: int | None = None
    hourly: int | None = None

    @classmethod
    def parse(cls, spec: str) -> RetentionPolicy:
        """
        Parse a policy string such as ``h24d30w8m6y1``.

        Each of the markers y, m, w, d, h followed by ASCII digits sets that
        rule's count. Anything else is ignored, including a marker without
        digits. When a marker repeats, the last occurrence wins. Never raises;
        an unparseable string yields a policy that retains nothing.

        Args:
            spec: Policy string, possibly empty or malformed

        Returns:
            RetentionPolicy with unseen rules left unset
        """
        counts = {}
        for marker, digits in _RULE_RE.findall(spec or ""):
            try:
                counts[_MARKERS[marker]] = int(digits)
            except ValueError:
                # exceeds the interpreter's integer string conversion limit
                continue
        return cls(**counts)

    def rules(self) -> list[RetentionRule]:
        """
        Return the rules in evaluation order: hourly, daily, weekly, monthly, yearly.

        The patterns are deliberately lossy so that snapshots sharing a
        bucket are interchangeable for that rule. Note the weekly bucket is
        year plus weekday number (Sunday=0), not a calendar week.
        """
        return [
            RetentionRule("hourly", "%Y-%m-%d %H", self.hourly),
            RetentionRule("daily", "%Y-%m-%d", self.daily),
            RetentionRule("weekly", "%Y w%w", self.weekly),
            RetentionRule("monthly", "%Y-%m", self.monthly),
            RetentionRule("yearly", "%Y", self.yearly),
        ]

    @property
    def is_empty(self) -> bool:
        """True if no rule retains anything."""
        return not any(rule.enabled for rule in self.rules())

    def __str__(self) -> str:
        markers = {name: marker for marker, name in _MARKERS.items()}
        return "".join(
            f"{markers[rule.name]}{rule.count}"
            for rule in self.rules()
            if rule.count is not None
        )


@dataclass
class AgeCheckResult:
    """
    Partition of a snapshot set into snapshots to keep and to delete.

    Every input snapshot lands in exactly one of the two lists.
    """

    keep: list[SnapshotRecord] = field(default_factory=list)
    delete: list[SnapshotRecord] = field(default_factory=list)

    @property
    def keep_bytes(self) -> int:
        """Total size of the kept snapshots."""
        return sum(s.size_bytes for s in self.keep)

    @property
    def delete_bytes(self) -> int:
        """Total size of the snapshots marked for deletion."""
        return sum(s.size_bytes for s in self.delete)

    def extend(self, other: AgeCheckResult) -> None:
        """Append another result's keep/delete lists to this one."""
        self.keep.extend(other.keep)
        self.delete.extend(other.delete)


def check_age(snapshots: list[SnapshotRecord], policy: RetentionPolicy) -> AgeCheckResult:
    """
    Classify one dataset's snapshots against a retention policy.

    Snapshots are ordered newest first (stable for equal timestamps). Each
    enabled rule then walks that order and keeps the first snapshot seen in
    each new period bucket, until it has kept `count` of them. A snapshot
    kept by any rule is kept once; everything else is deleted.

    Args:
        snapshots: Snapshots of a single dataset
        policy: That dataset's retention policy

    Returns:
        AgeCheckResult with both lists in newest-first order
    """
    # Indices into `snapshots`, so records equal in every field are still
    # tracked separately.
    order = sorted(
        range(len(snapshots)),
        key=lambda i: snapshots[i].created_at,
        reverse=True,
    )
    kept: set[int] = set()

    for rule in policy.rules():
        if not rule.enabled:
            continue

        last_period = None
        accepted = 0
        for i in order:
            period = rule.period(snapshots[i])
            if period != last_period:
                last_period = period
                kept.add(i)
                accepted += 1
                if accepted == rule.count:
                    break

    return AgeCheckResult(
        keep=[snapshots[i] for i in order if i in kept],
        delete=[snapshots[i] for i in order if i not in kept],
    )
