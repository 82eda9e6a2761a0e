"""Test fixtures and synthetic data generators."""

from tests.fixtures.synthetic import at, generate_snapshots, make_snapshot

from tests.fixtures.fake_zfs import FakeZfs

__all__ = [
    # Synthetic data generators
    "at",
    "make_snapshot",
    "generate_snapshots",
    # Storage fakes
    "FakeZfs",
]
