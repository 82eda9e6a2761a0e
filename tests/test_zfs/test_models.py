"""Tests for SnapshotRecord."""

from datetime import datetime, timezone

import pytest

from autosnap.zfs.models import SnapshotRecord

CREATED = datetime(2021, 10, 2, 9, 59, tzinfo=timezone.utc)


class TestSnapshotRecord:
    """Tests for SnapshotRecord."""

    def test_dataset_before_first_separator(self):
        """The dataset is the name up to the first '@'."""
        assert SnapshotRecord("tank/home@daily@1", CREATED, 0).dataset == "tank/home"

    def test_name_without_separator(self):
        """A bare dataset name is its own dataset."""
        assert SnapshotRecord("tank/home", CREATED, 0).dataset == "tank/home"

    def test_frozen(self):
        """Records cannot be modified."""
        record = SnapshotRecord("tank@a", CREATED, 0)

        with pytest.raises(AttributeError):
            record.size_bytes = 1

    def test_equal_by_value(self):
        """Records with the same fields compare and hash equal."""
        a = SnapshotRecord("tank@a", CREATED, 2048)
        b = SnapshotRecord("tank@a", CREATED, 2048)

        assert a == b
        assert len({a, b}) == 1
