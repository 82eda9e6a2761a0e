"""Tests for status and gc report formatting."""

import pytest

from autosnap.reporting import format_gc, format_size, format_snapshot, format_status
from autosnap.retention.policy import AgeCheckResult
from tests.fixtures import make_snapshot


class TestFormatSize:
    """Tests for format_size()."""

    @pytest.mark.parametrize(
        "size_bytes,expected",
        [
            (0, "0 B"),
            (512, "512 B"),
            (1023, "1023 B"),
            (1024, "1.00 KiB"),
            (1536, "1.50 KiB"),
            (1024**2, "1.00 MiB"),
            (13 * 1024**3, "13.00 GiB"),
            (int(2.25 * 1024**4), "2.25 TiB"),
        ],
    )
    def test_binary_units(self, size_bytes, expected):
        """Sizes use the largest binary unit with two decimals."""
        assert format_size(size_bytes) == expected


class TestReports:
    """Tests for report rendering."""

    @pytest.fixture
    def check(self) -> AgeCheckResult:
        return AgeCheckResult(
            keep=[make_snapshot("tank/home", "2021-10-02 09:59", 1536)],
            delete=[
                make_snapshot("tank/home", "2021-10-01 08:00", 512),
                make_snapshot("tank/home", "2021-09-30 08:00", 512),
            ],
        )

    def test_format_snapshot(self, check):
        """A snapshot line is label, name, RFC 3339 time and size."""
        line = format_snapshot("keep", check.keep[0])

        assert line == (
            "keep: tank/home@2021-10-02T09:59:00Z-autosnap"
            "\t2021-10-02T09:59:00Z\t1.50 KiB"
        )

    def test_format_status(self, check):
        """Each section starts with its total."""
        lines = format_status(check).splitlines()

        assert lines[0] == "keep: 1.50 KiB"
        assert lines[1].startswith("keep: tank/home@2021-10-02T09:59:00Z")
        assert lines[2] == "delete: 1.00 KiB"
        assert len(lines) == 5

    def test_empty_sections_omitted(self, check):
        """Sections without snapshots are left out."""
        assert format_status(AgeCheckResult()) == ""
        assert not format_status(AgeCheckResult(keep=check.keep)).startswith("delete")
        assert "keep" not in format_status(AgeCheckResult(delete=check.delete))

    def test_format_gc(self, check):
        """The gc report only lists deletions."""
        report = format_gc(check)

        assert report.splitlines()[0] == "delete: 1.00 KiB"
        assert "keep:" not in report
        assert format_gc(AgeCheckResult(keep=check.keep)) == ""
