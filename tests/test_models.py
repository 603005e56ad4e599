"""Tests for data models."""

import pytest
from pydantic import ValidationError

from cachesweep.errors import CommandFailed, PathNotFound
from cachesweep.models import (
    CacheTarget,
    CleanOutcome,
    MeasureStatus,
    PathMeasurement,
    ScanResult,
)


def make_result(**entries) -> ScanResult:
    return ScanResult(
        measurements={
            path: PathMeasurement(path=path, size_bytes=size, status=status)
            for path, (size, status) in entries.items()
        }
    )


class TestCacheTarget:
    def test_size_defaults_to_zero(self):
        target = CacheTarget(id="t", path="/tmp/t", name="T")
        assert target.size == 0
        assert not target.is_critical

    def test_size_is_mutable(self):
        target = CacheTarget(id="t", path="/tmp/t", name="T")
        target.size = 2048
        assert target.size == 2048

    def test_path_is_frozen(self):
        target = CacheTarget(id="t", path="/tmp/t", name="T")
        with pytest.raises(ValidationError):
            target.path = "/elsewhere"

    def test_negative_size_rejected(self):
        with pytest.raises(ValidationError):
            CacheTarget(id="t", path="/tmp/t", name="T", size=-1)

    def test_negative_size_rejected_on_assignment(self):
        target = CacheTarget(id="t", path="/tmp/t", name="T", size=10)
        with pytest.raises(ValidationError):
            target.size = -5
        assert target.size == 10


class TestScanResult:
    def test_mapping_access(self):
        result = make_result(a=(10, MeasureStatus.MEASURED), b=(0, MeasureStatus.MISSING))
        assert result["a"] == 10
        assert "b" in result
        assert "c" not in result
        assert len(result) == 2
        assert result.get("c") == 0

    def test_sizes_and_total(self):
        result = make_result(a=(10, MeasureStatus.MEASURED), b=(5, MeasureStatus.MEASURED))
        assert result.sizes == {"a": 10, "b": 5}
        assert result.total_bytes == 15

    def test_distinguishes_failures_from_empty(self):
        result = make_result(
            empty=(0, MeasureStatus.MEASURED),
            gone=(0, MeasureStatus.MISSING),
            locked=(0, MeasureStatus.UNREADABLE),
        )
        assert result.unreadable == ["locked"]
        assert result.missing == ["gone"]
        assert result.status_of("empty") == MeasureStatus.MEASURED

    def test_measurement_rejects_negative(self):
        with pytest.raises(ValidationError):
            PathMeasurement(path="/x", size_bytes=-1)


class TestCleanOutcome:
    def test_success(self):
        outcome = CleanOutcome(total_freed=10, freed={"/a": 10})
        assert outcome.success
        assert outcome.succeeded == ["/a"]
        assert outcome.failed == []

    def test_holds_exceptions(self):
        outcome = CleanOutcome(
            total_freed=0,
            errors={"/a": PathNotFound("/a"), "/b": CommandFailed("denied")},
        )
        assert not outcome.success
        assert outcome.failed == ["/a", "/b"]
        assert isinstance(outcome.errors["/a"], PathNotFound)
