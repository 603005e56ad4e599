"""Data models for cachesweep."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MeasureStatus(str, Enum):
    """Outcome of measuring a single path during a scan."""

    MEASURED = "measured"  # Size computed by one of the strategies
    MISSING = "missing"  # Path does not exist, reported as 0
    UNREADABLE = "unreadable"  # Every strategy failed, reported as 0


class CacheTarget(BaseModel):
    """One catalog entry: a directory eligible for cleaning."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., frozen=True, description="Short identifier used to select the target")
    path: str = Field(..., frozen=True, description="Absolute path of the cache directory")
    name: str = Field(..., frozen=True, description="Human-readable name")
    description: str = Field("", frozen=True, description="What the directory holds")
    is_critical: bool = Field(
        False,
        frozen=True,
        description="Informational hint that the contents matter to the system",
    )
    size: int = Field(0, ge=0, description="Last measured size in bytes")


class PathMeasurement(BaseModel):
    """Measured size of one path."""

    path: str = Field(..., description="Path that was measured")
    size_bytes: int = Field(0, ge=0, description="Total size in bytes")
    status: MeasureStatus = Field(MeasureStatus.MEASURED, description="How the size was obtained")
    error: Optional[str] = Field(None, description="Diagnostic when the path was unreadable")


class ScanResult(BaseModel):
    """Result of scanning a batch of paths.

    Reads like a mapping from path to byte count. Paths that could not be
    measured map to 0; ``status_of`` tells them apart from empty directories.
    """

    measurements: dict[str, PathMeasurement] = Field(default_factory=dict)

    def __getitem__(self, path: str) -> int:
        return self.measurements[path].size_bytes

    def __contains__(self, path: object) -> bool:
        return path in self.measurements

    def __len__(self) -> int:
        return len(self.measurements)

    def get(self, path: str, default: int = 0) -> int:
        measurement = self.measurements.get(path)
        return measurement.size_bytes if measurement else default

    def status_of(self, path: str) -> MeasureStatus:
        return self.measurements[path].status

    @property
    def sizes(self) -> dict[str, int]:
        """Plain path -> bytes mapping."""
        return {path: m.size_bytes for path, m in self.measurements.items()}

    @property
    def total_bytes(self) -> int:
        return sum(m.size_bytes for m in self.measurements.values())

    @property
    def unreadable(self) -> list[str]:
        return [p for p, m in self.measurements.items() if m.status == MeasureStatus.UNREADABLE]

    @property
    def missing(self) -> list[str]:
        return [p for p, m in self.measurements.items() if m.status == MeasureStatus.MISSING]


class CleanOutcome(BaseModel):
    """Result of cleaning a batch of paths."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    total_freed: int = Field(0, ge=0, description="Sum of pre-deletion sizes of cleaned paths")
    freed: dict[str, int] = Field(
        default_factory=dict, description="Pre-deletion size of each cleaned path"
    )
    errors: dict[str, Exception] = Field(
        default_factory=dict, description="Failure for each path that could not be cleaned"
    )

    @property
    def succeeded(self) -> list[str]:
        return list(self.freed)

    @property
    def failed(self) -> list[str]:
        return list(self.errors)

    @property
    def success(self) -> bool:
        """True when no path failed."""
        return not self.errors
