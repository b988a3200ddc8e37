"""Response models served to the co-located map viewer."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

from airtrack.models.aircraft import AircraftRecord, HeadingSegment, MarkerLabel, Snapshot
from airtrack.models.sectors import SectorShape


class AircraftView(BaseModel):
    """An aircraft record together with its structured marker label."""

    id: str
    lat: float
    lon: float
    track: Optional[float] = None
    ground_speed: Optional[float] = None
    altitude: Any = None
    squawk: Any = None
    flight: Any = None
    aircraft_type: Any = None
    registration: Any = None
    label: MarkerLabel

    @classmethod
    def from_record(cls, record: AircraftRecord) -> "AircraftView":
        return cls(**record.model_dump(), label=record.label())


class SnapshotResponse(BaseModel):
    """The current tracking snapshot."""

    sequence: int = Field(..., description="Snapshot counter, 0 before the first refresh")
    fetched_at: Optional[datetime] = Field(
        default=None, description="UTC time the upstream data was fetched"
    )
    aircraft: list[AircraftView] = Field(default_factory=list)
    segments: list[HeadingSegment] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot) -> "SnapshotResponse":
        return cls(
            sequence=snapshot.sequence,
            fetched_at=snapshot.fetched_at,
            aircraft=[AircraftView.from_record(record) for record in snapshot.records],
            segments=list(snapshot.segments),
        )


class SectorsResponse(BaseModel):
    """Static sector catalog."""

    sectors: list[SectorShape] = Field(default_factory=list)


class RefreshResponse(BaseModel):
    """Outcome of a manual refresh."""

    outcome: Literal["applied", "failed", "skipped"] = Field(
        ..., description="Whether the refresh replaced the snapshot"
    )
    sequence: int = Field(..., description="Sequence of the snapshot now being served")
    error: Optional[str] = Field(default=None, description="Failure reason, if any")


class PollerStatusModel(BaseModel):
    """Poller diagnostics exposed on the health endpoint."""

    state: str
    running: bool
    interval_seconds: float
    consecutive_failures: int
    last_success_at: Optional[datetime] = None
    last_error: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    env: str
    sequence: int
    poller: Optional[PollerStatusModel] = None


__all__ = [
    "AircraftView",
    "HealthResponse",
    "PollerStatusModel",
    "RefreshResponse",
    "SectorsResponse",
    "SnapshotResponse",
]
