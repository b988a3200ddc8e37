"""Models for live aircraft state and the derived heading segments."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """A latitude/longitude pair in decimal degrees."""

    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")

    model_config = ConfigDict(frozen=True)


class MarkerLabel(BaseModel):
    """Structured label data for an aircraft marker.

    Carries typed values only; turning them into text or markup is left to
    whatever renders the marker.
    """

    flight: Optional[str] = Field(default=None, description="Flight label / callsign")
    altitude: Optional[Union[int, float, str]] = Field(
        default=None, description="Barometric altitude in feet, or a marker such as 'ground'"
    )
    track: Optional[float] = Field(default=None, description="Track in degrees")
    squawk: Optional[str] = Field(default=None, description="Transponder squawk code")

    model_config = ConfigDict(frozen=True)


class AircraftRecord(BaseModel):
    """One aircraft's latest known state within a snapshot."""

    id: str = Field(..., description="Stable upstream identifier (ICAO hex address)")
    lat: float = Field(..., description="Latitude in decimal degrees")
    lon: float = Field(..., description="Longitude in decimal degrees")
    track: Optional[float] = Field(
        default=None, description="Compass track in degrees, 0 = north, clockwise"
    )
    ground_speed: Optional[float] = Field(
        default=None, description="Ground speed in knots"
    )
    altitude: Any = Field(default=None, description="Barometric altitude as reported")
    squawk: Any = Field(default=None, description="Squawk code as reported")
    flight: Any = Field(default=None, description="Flight label as reported")
    aircraft_type: Any = Field(default=None, description="Aircraft type designator")
    registration: Any = Field(default=None, description="Aircraft registration")

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def position(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)

    def label(self) -> MarkerLabel:
        """Return the typed label fields a renderer needs for this aircraft."""

        altitude = self.altitude
        if not isinstance(altitude, (int, float, str)) or isinstance(altitude, bool):
            altitude = None
        flight = str(self.flight).strip() if self.flight is not None else ""
        return MarkerLabel(
            flight=flight or None,
            altitude=altitude,
            track=self.track,
            squawk=str(self.squawk) if self.squawk is not None else None,
        )

    def to_raw(self) -> dict[str, Any]:
        """Re-wrap the record in the raw upstream entry shape."""

        raw = {
            "id": self.id,
            "lat": self.lat,
            "lon": self.lon,
            "track": self.track,
            "groundSpeed": self.ground_speed,
            "altitude": self.altitude,
            "squawk": self.squawk,
            "flight": self.flight,
            "aircraftType": self.aircraft_type,
            "registration": self.registration,
        }
        return {key: value for key, value in raw.items() if value is not None}


class HeadingSegment(BaseModel):
    """Line from an aircraft's position to its projected position."""

    id: str = Field(..., description="Identifier of the owning aircraft record")
    start: GeoPoint = Field(..., description="Current position")
    end: GeoPoint = Field(..., description="Projected position after the horizon")

    model_config = ConfigDict(frozen=True)


class Snapshot(BaseModel):
    """Point-in-time set of aircraft records and their heading segments.

    A snapshot always replaces its predecessor wholesale; records from an
    earlier snapshot are never carried forward.
    """

    records: tuple[AircraftRecord, ...] = Field(default=())
    segments: tuple[HeadingSegment, ...] = Field(default=())
    sequence: int = Field(
        default=0, description="Increasing counter of applied snapshots, 0 before the first"
    )
    fetched_at: Optional[datetime] = Field(
        default=None, description="UTC time the upstream data was fetched"
    )

    model_config = ConfigDict(frozen=True)

    @classmethod
    def empty(cls) -> "Snapshot":
        return cls()

    def segment_for(self, aircraft_id: str) -> Optional[HeadingSegment]:
        for segment in self.segments:
            if segment.id == aircraft_id:
                return segment
        return None


__all__ = ["AircraftRecord", "GeoPoint", "HeadingSegment", "MarkerLabel", "Snapshot"]
