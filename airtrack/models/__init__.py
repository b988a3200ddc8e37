"""Pydantic models for the AirTrack overlay."""

from .aircraft import AircraftRecord, GeoPoint, HeadingSegment, MarkerLabel, Snapshot
from .sectors import SectorKind, SectorShape, SectorStyle

__all__ = [
    "AircraftRecord",
    "GeoPoint",
    "HeadingSegment",
    "MarkerLabel",
    "SectorKind",
    "SectorShape",
    "SectorStyle",
    "Snapshot",
]
