"""Great-circle projection of aircraft position along the current track."""

from __future__ import annotations

import math
from typing import Any, Iterable, Optional

from airtrack.models.aircraft import AircraftRecord, GeoPoint, HeadingSegment

DEFAULT_HORIZON_MINUTES = 1.0
# 1 nautical mile is (approximately) one minute of great-circle arc.
DEFAULT_ARC_MINUTES_PER_NM = 1.0


def _finite(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def angular_distance(
    ground_speed_kn: float,
    horizon_minutes: float,
    arc_minutes_per_nm: float = DEFAULT_ARC_MINUTES_PER_NM,
) -> float:
    """Radians of arc covered at ``ground_speed_kn`` over ``horizon_minutes``."""

    distance_nm = ground_speed_kn * horizon_minutes / 60.0
    return math.radians(distance_nm * arc_minutes_per_nm / 60.0)


def destination_point(lat: float, lon: float, bearing: float, delta: float) -> GeoPoint:
    """Point reached from (lat, lon) along ``bearing`` degrees after ``delta`` radians."""

    phi1 = math.radians(lat)
    lambda1 = math.radians(lon)
    theta = math.radians(bearing % 360.0)

    phi2 = math.asin(
        math.sin(phi1) * math.cos(delta)
        + math.cos(phi1) * math.sin(delta) * math.cos(theta)
    )
    lambda2 = lambda1 + math.atan2(
        math.sin(theta) * math.sin(delta) * math.cos(phi1),
        math.cos(delta) - math.sin(phi1) * math.sin(phi2),
    )

    end_lon = math.degrees(lambda2)
    if end_lon > 180.0:
        end_lon -= 360.0
    elif end_lon < -180.0:
        end_lon += 360.0
    return GeoPoint(lat=math.degrees(phi2), lon=end_lon)


def project(
    position: GeoPoint,
    track: Any,
    ground_speed: Any,
    horizon_minutes: float = DEFAULT_HORIZON_MINUTES,
    *,
    aircraft_id: str = "",
    arc_minutes_per_nm: float = DEFAULT_ARC_MINUTES_PER_NM,
) -> Optional[HeadingSegment]:
    """Project ``position`` along ``track`` for ``horizon_minutes`` at ``ground_speed``.

    Returns None when track or ground speed is missing or not a finite number.
    A zero ground speed yields a zero-length segment whose end equals its
    start. Tracks outside [0, 360) are reduced modulo 360.
    """

    bearing = _finite(track)
    speed = _finite(ground_speed)
    if bearing is None or speed is None:
        return None

    delta = angular_distance(speed, horizon_minutes, arc_minutes_per_nm)
    if delta == 0:
        end = position
    else:
        end = destination_point(position.lat, position.lon, bearing, delta)
    return HeadingSegment(id=aircraft_id, start=position, end=end)


class ProjectionEngine:
    """Compute heading segments with a fixed horizon and speed conversion."""

    def __init__(
        self,
        *,
        horizon_minutes: float = DEFAULT_HORIZON_MINUTES,
        arc_minutes_per_nm: float = DEFAULT_ARC_MINUTES_PER_NM,
    ) -> None:
        if horizon_minutes < 0:
            raise ValueError("horizon_minutes must not be negative")
        if arc_minutes_per_nm <= 0:
            raise ValueError("arc_minutes_per_nm must be positive")
        self.horizon_minutes = horizon_minutes
        self.arc_minutes_per_nm = arc_minutes_per_nm

    def project(self, record: AircraftRecord) -> Optional[HeadingSegment]:
        return project(
            record.position,
            record.track,
            record.ground_speed,
            self.horizon_minutes,
            aircraft_id=record.id,
            arc_minutes_per_nm=self.arc_minutes_per_nm,
        )

    def project_all(self, records: Iterable[AircraftRecord]) -> list[HeadingSegment]:
        """Return one segment per record that has both track and ground speed."""

        segments: list[HeadingSegment] = []
        for record in records:
            segment = self.project(record)
            if segment is not None:
                segments.append(segment)
        return segments


__all__ = [
    "DEFAULT_ARC_MINUTES_PER_NM",
    "DEFAULT_HORIZON_MINUTES",
    "ProjectionEngine",
    "angular_distance",
    "destination_point",
    "project",
]
