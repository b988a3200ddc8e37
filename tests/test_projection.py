import math

import pytest

from airtrack.models.aircraft import AircraftRecord, GeoPoint
from airtrack.pipeline.projection import (
    ProjectionEngine,
    angular_distance,
    destination_point,
    project,
)


def _central_angle(a: GeoPoint, b: GeoPoint) -> float:
    phi1, phi2 = math.radians(a.lat), math.radians(b.lat)
    dphi = phi2 - phi1
    dlambda = math.radians(b.lon - a.lon)
    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return 2 * math.asin(math.sqrt(h))


def test_angular_distance_uses_one_arc_minute_per_nm():
    # 120 kn for one minute is 2 nm, i.e. 2 arc-minutes
    assert angular_distance(120.0, 1.0) == pytest.approx(math.radians(2.0 / 60.0))
    assert angular_distance(120.0, 1.0, arc_minutes_per_nm=0.5) == pytest.approx(
        math.radians(1.0 / 60.0)
    )


@pytest.mark.parametrize("lat", [-60.0, -10.0, 0.0, 41.0, 75.0])
@pytest.mark.parametrize("speed", [1.0, 120.0, 480.0])
def test_northward_track_increases_latitude_only(lat, speed):
    start = GeoPoint(lat=lat, lon=-8.0)

    segment = project(start, 0, speed, 1.0)

    assert segment is not None
    assert segment.end.lat > lat
    assert segment.end.lon == pytest.approx(-8.0, abs=1e-12)
    assert segment.end.lat - lat == pytest.approx(speed / 3600.0, rel=1e-9)


@pytest.mark.parametrize("track", [0.0, 45.0, 90.0, 359.0])
def test_zero_speed_gives_degenerate_segment(track):
    start = GeoPoint(lat=41.0, lon=-8.0)

    segment = project(start, track, 0.0, 1.0)

    assert segment is not None
    assert segment.start == start
    assert segment.end == segment.start


@pytest.mark.parametrize(
    "track, speed",
    [
        (None, 120.0),
        (90.0, None),
        (None, None),
        (float("nan"), 120.0),
        (90.0, float("inf")),
        ("east", 120.0),
    ],
)
def test_missing_or_non_finite_inputs_return_none(track, speed):
    assert project(GeoPoint(lat=41.0, lon=-8.0), track, speed, 1.0) is None


def test_eastward_track_moves_longitude_not_latitude():
    start = GeoPoint(lat=41.0, lon=-8.0)

    segment = project(start, 90, 120, 1.0, aircraft_id="a1")

    assert segment.id == "a1"
    assert segment.start == start
    assert segment.end.lon > start.lon
    assert segment.end.lat == pytest.approx(41.0, abs=1e-4)
    assert _central_angle(segment.start, segment.end) == pytest.approx(
        angular_distance(120, 1.0), rel=1e-6
    )


def test_track_is_taken_modulo_360():
    start = GeoPoint(lat=41.0, lon=-8.0)

    base = project(start, 90, 300, 1.0)
    wrapped = project(start, 450, 300, 1.0)
    negative = project(start, -270, 300, 1.0)

    assert wrapped.end.lat == pytest.approx(base.end.lat)
    assert wrapped.end.lon == pytest.approx(base.end.lon)
    assert negative.end.lat == pytest.approx(base.end.lat)
    assert negative.end.lon == pytest.approx(base.end.lon)


def test_projection_wraps_across_antimeridian():
    end = destination_point(0.0, 179.99, 90.0, angular_distance(600, 1.0))

    assert -180.0 <= end.lon < -179.0


def test_engine_projects_only_records_with_heading_data():
    engine = ProjectionEngine(horizon_minutes=2.0)
    records = [
        AircraftRecord(id="a", lat=41.0, lon=-8.0, track=0.0, ground_speed=60.0),
        AircraftRecord(id="b", lat=41.0, lon=-8.0, track=90.0),
        AircraftRecord(id="c", lat=41.0, lon=-8.0, ground_speed=200.0),
        AircraftRecord(id="d", lat=41.0, lon=-8.0, track=0.0, ground_speed=0.0),
    ]

    segments = engine.project_all(records)

    assert [segment.id for segment in segments] == ["a", "d"]
    # 60 kn for two minutes is 2 nm
    assert segments[0].end.lat - 41.0 == pytest.approx(2.0 / 60.0)
    assert segments[1].end == segments[1].start


def test_engine_rejects_invalid_constants():
    with pytest.raises(ValueError):
        ProjectionEngine(horizon_minutes=-1.0)
    with pytest.raises(ValueError):
        ProjectionEngine(arc_minutes_per_nm=0.0)
