"""Static registry of airspace sector shapes."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from airtrack.models.aircraft import GeoPoint
from airtrack.models.sectors import SectorKind, SectorShape, SectorStyle
from airtrack.pipeline.projection import destination_point

logger = logging.getLogger("airtrack.sectors")

EARTH_MEAN_RADIUS_M = 6_371_008.8

_SHAPES_ADAPTER = TypeAdapter(list[SectorShape])


def _pt(lat: float, lon: float) -> GeoPoint:
    return GeoPoint(lat=lat, lon=lon)


# Illustrative sectors around the default tracking region; not for navigation.
DEFAULT_SECTORS: tuple[SectorShape, ...] = (
    SectorShape(
        id="porto-ctr",
        name="Porto CTR",
        kind=SectorKind.CIRCLE,
        center=_pt(41.2481, -8.6814),
        radius_m=15_000.0,
        style=SectorStyle(color="#1f78b4", fill_opacity=0.05),
    ),
    SectorShape(
        id="porto-tma",
        name="Porto TMA",
        kind=SectorKind.POLYGON,
        vertices=(
            _pt(41.70, -9.10),
            _pt(41.70, -8.20),
            _pt(40.80, -8.20),
            _pt(40.80, -9.10),
        ),
        style=SectorStyle(color="#33a02c", fill_opacity=0.03, dashed=True),
    ),
    SectorShape(
        id="lpr42b",
        name="Restricted area R42B",
        kind=SectorKind.POLYGON,
        vertices=(
            _pt(41.05, -8.95),
            _pt(41.10, -8.80),
            _pt(40.98, -8.78),
        ),
        style=SectorStyle(color="#e31a1c", fill_color="#e31a1c", fill_opacity=0.15),
    ),
)


class SectorCatalog:
    """Immutable collection of sector shapes, built once at startup."""

    def __init__(self, shapes: Iterable[SectorShape] = DEFAULT_SECTORS) -> None:
        shapes = tuple(shapes)
        by_id: dict[str, SectorShape] = {}
        for shape in shapes:
            if shape.id in by_id:
                raise ValueError(f"Duplicate sector id: {shape.id}")
            by_id[shape.id] = shape
        self._shapes = shapes
        self._by_id = by_id

    def sectors(self) -> tuple[SectorShape, ...]:
        return self._shapes

    def get(self, sector_id: str) -> SectorShape | None:
        return self._by_id.get(sector_id)

    def __len__(self) -> int:
        return len(self._shapes)


def load_catalog(path: str | Path) -> SectorCatalog:
    """Load a catalog from a JSON file holding a list of sector shapes.

    Raises ValueError when the file cannot be read or does not describe valid
    sectors, so a bad catalog stops startup rather than rendering partially.
    """

    catalog_path = Path(path)
    try:
        data = json.loads(catalog_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Unable to read sector catalog {catalog_path}: {exc}") from exc

    try:
        shapes = _SHAPES_ADAPTER.validate_python(data)
    except ValidationError as exc:
        raise ValueError(f"Invalid sector catalog {catalog_path}: {exc}") from exc

    catalog = SectorCatalog(shapes)
    logger.info("Loaded %s sectors from %s", len(catalog), catalog_path)
    return catalog


def sector_outline(shape: SectorShape, points: int = 64) -> tuple[GeoPoint, ...]:
    """Return the sector boundary as a closed ring of points.

    Polygons are closed by repeating the first vertex; circles are
    approximated with ``points`` segments.
    """

    if shape.kind is SectorKind.POLYGON:
        vertices = tuple(shape.vertices or ())
        if vertices and vertices[0] != vertices[-1]:
            vertices += (vertices[0],)
        return vertices

    if points < 3:
        raise ValueError("points must be at least 3")
    delta = shape.radius_m / EARTH_MEAN_RADIUS_M
    ring = [
        destination_point(shape.center.lat, shape.center.lon, 360.0 * i / points, delta)
        for i in range(points)
    ]
    ring.append(ring[0])
    return tuple(ring)


__all__ = [
    "DEFAULT_SECTORS",
    "EARTH_MEAN_RADIUS_M",
    "SectorCatalog",
    "load_catalog",
    "sector_outline",
]
