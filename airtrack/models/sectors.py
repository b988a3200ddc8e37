"""Static airspace sector shapes rendered alongside live traffic."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from airtrack.models.aircraft import GeoPoint


class SectorKind(str, Enum):
    """Supported sector geometries."""

    POLYGON = "polygon"
    CIRCLE = "circle"


class SectorStyle(BaseModel):
    """Display hints for a sector; interpretation is up to the renderer."""

    color: str = Field(default="#3388ff", description="Stroke color")
    fill_color: Optional[str] = Field(default=None, description="Fill color, stroke color if unset")
    fill_opacity: float = Field(default=0.1, ge=0.0, le=1.0)
    weight: float = Field(default=2.0, ge=0.0, description="Stroke width in pixels")
    dashed: bool = Field(default=False)

    model_config = ConfigDict(frozen=True)


class SectorShape(BaseModel):
    """A polygon or circle describing one airspace sector."""

    id: str = Field(..., min_length=1, description="Unique sector identifier")
    name: Optional[str] = Field(default=None, description="Human-readable sector name")
    kind: SectorKind = Field(..., description="Geometry kind")
    vertices: Optional[tuple[GeoPoint, ...]] = Field(
        default=None, description="Polygon vertices, required for polygons"
    )
    center: Optional[GeoPoint] = Field(default=None, description="Circle center")
    radius_m: Optional[float] = Field(default=None, description="Circle radius in meters")
    style: SectorStyle = Field(default_factory=SectorStyle)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_geometry(self) -> "SectorShape":
        if self.kind is SectorKind.POLYGON:
            if not self.vertices or len(self.vertices) < 3:
                raise ValueError(f"polygon sector {self.id!r} needs at least 3 vertices")
            if self.center is not None or self.radius_m is not None:
                raise ValueError(f"polygon sector {self.id!r} must not define center/radius")
        else:
            if self.center is None or self.radius_m is None:
                raise ValueError(f"circle sector {self.id!r} needs center and radius_m")
            if self.radius_m <= 0:
                raise ValueError(f"circle sector {self.id!r} radius must be positive")
            if self.vertices is not None:
                raise ValueError(f"circle sector {self.id!r} must not define vertices")
        return self


__all__ = ["SectorKind", "SectorShape", "SectorStyle"]
