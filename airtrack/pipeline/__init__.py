"""Validation and projection stages of the tracking pipeline."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from airtrack.models.aircraft import Snapshot

from .projection import ProjectionEngine, destination_point, project
from .validator import validate


def build_snapshot(
    raw: Any,
    engine: ProjectionEngine,
    *,
    sequence: int,
    fetched_at: datetime | None = None,
) -> Snapshot:
    """Run Validator then ProjectionEngine over ``raw`` and assemble a Snapshot."""

    records = validate(raw)
    segments = engine.project_all(records)
    return Snapshot(
        records=tuple(records),
        segments=tuple(segments),
        sequence=sequence,
        fetched_at=fetched_at,
    )


__all__ = ["ProjectionEngine", "build_snapshot", "destination_point", "project", "validate"]
