"""Filter and normalize raw upstream aircraft entries."""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from airtrack.models.aircraft import AircraftRecord

logger = logging.getLogger("airtrack.pipeline.validator")

_ID_KEYS = ("id", "hex", "icao")
_LAT_KEYS = ("lat", "latitude")
_LON_KEYS = ("lon", "lng", "longitude")
_TRACK_KEYS = ("track", "trk")
_SPEED_KEYS = ("groundSpeed", "ground_speed", "gs")
_ALTITUDE_KEYS = ("altitude", "alt_baro")
_FLIGHT_KEYS = ("flight", "flightLabel")
_TYPE_KEYS = ("aircraftType", "t", "type")
_REGISTRATION_KEYS = ("registration", "r")


def _first(entry: dict, keys: Iterable[str]) -> Any:
    for key in keys:
        value = entry.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        return value
    return None


def _to_float(value: Any) -> float | None:
    """Coerce numbers and numeric strings to a finite float."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(result):
        return None
    return result


def _to_id(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, (str, int)):
        return None
    normalized = str(value).strip().lower()
    return normalized or None


def _normalize_entry(entry: Any) -> Optional[AircraftRecord]:
    if not isinstance(entry, dict):
        return None

    aircraft_id = _to_id(_first(entry, _ID_KEYS))
    lat = _to_float(_first(entry, _LAT_KEYS))
    lon = _to_float(_first(entry, _LON_KEYS))
    if aircraft_id is None or lat is None or lon is None:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None

    ground_speed = _to_float(_first(entry, _SPEED_KEYS))
    if ground_speed is not None and ground_speed < 0:
        ground_speed = None

    try:
        return AircraftRecord(
            id=aircraft_id,
            lat=lat,
            lon=lon,
            track=_to_float(_first(entry, _TRACK_KEYS)),
            ground_speed=ground_speed,
            altitude=_first(entry, _ALTITUDE_KEYS),
            squawk=entry.get("squawk"),
            flight=_first(entry, _FLIGHT_KEYS),
            aircraft_type=_first(entry, _TYPE_KEYS),
            registration=_first(entry, _REGISTRATION_KEYS),
        )
    except ValidationError as exc:  # pragma: no cover - inputs are pre-coerced
        logger.debug("Dropping aircraft entry %s: %s", aircraft_id, exc)
        return None


def validate(raw: Any) -> list[AircraftRecord]:
    """Return the well-formed aircraft records contained in ``raw``.

    Entries without an id or a finite, in-range position are dropped. Input
    order is preserved; when an id repeats, the last occurrence wins and keeps
    its own position in the output. Never raises.
    """

    if not isinstance(raw, (list, tuple)):
        return []

    by_id: dict[str, AircraftRecord] = {}
    dropped = 0
    for entry in raw:
        record = _normalize_entry(entry)
        if record is None:
            dropped += 1
            continue
        by_id.pop(record.id, None)
        by_id[record.id] = record

    if dropped:
        logger.debug("Dropped %s malformed aircraft entries", dropped)
    return list(by_id.values())


__all__ = ["validate"]
