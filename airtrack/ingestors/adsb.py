"""ADS-B ingestor for nearby air traffic from a readsb-style aggregator API."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging
from typing import Any

import httpx

from airtrack.config import settings

logger = logging.getLogger("airtrack.ingestors.adsb")

# Aggregators reject point queries beyond this radius.
MAX_RADIUS_NM = 250.0


class FetchError(RuntimeError):
    """Raised when the upstream aircraft feed cannot be retrieved or parsed."""


@dataclass
class UpstreamPayload:
    """Raw aircraft entries from one upstream response."""

    entries: list[Any]
    fetched_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


def _parse_timestamp(raw_ts: Any) -> datetime | None:
    if raw_ts is None or isinstance(raw_ts, bool):
        return None
    try:
        if isinstance(raw_ts, (int, float)):
            # readsb-style APIs report "now" in milliseconds since epoch
            seconds = raw_ts / 1000.0 if raw_ts > 1e11 else float(raw_ts)
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):  # pragma: no cover - defensive conversion
        logger.debug("Failed to parse ADS-B timestamp: %s", raw_ts)
    return None


class ADSBIngestor:
    """Fetch the aircraft around a point from an ADS-B aggregator."""

    def __init__(
        self,
        *,
        base_url: str | None = None,
        payload_field: str | None = None,
        timeout: float | None = None,
        api_key: str | None = None,
        api_key_header: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.adsb_base_url).rstrip("/")
        self.payload_field = payload_field or settings.adsb_payload_field
        self.timeout = timeout or settings.adsb_timeout
        self.api_key = api_key if api_key is not None else settings.adsb_api_key()
        self.api_key_header = api_key_header or settings.adsb_api_key_header
        self.transport = transport

    def build_url(self, lat: float, lon: float, radius_nm: float) -> str:
        radius = min(max(radius_nm, 0.0), MAX_RADIUS_NM)
        return f"{self.base_url}/point/{lat:.4f}/{lon:.4f}/{radius:g}"

    async def fetch_raw(self, lat: float, lon: float, radius_nm: float) -> UpstreamPayload:
        """Issue one GET and return the raw aircraft entries.

        Raises FetchError on timeouts, transport errors, non-2xx responses,
        invalid JSON and payloads whose top-level shape is not recognised.
        """

        url = self.build_url(lat, lon, radius_nm)
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[self.api_key_header] = self.api_key

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self.transport
            ) as client:
                response = await client.get(url, headers=headers)
        except httpx.TimeoutException as exc:
            logger.warning("ADS-B request timed out: %s", exc)
            raise FetchError("ADS-B request timed out") from exc
        except httpx.RequestError as exc:
            logger.warning("ADS-B request failed: %s", exc)
            raise FetchError("ADS-B request failed") from exc

        if response.status_code == 429:
            logger.warning("ADS-B provider rate limit encountered: %s", response.text)
            raise FetchError("ADS-B provider rate limited the request")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "ADS-B provider returned HTTP %s: %s", exc.response.status_code, exc
            )
            raise FetchError(f"ADS-B provider returned HTTP {exc.response.status_code}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            logger.warning("Failed to parse ADS-B JSON response: %s", exc)
            raise FetchError("ADS-B response is not valid JSON") from exc

        if not isinstance(payload, dict):
            logger.warning("Unexpected ADS-B payload type: %s", type(payload).__name__)
            raise FetchError("ADS-B payload is not a JSON object")

        entries = payload.get(self.payload_field)
        if entries is None:
            entries = []
        if not isinstance(entries, list):
            logger.warning(
                "ADS-B payload field %r is %s, expected a list",
                self.payload_field,
                type(entries).__name__,
            )
            raise FetchError(f"ADS-B payload field {self.payload_field!r} is not a list")

        result = UpstreamPayload(entries=entries)
        fetched_at = _parse_timestamp(payload.get("now"))
        if fetched_at is not None:
            result.fetched_at = fetched_at

        logger.debug("Fetched %s raw aircraft entries", len(entries))
        return result


__all__ = ["ADSBIngestor", "FetchError", "MAX_RADIUS_NM", "UpstreamPayload"]
