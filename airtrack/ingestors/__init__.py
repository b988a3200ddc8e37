"""Data ingestors for the AirTrack overlay."""

from .adsb import ADSBIngestor, FetchError, UpstreamPayload

__all__ = ["ADSBIngestor", "FetchError", "UpstreamPayload"]
