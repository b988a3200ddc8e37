"""Configuration settings for the AirTrack overlay."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger("airtrack.config")


def _get_bool(env_var: str, default: bool = False) -> bool:
    """Parse an environment variable into a boolean with a default."""

    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def _get_ssm_client():
    # Default to a region so client creation does not fail in environments
    # without AWS configuration (e.g. CI test runners).
    return boto3.client(
        "ssm",
        region_name=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or "us-east-1",
    )


@lru_cache(maxsize=4)
def get_adsb_api_key(parameter_name: str) -> str:
    """Fetch the upstream ADS-B API key from AWS SSM Parameter Store.

    The value is cached in-memory to avoid repeated SSM calls. Any failure to
    retrieve the key results in a runtime error so the caller fails fast.
    """

    try:
        response = _get_ssm_client().get_parameter(
            Name=parameter_name, WithDecryption=True
        )
        value = response.get("Parameter", {}).get("Value")
    except (ClientError, BotoCoreError) as exc:  # pragma: no cover - AWS error passthrough
        logger.error("Failed to load ADS-B API key from SSM: %s", exc)
        raise RuntimeError("Unable to load ADS-B API key from SSM") from exc

    if not value:
        logger.error("Received empty ADS-B API key from SSM (%s)", parameter_name)
        raise RuntimeError("ADS-B API key not configured in SSM")

    return value


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    airtrack_env: str = os.getenv("AIRTRACK_ENV", "local")
    log_level: str = os.getenv("AIRTRACK_LOG_LEVEL", "INFO")

    # Upstream ADS-B aggregator
    adsb_base_url: str = os.getenv("ADSB_BASE_URL", "https://api.airplanes.live/v2")
    adsb_payload_field: str = os.getenv("ADSB_PAYLOAD_FIELD", "ac")
    adsb_timeout: float = float(os.getenv("ADSB_TIMEOUT", "5.0"))
    adsb_api_key_header: str = os.getenv("ADSB_API_KEY_HEADER", "api-auth")
    adsb_api_key_param: str | None = os.getenv("ADSB_API_KEY_PARAM")

    # Tracked region
    tracking_center_lat: float = float(os.getenv("TRACKING_CENTER_LAT", "41.2"))
    tracking_center_lon: float = float(os.getenv("TRACKING_CENTER_LON", "-8.6"))
    tracking_radius_nm: float = float(os.getenv("TRACKING_RADIUS_NM", "40.0"))

    # Refresh cadence
    enable_poller: bool = _get_bool("ENABLE_POLLER", default=True)
    poll_interval_seconds: float = float(os.getenv("POLL_INTERVAL_SECONDS", "5.0"))
    poll_max_backoff_seconds: float = float(os.getenv("POLL_MAX_BACKOFF_SECONDS", "60.0"))

    # Heading projection
    projection_horizon_minutes: float = float(
        os.getenv("PROJECTION_HORIZON_MINUTES", "1.0")
    )
    projection_arc_minutes_per_nm: float = float(
        os.getenv("PROJECTION_ARC_MINUTES_PER_NM", "1.0")
    )

    sector_catalog_path: str | None = os.getenv("SECTOR_CATALOG_PATH")

    def adsb_api_key(self) -> str | None:
        """Return the upstream API key, or None when no SSM parameter is configured."""

        if not self.adsb_api_key_param:
            return None
        return get_adsb_api_key(self.adsb_api_key_param)


settings = Settings()

__all__ = ["settings", "Settings", "get_adsb_api_key"]
