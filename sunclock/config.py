"""Observer location configuration resolved from the environment."""

from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

LOGGER = logging.getLogger(__name__)

ENV_LATITUDE = "SUNCLOCK_LAT"
ENV_LONGITUDE = "SUNCLOCK_LON"
ENV_ELEVATION = "SUNCLOCK_ELEV_M"
ENV_UTC_OFFSET = "SUNCLOCK_UTC_OFFSET"


class ConfigurationError(RuntimeError):
    """Raised when an environment variable holds an unusable value."""


@dataclass(frozen=True)
class ObserverLocation:
    """Default observer used when a caller does not supply coordinates."""

    latitude: float
    longitude: float
    elevation: float = 0.0
    utc_offset_hours: float = 0.0


# Bharatpur, Nepal (UTC+05:45).
DEFAULT_LOCATION = ObserverLocation(
    latitude=27.6706,
    longitude=84.4385,
    elevation=0.0,
    utc_offset_hours=5.75,
)


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if not math.isfinite(value):
        raise ConfigurationError(f"{name} must be finite, got {raw!r}")
    return value


def resolve_location(environ: Optional[Mapping[str, str]] = None) -> ObserverLocation:
    """Return the observer location configured through ``SUNCLOCK_*`` variables.

    Unset variables fall back to :data:`DEFAULT_LOCATION`. Range checks are
    left to the calculator, which rejects out-of-domain values itself.
    """

    env = os.environ if environ is None else environ
    location = ObserverLocation(
        latitude=_read_float(env, ENV_LATITUDE, DEFAULT_LOCATION.latitude),
        longitude=_read_float(env, ENV_LONGITUDE, DEFAULT_LOCATION.longitude),
        elevation=_read_float(env, ENV_ELEVATION, DEFAULT_LOCATION.elevation),
        utc_offset_hours=_read_float(env, ENV_UTC_OFFSET, DEFAULT_LOCATION.utc_offset_hours),
    )
    if not -24.0 < location.utc_offset_hours < 24.0:
        raise ConfigurationError(
            f"{ENV_UTC_OFFSET} must be within ±24 hours, got {location.utc_offset_hours}"
        )
    LOGGER.debug(
        json.dumps(
            {
                "event": "location_resolved",
                "lat": location.latitude,
                "lon": location.longitude,
                "elev_m": location.elevation,
                "offset_hours": location.utc_offset_hours,
            }
        )
    )
    return location
